"""JWT issuance and validation.

Tokens are HS256-signed with the configured symmetric secret and carry:

    sub / nameid   user id (as a string)
    unique_name    username
    email, role
    jti            unique token id
    iat, nbf, exp  issue time, not-before, expiry (unix seconds)
    iss, aud       configured issuer and audience

Validation has no clock-skew tolerance and accepts HS256 only.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pokeleague.core.errors import InternalError
from pokeleague.core.user import User, UserRole
from pokeleague.utils.config import MIN_SECRET_LENGTH, Settings
from pokeleague.utils.helpers import utcnow
from pokeleague.utils.logging import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"

# Claim names
CLAIM_NAME_IDENTIFIER = "nameid"
CLAIM_NAME = "unique_name"
CLAIM_EMAIL = "email"
CLAIM_ROLE = "role"


class TokenClaims(BaseModel):
    """The verified content of a token."""

    user_id: int
    username: str
    email: str
    role: UserRole
    jti: str
    issued_at: datetime
    expires_at: datetime
    raw: dict[str, Any]

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TokenClaims:
        return cls(
            user_id=payload[CLAIM_NAME_IDENTIFIER],
            username=payload[CLAIM_NAME],
            email=payload[CLAIM_EMAIL],
            role=payload[CLAIM_ROLE],
            jti=payload["jti"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            raw=payload,
        )


class TokenService:
    """Signs and verifies access tokens."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = utcnow):
        if not settings.jwt_secret_key or len(settings.jwt_secret_key) < MIN_SECRET_LENGTH:
            raise InternalError(f"The JWT secret key must be at least {MIN_SECRET_LENGTH} characters long.")
        self._secret = settings.jwt_secret_key
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience
        self._expiry_minutes = settings.jwt_expiry_minutes
        self._clock = clock

    @property
    def expiry_minutes(self) -> int:
        return self._expiry_minutes

    def expires_at(self, issued_at: datetime | None = None) -> datetime:
        """Expiry of a token issued at ``issued_at`` (defaults to now)."""
        return (issued_at or self._clock()) + timedelta(minutes=self._expiry_minutes)

    def generate_token(self, user: User) -> str:
        if user is None or user.id is None:
            raise InternalError("Cannot issue a token for a user without an id.")

        issued_at = self._clock()
        iat = int(issued_at.timestamp())
        claims = {
            "sub": str(user.id),
            CLAIM_NAME_IDENTIFIER: str(user.id),
            CLAIM_NAME: user.username,
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: UserRole(user.role).value,
            "jti": str(uuid.uuid4()),
            "iat": iat,
            "nbf": iat,
            "exp": int(self.expires_at(issued_at).timestamp()),
            "iss": self._issuer,
            "aud": self._audience,
        }
        token = jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        logger.info("Token issued", user_id=user.id, username=user.username)
        return token

    def validate_token(self, token: str | None) -> TokenClaims | None:
        """Verify a token. Returns None for any failure."""
        if not token:
            logger.warning("Empty token presented for validation")
            return None

        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            logger.warning("Malformed token")
            return None
        if str(header.get("alg", "")).upper() != ALGORITHM:
            logger.warning("Token signed with an unexpected algorithm", alg=header.get("alg"))
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "leeway": 0,
                    "require_exp": True,
                    "require_iat": True,
                    "require_sub": True,
                    "require_jti": True,
                },
            )
        except ExpiredSignatureError:
            logger.warning("Token expired")
            return None
        except JWTClaimsError as e:
            logger.warning("Token claims rejected", error=str(e))
            return None
        except JWTError as e:
            logger.warning("Token rejected", error=str(e))
            return None

        try:
            claims = TokenClaims.from_payload(payload)
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.warning("Token is missing required claims", error=str(e))
            return None

        logger.debug("Token validated", username=claims.username)
        return claims

    def get_user_id(self, token: str) -> int | None:
        claims = self.validate_token(token)
        return claims.user_id if claims else None

    def get_username(self, token: str) -> str | None:
        claims = self.validate_token(token)
        return claims.username if claims else None

    def is_expired(self, token: str) -> bool:
        """True when the token's exp is in the past or it cannot be read."""
        if not token:
            return True
        try:
            exp = jwt.get_unverified_claims(token).get("exp")
        except JWTError:
            return True
        if exp is None:
            return True
        return datetime.fromtimestamp(exp, tz=timezone.utc) < self._clock()
