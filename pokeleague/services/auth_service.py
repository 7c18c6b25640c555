"""Account registration, login and role management.

Users leaving this service never carry their password hash.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from pokeleague.core.auth import get_password_hash, verify_password
from pokeleague.core.errors import ValidationError
from pokeleague.core.user import PublicUser, User, UserRole
from pokeleague.data.repositories import UserRepository
from pokeleague.services.token_service import TokenService
from pokeleague.utils.config import Settings
from pokeleague.utils.helpers import is_blank, utcnow
from pokeleague.utils.logging import get_logger

logger = get_logger(__name__)

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 100


class AuthResult(BaseModel):
    """A freshly issued token and the user it belongs to."""

    token: str
    expires_at: datetime
    user: PublicUser


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _validate_password(password: str, label: str = "Password") -> None:
    if is_blank(password) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long.")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError(f"{label} must be at most {MAX_PASSWORD_LENGTH} characters long.")


class AuthService:
    """User store front-end: credentials in, tokens out."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.users = users
        self.tokens = tokens
        self._password_rounds = settings.bcrypt_rounds
        self._login_delay_ms = (settings.login_delay_min_ms, settings.login_delay_max_ms)
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    def register(
        self,
        username: str,
        password: str,
        confirm_password: str,
        email: str,
    ) -> AuthResult | None:
        """Create a ``User``-role account and sign it in.

        Returns None when the username or email is already taken (compared
        without regard to case).
        """
        logger.info("Registration attempt", username=username)

        if is_blank(username) or len(username.strip()) < MIN_USERNAME_LENGTH:
            raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters long.")
        if len(username.strip()) > MAX_USERNAME_LENGTH:
            raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters long.")
        _validate_password(password)
        if password != confirm_password:
            raise ValidationError("Password confirmation does not match.")
        if is_blank(email) or not _is_valid_email(email):
            raise ValidationError("Invalid email address.")

        username = username.strip()
        email = email.strip()
        password_hash = get_password_hash(password, rounds=self._password_rounds)

        with self.users.locked():
            if self.users.get_by_username(username) is not None:
                logger.warning("Registration with an existing username", username=username)
                return None
            if self.users.get_by_email(email) is not None:
                logger.warning("Registration with an existing email", email=email)
                return None
            user = self.users.add(
                User(username=username, email=email, password_hash=password_hash, role=UserRole.USER)
            )

        logger.info("User registered", username=user.username, user_id=user.id)
        return self._issue(user)

    def login(self, username: str, password: str) -> AuthResult | None:
        """Check credentials and issue a token.

        A random delay precedes the lookup so response time says little about
        whether the account exists. Returns None for unknown or inactive
        users and wrong passwords.
        """
        if is_blank(username):
            raise ValidationError("Username is required.")
        if is_blank(password):
            raise ValidationError("Password is required.")

        logger.info("Login attempt", username=username)
        low, high = self._login_delay_ms
        if high > 0:
            self._sleep(random.randint(low, high) / 1000)

        user = self.users.get_by_username(username)
        if user is None or not user.is_active:
            logger.warning("Login for unknown or inactive user", username=username)
            return None
        if not verify_password(password, user.password_hash):
            logger.warning("Login with wrong password", username=username)
            return None

        # The hash is checked outside the lock; only the write is serialized.
        with self.users.locked():
            current = self.users.get_by_id(user.id)
            if current is None or not current.is_active or current.password_hash != user.password_hash:
                logger.warning("Account changed during login", username=username)
                return None
            current.last_login_at = utcnow()
            self.users.update(current)
            user = current

        logger.info("Login succeeded", username=user.username, user_id=user.id)
        return self._issue(user)

    def refresh(self, user_id: int) -> AuthResult | None:
        """Issue a new token for a still-active user."""
        user = self.users.get_by_id(user_id)
        if user is None or not user.is_active:
            logger.warning("Token refresh for unknown or inactive user", user_id=user_id)
            return None
        logger.info("Token refreshed", username=user.username, user_id=user.id)
        return self._issue(user)

    def _issue(self, user: User) -> AuthResult:
        token = self.tokens.generate_token(user)
        return AuthResult(
            token=token,
            expires_at=self.tokens.expires_at(),
            user=user.to_public(),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def user_exists(self, username: str) -> bool:
        if is_blank(username):
            return False
        return self.users.get_by_username(username) is not None

    def get_user_by_username(self, username: str) -> User | None:
        if is_blank(username):
            return None
        user = self.users.get_by_username(username)
        return user.without_secrets() if user else None

    def get_user_by_id(self, user_id: int) -> User | None:
        user = self.users.get_by_id(user_id)
        return user.without_secrets() if user else None

    def get_all_users(self) -> list[User]:
        """Active users only."""
        return [u.without_secrets() for u in self.users.find(lambda u: u.is_active)]

    def validate_credentials(self, username: str, password: str) -> bool:
        user = self.users.get_by_username(username) if not is_blank(username) else None
        if user is None or not user.is_active:
            return False
        return verify_password(password, user.password_hash)

    # ------------------------------------------------------------------
    # Account changes
    # ------------------------------------------------------------------

    def change_password(self, user_id: int, old_password: str, new_password: str) -> bool:
        """Replace a password after checking the old one. False on mismatch."""
        _validate_password(new_password, "New password")
        new_hash = get_password_hash(new_password, rounds=self._password_rounds)

        user = self.users.get_by_id(user_id)
        if user is None or not user.is_active:
            return False
        if not verify_password(old_password, user.password_hash):
            logger.warning("Password change with wrong current password", user_id=user_id)
            return False

        with self.users.locked():
            current = self.users.get_by_id(user_id)
            if current is None or not current.is_active or current.password_hash != user.password_hash:
                logger.warning("Account changed during password change", user_id=user_id)
                return False
            current.password_hash = new_hash
            self.users.update(current)

        logger.info("Password changed", user_id=user_id)
        return True

    def update_user_role(self, user_id: int, new_role: str) -> bool:
        """Set a user's role. False when the user is absent or inactive."""
        if is_blank(new_role):
            raise ValidationError("Role cannot be empty.")
        try:
            role = UserRole(new_role)
        except ValueError:
            raise ValidationError(
                f"Invalid role '{new_role}'. Expected one of: {', '.join(r.value for r in UserRole)}."
            ) from None

        with self.users.locked():
            user = self.users.get_by_id(user_id)
            if user is None or not user.is_active:
                return False
            user.role = role
            self.users.update(user)

        logger.info("User role updated", username=user.username, role=role.value)
        return True
