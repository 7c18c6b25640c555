"""Authentication endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from pokeleague.api.deps import AdminUser, CurrentUser, ServicesDep, get_token_claims
from pokeleague.core.errors import AuthError, NotFoundError
from pokeleague.core.user import PublicUser
from pokeleague.services.auth_service import AuthResult
from pokeleague.services.token_service import TokenClaims

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str
    password: str
    confirm_password: str
    email: str


class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class RoleUpdateRequest(BaseModel):
    role: str


class TokenInfo(BaseModel):
    valid: bool = True
    user_id: int
    username: str
    email: str
    role: str
    expires_at: datetime


@router.post("/register", response_model=AuthResult)
def register(body: RegisterRequest, services: ServicesDep):
    result = services.auth.register(body.username, body.password, body.confirm_password, body.email)
    if result is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username or email already in use")
    return result


@router.post("/login", response_model=AuthResult)
def login(body: LoginRequest, services: ServicesDep):
    result = services.auth.login(body.username, body.password)
    if result is None:
        raise AuthError("Incorrect username or password")
    return result


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    services: ServicesDep,
):
    result = services.auth.login(form_data.username, form_data.password)
    if result is None:
        raise AuthError("Incorrect username or password")
    return Token(access_token=result.token)


@router.get("/validate", response_model=TokenInfo)
def validate(claims: Annotated[TokenClaims, Depends(get_token_claims)]):
    return TokenInfo(
        user_id=claims.user_id,
        username=claims.username,
        email=claims.email,
        role=claims.role.value,
        expires_at=claims.expires_at,
    )


@router.post("/refresh", response_model=AuthResult)
def refresh(claims: Annotated[TokenClaims, Depends(get_token_claims)], services: ServicesDep):
    result = services.auth.refresh(claims.user_id)
    if result is None:
        raise AuthError("User no longer exists or is inactive")
    return result


@router.get("/me", response_model=PublicUser)
def read_users_me(current_user: CurrentUser):
    return current_user.to_public()


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(body: ChangePasswordRequest, current_user: CurrentUser, services: ServicesDep):
    if not services.auth.change_password(current_user.id, body.current_password, body.new_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")


@router.get("/users", response_model=list[PublicUser])
def list_users(admin: AdminUser, services: ServicesDep):
    return [u.to_public() for u in services.auth.get_all_users()]


@router.put("/users/{user_id}/role", response_model=PublicUser)
def update_role(user_id: int, body: RoleUpdateRequest, admin: AdminUser, services: ServicesDep):
    if not services.auth.update_user_role(user_id, body.role):
        raise NotFoundError(f"User with ID {user_id} not found.")
    return services.auth.get_user_by_id(user_id).to_public()
