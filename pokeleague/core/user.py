"""API user accounts."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from pokeleague.utils.helpers import utcnow


class UserRole(str, Enum):
    """Roles recognised by the authorization policies."""

    USER = "User"
    TRAINER = "Trainer"
    ADMIN = "Admin"


class PublicUser(BaseModel):
    """User fields that are safe to send to a client."""

    id: int
    username: str
    email: str
    role: UserRole
    created_at: datetime
    last_login_at: datetime | None = None
    is_active: bool = True


class User(BaseModel):
    """A stored account, password hash included."""

    id: int | None = None
    username: str
    email: str
    password_hash: str = ""
    role: UserRole = UserRole.USER
    created_at: datetime = Field(default_factory=utcnow)
    last_login_at: datetime | None = None
    is_active: bool = True

    def without_secrets(self) -> "User":
        """Copy of the user with the password hash blanked."""
        return self.model_copy(update={"password_hash": ""})

    def to_public(self) -> PublicUser:
        return PublicUser(**self.model_dump(exclude={"password_hash"}))
