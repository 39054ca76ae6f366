"""Request/response schemas for registration, login and logout."""

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.identity import Identity
from app.schemas.user import UserOut


class RegisterRequest(BaseModel):
    """Registration body. Shape checks happen in the account service so failures read as 400s."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    nickname: str | None = None
    password: str | None = None
    terms_accepted: Any = Field(default=False, alias="termsAccepted")


class LoginRequest(BaseModel):
    """Credentials for login."""

    model_config = {"extra": "ignore"}

    nickname: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    """Session token and user returned after register or login."""

    success: bool = True
    message: str
    nickname: str | None = None
    token: str | None = Field(default=None, description="Bearer session token")
    user: UserOut


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class CurrentUser(BaseModel):
    """Authenticated caller (identity plus the bearer token it presented) for dependency injection."""

    identity: Identity
    access_token: str

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def role(self) -> str | None:
        return self.identity.role

    @property
    def display_name(self) -> str:
        return self.identity.nickname or self.identity.email
