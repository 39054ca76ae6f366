"""Identity records as returned by the identity directory, and the profile view derived from them."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Role = Literal["admin", "moderator", "user"]

ROLE_VALUES: frozenset[str] = frozenset({"admin", "moderator", "user"})


class Identity(BaseModel):
    """
    One account in the identity directory.

    Balances, role and profile fields live in ``user_metadata``; the email is a
    synthetic, provider-internal login handle.
    """

    model_config = {"extra": "ignore"}

    id: str = Field(..., min_length=1, description="Directory identity id.")
    email: str = Field(default="", description="Synthetic provider-internal email.")
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _none_email(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("user_metadata", mode="before")
    @classmethod
    def _none_metadata(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def nickname(self) -> str:
        value = self.user_metadata.get("nickname")
        return value if isinstance(value, str) else ""

    @property
    def role(self) -> str | None:
        value = self.user_metadata.get("role")
        return value if isinstance(value, str) else None


class DirectorySession(BaseModel):
    """Session issued by the directory after a successful credential check."""

    access_token: str = Field(..., min_length=1)
    token_type: str = "bearer"
    expires_in: int | None = None
    identity: Identity


class UserProfile(BaseModel):
    """Identity metadata with every field defaulted; the shape all user payloads are built from."""

    id: str
    email: str = ""
    nickname: str = ""
    user_id: str = ""
    role: str = "user"
    cwt: float = 0.0
    cws: int = 0
    phone: str = ""
    province: str = ""
    wallet_address: str = ""
    notifications: bool = True
    created_at: str | None = None
    updated_at: str | None = None
    last_sign_in_at: str | None = None
