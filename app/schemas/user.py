"""Request/response schemas for the authenticated user's own endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.transactions import Transaction


class UserOut(BaseModel):
    """User payload returned by login, register, verify-token and dashboard."""

    id: str
    nickname: str
    user_id: str
    role: str
    verified: bool = True
    cwt: float
    cws: int
    phone: str
    province: str
    wallet_address: str
    notifications: bool
    created_at: str | None = None


class VerifyTokenResponse(BaseModel):
    success: bool = True
    user: UserOut


class DashboardSummary(BaseModel):
    total_balance: float
    total_cwt: float
    total_cws: int
    recent_transactions: list[Transaction] = Field(default_factory=list)
    last_login: str


class DashboardResponse(BaseModel):
    success: bool = True
    user: UserOut
    dashboard: DashboardSummary


class ProfileOut(BaseModel):
    id: str | None = None
    nickname: str
    user_id: str | None = None
    phone: str
    province: str
    wallet_address: str
    notifications: bool
    created_at: str | None = None
    updated_at: str | None = None


class ProfileResponse(BaseModel):
    success: bool = True
    message: str | None = None
    profile: ProfileOut


class ProfileUpdateRequest(BaseModel):
    """Profile update body. Fields are loosely typed; checks happen in the account service."""

    model_config = {"extra": "ignore"}

    nickname: str | None = None
    phone: str | None = None
    province: str | None = None
    wallet_address: str | None = None
    notifications: Any = None


class BalanceOut(BaseModel):
    cwt: float
    cws: int
    total: float
    currency: str = "USD"
    last_updated: str


class BalanceResponse(BaseModel):
    success: bool = True
    balance: BalanceOut


class ChangePasswordRequest(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}

    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")
    confirm_password: str | None = Field(default=None, alias="confirmPassword")
