"""Request/response schemas for admin endpoints (user listing, balance and role changes)."""

from typing import Any

from pydantic import BaseModel, Field

from app.schemas.identity import UserProfile
from app.schemas.transactions import BalanceSnapshot, Transaction


class UsersListResponse(BaseModel):
    """Response for GET /api/admin/users."""

    success: bool = True
    total_users: int
    current_page: int
    total_pages: int
    users: list[UserProfile]


class UserStatistics(BaseModel):
    total_transactions: int
    total_deposits: int
    total_withdrawals: int


class UserDetailResponse(BaseModel):
    """Response for GET /api/admin/users/{user_id}."""

    success: bool = True
    user: UserProfile
    transactions: list[Transaction] = Field(default_factory=list)
    balance_history: list[dict[str, Any]] = Field(default_factory=list)
    statistics: UserStatistics


class BalanceUpdateRequest(BaseModel):
    """
    Admin balance adjustment. cwt/cws accept anything; missing or non-numeric
    values count as 0. Any operation other than add/subtract is an absolute set.
    """

    model_config = {"extra": "ignore"}

    cwt: Any = None
    cws: Any = None
    operation: Any = None
    reason: str | None = None


class BalanceChange(BaseModel):
    previous: BalanceSnapshot
    current: BalanceSnapshot
    operation: str
    reason: str
    updated_by: str
    timestamp: str


class BalanceTarget(BaseModel):
    id: str
    nickname: str
    user_id: str
    balance: BalanceChange


class BalanceUpdateResponse(BaseModel):
    success: bool = True
    message: str
    user: BalanceTarget


class RoleUpdateRequest(BaseModel):
    model_config = {"extra": "ignore"}

    role: Any = None


class RoleChange(BaseModel):
    id: str
    nickname: str
    user_id: str
    previous_role: str
    new_role: str
    updated_by: str
    timestamp: str


class RoleUpdateResponse(BaseModel):
    success: bool = True
    message: str
    user: RoleChange
