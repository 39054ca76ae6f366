"""Pydantic request/response schemas."""

from app.schemas.admin import (
    BalanceUpdateRequest,
    BalanceUpdateResponse,
    RoleUpdateRequest,
    RoleUpdateResponse,
    UsersListResponse,
)
from app.schemas.auth import AuthResponse, CurrentUser, LoginRequest, RegisterRequest
from app.schemas.identity import DirectorySession, Identity, Role, UserProfile
from app.schemas.status import StatusResponse
from app.schemas.transactions import Transaction, TransactionsResponse
from app.schemas.user import UserOut

__all__ = [
    "AuthResponse",
    "BalanceUpdateRequest",
    "BalanceUpdateResponse",
    "CurrentUser",
    "DirectorySession",
    "Identity",
    "LoginRequest",
    "RegisterRequest",
    "Role",
    "RoleUpdateRequest",
    "RoleUpdateResponse",
    "StatusResponse",
    "Transaction",
    "TransactionsResponse",
    "UserOut",
    "UserProfile",
    "UsersListResponse",
]
