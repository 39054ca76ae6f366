"""Pydantic schemas for the (sample) transaction history."""

from typing import Literal

from pydantic import BaseModel, Field

TransactionType = Literal["deposit", "withdrawal", "transfer", "admin_add", "admin_subtract", "admin_set"]
TransactionStatus = Literal["pending", "completed", "failed"]


class Transaction(BaseModel):
    """One entry of a user's transaction history."""

    transaction_id: str
    type: TransactionType
    status: TransactionStatus
    amount_cwt: float = 0.0
    amount_cws: int = 0
    description: str = ""
    created_at: str
    completed_at: str | None = None


class BalanceSnapshot(BaseModel):
    cwt: float
    cws: int


class TransactionsResponse(BaseModel):
    """Response for GET /api/user/transactions."""

    success: bool = True
    transactions: list[Transaction] = Field(default_factory=list)
    total: int
    current_page: int
    total_pages: int
    balance: BalanceSnapshot
