"""Endpoints for the authenticated user's own dashboard, profile, balance, password and transactions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.auth import get_account_service, get_current_user
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.transactions import BalanceSnapshot, TransactionsResponse
from app.schemas.user import (
    BalanceOut,
    BalanceResponse,
    ChangePasswordRequest,
    DashboardResponse,
    DashboardSummary,
    ProfileResponse,
    ProfileUpdateRequest,
)
from app.services import transactions
from app.services.accounts import AccountService
from app.services.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, paginate
from app.services.profiles import profile_from_identity, profile_out, user_out, utc_now_iso

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> DashboardResponse:
    profile = profile_from_identity(current_user.identity)
    return DashboardResponse(
        user=user_out(profile),
        dashboard=DashboardSummary(
            total_balance=profile.cwt + profile.cws,
            total_cwt=profile.cwt,
            total_cws=profile.cws,
            recent_transactions=transactions.recent_transactions(),
            last_login=utc_now_iso(),
        ),
    )


@router.get("/user/profile", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ProfileResponse:
    return ProfileResponse(profile=profile_out(profile_from_identity(current_user.identity)))


@router.put("/user/profile", response_model=ProfileResponse)
async def put_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ProfileResponse:
    """Update nickname, phone, province, wallet and notification preference."""
    profile = await accounts.update_profile(
        current_user.identity,
        nickname=body.nickname,
        phone=body.phone,
        province=body.province,
        wallet_address=body.wallet_address,
        notifications=body.notifications,
    )
    return ProfileResponse(message="Profile updated.", profile=profile_out(profile))


@router.get("/user/balance", response_model=BalanceResponse)
def get_balance(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> BalanceResponse:
    profile = profile_from_identity(current_user.identity)
    return BalanceResponse(
        balance=BalanceOut(
            cwt=profile.cwt,
            cws=profile.cws,
            total=profile.cwt + profile.cws,
            last_updated=utc_now_iso(),
        )
    )


@router.post("/user/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    await accounts.change_password(
        current_user.identity,
        current_password=body.current_password,
        new_password=body.new_password,
        confirm_password=body.confirm_password,
    )
    return MessageResponse(message="Password updated successfully.")


@router.get("/user/transactions", response_model=TransactionsResponse)
def get_transactions(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    type: Annotated[str | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    start_date: Annotated[str | None, Query(alias="startDate")] = None,
    end_date: Annotated[str | None, Query(alias="endDate")] = None,
) -> TransactionsResponse:
    """Transaction history (fixed sample data) with type/status/date-range filters and pagination."""
    items = transactions.list_transactions(
        type_filter=type,
        status_filter=status,
        start_date=start_date,
        end_date=end_date,
    )
    page_items, total_pages = paginate(items, page, limit)
    profile = profile_from_identity(current_user.identity)
    return TransactionsResponse(
        transactions=page_items,
        total=len(items),
        current_page=page,
        total_pages=total_pages,
        balance=BalanceSnapshot(cwt=profile.cwt, cws=profile.cws),
    )
