"""Admin endpoints: list/inspect users, adjust balances, assign roles (admin role required)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.auth import get_directory, require_admin
from app.schemas.admin import (
    BalanceUpdateRequest,
    BalanceUpdateResponse,
    RoleUpdateRequest,
    RoleUpdateResponse,
    UserDetailResponse,
    UsersListResponse,
)
from app.schemas.auth import CurrentUser
from app.services import admin as admin_service
from app.services.directory import IdentityDirectory
from app.services.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


@router.get("/users", response_model=UsersListResponse)
async def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
    search: Annotated[str, Query(max_length=100)] = "",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> UsersListResponse:
    """List users, newest first; search matches nickname, public user id or phone."""
    return await admin_service.list_users(directory, search=search, page=page, limit=limit)


@router.get("/users/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
) -> UserDetailResponse:
    return await admin_service.get_user_detail(directory, user_id)


@router.put("/users/{user_id}/balance", response_model=BalanceUpdateResponse)
async def put_user_balance(
    user_id: str,
    body: BalanceUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
) -> BalanceUpdateResponse:
    """
    Adjust a user's balances. operation "add" and "subtract" are relative; anything
    else sets absolute values. Results never go below zero.
    """
    target = await admin_service.update_balance(
        directory,
        admin,
        user_id,
        cwt=body.cwt,
        cws=body.cws,
        operation=body.operation,
        reason=body.reason,
    )
    return BalanceUpdateResponse(message="Balance updated.", user=target)


@router.put("/users/{user_id}/role", response_model=RoleUpdateResponse)
async def put_user_role(
    user_id: str,
    body: RoleUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
) -> RoleUpdateResponse:
    change = await admin_service.update_role(directory, admin, user_id, body.role)
    return RoleUpdateResponse(message=f"Role updated to {change.new_role}.", user=change)
