"""Admin operations: list and inspect users, adjust balances, assign roles.

Balance updates are a read-modify-write of the identity metadata. The directory offers
no conditional writes, so two concurrent adjustments of the same user can lose one
(last write wins). Adjustments are logged, not persisted as history.
"""

import logging
from typing import Any

from app.core.errors import NotFoundError
from app.schemas.admin import (
    BalanceChange,
    BalanceTarget,
    RoleChange,
    UserDetailResponse,
    UsersListResponse,
    UserStatistics,
)
from app.schemas.auth import CurrentUser
from app.schemas.identity import UserProfile
from app.schemas.transactions import BalanceSnapshot
from app.services import transactions
from app.services.balance import apply_operation, normalize_operation
from app.services.directory import IdentityDirectory
from app.services.pagination import DEFAULT_PAGE_SIZE, paginate
from app.services.profiles import profile_from_identity, utc_now_iso
from app.services.roles import set_role

logger = logging.getLogger(__name__)

DEFAULT_BALANCE_REASON = "Administrative balance update"


def _matches_search(profile: UserProfile, needle: str) -> bool:
    return any(needle in field.casefold() for field in (profile.nickname, profile.user_id, profile.phone))


async def list_users(
    directory: IdentityDirectory,
    search: str = "",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> UsersListResponse:
    """Profiles of all identities, newest first, filtered by nickname/user_id/phone substring."""
    profiles = [profile_from_identity(i) for i in await directory.list_all()]
    needle = (search or "").strip().casefold()
    if needle:
        profiles = [p for p in profiles if _matches_search(p, needle)]
    profiles.sort(key=lambda p: p.created_at or "", reverse=True)
    page_items, total_pages = paginate(profiles, page, limit)
    return UsersListResponse(
        total_users=len(profiles),
        current_page=max(1, page),
        total_pages=total_pages,
        users=page_items,
    )


async def get_user_detail(directory: IdentityDirectory, user_id: str) -> UserDetailResponse:
    identity = await directory.get_by_id(user_id)
    if identity is None:
        raise NotFoundError("User not found.")
    history = transactions.list_transactions()[:20]
    return UserDetailResponse(
        user=profile_from_identity(identity),
        transactions=history,
        balance_history=[],
        statistics=UserStatistics(
            total_transactions=len(history),
            total_deposits=sum(1 for t in history if "deposit" in t.type),
            total_withdrawals=sum(1 for t in history if "withdrawal" in t.type),
        ),
    )


async def update_balance(
    directory: IdentityDirectory,
    admin: CurrentUser,
    user_id: str,
    cwt: Any,
    cws: Any,
    operation: Any,
    reason: str | None,
) -> BalanceTarget:
    """Apply an add/subtract/set adjustment to the target's balances, clamped at zero."""
    target = await directory.get_by_id(user_id)
    if target is None:
        raise NotFoundError("User not found.")

    before = profile_from_identity(target)
    op = normalize_operation(operation)
    new_cwt, new_cws = apply_operation(before.cwt, before.cws, cwt, cws, op)
    timestamp = utc_now_iso()
    await directory.update_metadata(
        user_id, {"cwt": new_cwt, "cws": new_cws, "updated_at": timestamp}
    )

    reason_text = reason or DEFAULT_BALANCE_REASON
    logger.info(
        "Balance updated",
        extra={
            "target_id": user_id,
            "admin_id": admin.id,
            "operation": op,
            "previous_cwt": before.cwt,
            "previous_cws": before.cws,
            "new_cwt": new_cwt,
            "new_cws": new_cws,
            "reason": reason_text[:200],
        },
    )
    return BalanceTarget(
        id=target.id,
        nickname=before.nickname,
        user_id=before.user_id,
        balance=BalanceChange(
            previous=BalanceSnapshot(cwt=before.cwt, cws=before.cws),
            current=BalanceSnapshot(cwt=new_cwt, cws=new_cws),
            operation=op,
            reason=reason_text,
            updated_by=admin.display_name,
            timestamp=timestamp,
        ),
    )


async def update_role(
    directory: IdentityDirectory,
    admin: CurrentUser,
    user_id: str,
    role: Any,
) -> RoleChange:
    assignment = await set_role(directory, user_id, role)
    profile = profile_from_identity(assignment.identity)
    logger.info(
        "Role updated",
        extra={
            "target_id": user_id,
            "admin_id": admin.id,
            "previous_role": assignment.previous_role,
            "new_role": profile.role,
        },
    )
    return RoleChange(
        id=profile.id,
        nickname=profile.nickname,
        user_id=profile.user_id,
        previous_role=assignment.previous_role,
        new_role=profile.role,
        updated_by=admin.display_name,
        timestamp=utc_now_iso(),
    )
