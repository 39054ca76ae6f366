"""Role guard and role assignment."""

import logging
from dataclasses import dataclass
from typing import Any

from app.core.errors import InvalidRoleError, NotFoundError
from app.schemas.identity import ROLE_VALUES, Identity
from app.services.directory import IdentityDirectory

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
DEFAULT_ROLE = "user"


def is_admin(caller_role: Any) -> bool:
    """True only for the exact, case-sensitive string "admin"."""
    return isinstance(caller_role, str) and caller_role == ADMIN_ROLE


def validate_role(role: Any) -> str:
    """Return ``role`` if it is admin, moderator or user; raise InvalidRoleError otherwise."""
    if not isinstance(role, str) or role not in ROLE_VALUES:
        raise InvalidRoleError(
            "Invalid role. Allowed roles: admin, user, moderator."
        )
    return role


@dataclass
class RoleAssignment:
    identity: Identity
    previous_role: str


async def set_role(directory: IdentityDirectory, target_id: str, new_role: Any) -> RoleAssignment:
    """
    Assign ``new_role`` to the identity ``target_id``.

    The role is validated before the directory is touched; an unknown target raises
    NotFoundError.
    """
    role = validate_role(new_role)
    target = await directory.get_by_id(target_id)
    if target is None:
        raise NotFoundError("User not found.")
    previous_role = target.role or DEFAULT_ROLE
    updated = await directory.update_metadata(target_id, {"role": role})
    return RoleAssignment(identity=updated, previous_role=previous_role)
