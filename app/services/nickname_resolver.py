"""Nickname resolution over the identity directory.

The directory only indexes identities by (synthetic) email, so nicknames are matched
by a case-insensitive linear scan of the full identity list: O(n) per call, no cache.
Uniqueness is enforced by scan-before-write and is therefore not atomic: two
concurrent registrations of the same nickname can both pass the check.
"""

import logging
import re

from app.core.errors import ValidationError
from app.core.security import NICKNAME_PATTERN
from app.schemas.identity import Identity
from app.services.directory import IdentityDirectory

logger = logging.getLogger(__name__)

_NICKNAME_RE = re.compile(NICKNAME_PATTERN)


def is_valid_nickname(nickname: object) -> bool:
    """3-20 characters of letters, digits and underscore."""
    return isinstance(nickname, str) and _NICKNAME_RE.fullmatch(nickname) is not None


def validate_nickname(nickname: object) -> str:
    if not is_valid_nickname(nickname):
        raise ValidationError(
            "Nickname may only contain letters, numbers and underscores (3-20 characters)."
        )
    return nickname  # type: ignore[return-value]


def _fold(nickname: str) -> str:
    return nickname.casefold()


class NicknameResolver:
    """Maps nicknames to identities by scanning the directory."""

    def __init__(self, directory: IdentityDirectory) -> None:
        self._directory = directory

    async def _matches(self, nickname: str) -> list[Identity]:
        wanted = _fold(nickname)
        identities = await self._directory.list_all()
        return [i for i in identities if i.nickname and _fold(i.nickname) == wanted]

    async def resolve(self, nickname: str) -> Identity | None:
        """Return the identity whose nickname matches (case-insensitive), or None."""
        if not nickname:
            return None
        matches = await self._matches(nickname)
        if len(matches) > 1:
            # Which duplicate wins is undefined; surface it instead of hiding it
            logger.warning(
                "Nickname resolves to multiple identities",
                extra={"match_count": len(matches)},
            )
        return matches[0] if matches else None

    async def exists_case_insensitive(self, nickname: str, exclude_id: str | None = None) -> bool:
        """True if another identity (other than ``exclude_id``) already uses ``nickname``."""
        if not nickname:
            return False
        matches = await self._matches(nickname)
        return any(i.id != exclude_id for i in matches)
