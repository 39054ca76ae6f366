"""Translate identity metadata into the defaulted profile and user payload shapes."""

import random
import time
from datetime import UTC, datetime

from app.schemas.identity import Identity, UserProfile
from app.schemas.user import ProfileOut, UserOut
from app.services.balance import to_cwt, to_cws


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def profile_from_identity(identity: Identity) -> UserProfile:
    """Every metadata field with its default when absent or malformed."""
    meta = identity.user_metadata
    role = meta.get("role")
    created_at = meta.get("created_at")
    updated_at = meta.get("updated_at")
    return UserProfile(
        id=identity.id,
        email=identity.email,
        nickname=_str(meta.get("nickname")),
        user_id=_str(meta.get("user_id")),
        role=role if isinstance(role, str) and role else "user",
        cwt=to_cwt(meta.get("cwt")),
        cws=to_cws(meta.get("cws")),
        phone=_str(meta.get("phone")),
        province=_str(meta.get("province")),
        wallet_address=_str(meta.get("wallet_address")),
        notifications=meta.get("notifications") is not False,
        created_at=created_at if isinstance(created_at, str) else _iso(identity.created_at),
        updated_at=updated_at if isinstance(updated_at, str) else None,
        last_sign_in_at=_iso(identity.last_sign_in_at),
    )


def user_out(profile: UserProfile) -> UserOut:
    return UserOut(
        id=profile.id,
        nickname=profile.nickname,
        user_id=profile.user_id,
        role=profile.role,
        cwt=profile.cwt,
        cws=profile.cws,
        phone=profile.phone,
        province=profile.province,
        wallet_address=profile.wallet_address,
        notifications=profile.notifications,
        created_at=profile.created_at,
    )


def profile_out(profile: UserProfile) -> ProfileOut:
    return ProfileOut(
        id=profile.id,
        nickname=profile.nickname,
        user_id=profile.user_id,
        phone=profile.phone,
        province=profile.province,
        wallet_address=profile.wallet_address,
        notifications=profile.notifications,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def generate_user_id(prefix: str = "CROM") -> str:
    """Public user id: prefix, last 6 digits of the ms timestamp, 3 random digits."""
    millis = str(time.time_ns() // 1_000_000)
    return f"{prefix}-{millis[-6:]}{random.randint(0, 999):03d}"


def synthesize_email(nickname: str, domain: str) -> str:
    """Provider-internal login email; nickname plus a nanosecond timestamp keeps it unique."""
    return f"{nickname.lower()}_{time.time_ns()}@{domain}"
