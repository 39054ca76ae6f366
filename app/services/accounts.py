"""Account flows: register, login, profile update, password change, logout.

Orchestrates the nickname resolver, the directory client and the profile view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.core.errors import AuthenticationError, ConflictError, UpstreamError, ValidationError
from app.core.security import PASSWORD_MIN_LEN
from app.schemas.identity import Identity, UserProfile
from app.services.directory import IdentityDirectory
from app.services.nickname_resolver import NicknameResolver, validate_nickname
from app.services.profiles import (
    generate_user_id,
    profile_from_identity,
    synthesize_email,
    utc_now_iso,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Same message for unknown nickname and wrong password so callers cannot enumerate accounts.
LOGIN_FAILED_MESSAGE = "Nickname or password incorrect."


@dataclass
class AuthResult:
    """Outcome of register/login: the session token (None if issuance failed) and the profile."""

    token: str | None
    profile: UserProfile


def _require_password_length(password: str, field: str = "Password") -> None:
    if len(password) < PASSWORD_MIN_LEN:
        raise ValidationError(f"{field} must be at least {PASSWORD_MIN_LEN} characters.")


class AccountService:
    def __init__(self, directory: IdentityDirectory, settings: Settings) -> None:
        self._directory = directory
        self._settings = settings
        self._resolver = NicknameResolver(directory)

    async def register(
        self,
        nickname: str | None,
        password: str | None,
        terms_accepted: Any,
        role: str = "user",
        require_terms: bool = True,
    ) -> AuthResult:
        """
        Create an identity for ``nickname`` and try to open a session for it.

        Shape checks run before any directory call. Uniqueness is checked by scan and
        is not atomic with the create. A failed session issuance does not undo the
        identity creation; the result then carries ``token=None``.
        """
        if not nickname or not password:
            raise ValidationError("Nickname and password are required.")
        if require_terms and not terms_accepted:
            raise ValidationError("You must accept the terms and conditions.")
        validate_nickname(nickname)
        _require_password_length(password)

        if await self._resolver.exists_case_insensitive(nickname):
            raise ConflictError("Nickname is already taken.")

        email = synthesize_email(nickname, self._settings.INTERNAL_EMAIL_DOMAIN)
        metadata = {
            "nickname": nickname,
            "user_id": generate_user_id(self._settings.USER_ID_PREFIX),
            "role": role,
            "cwt": 0,
            "cws": 0,
            "phone": "",
            "province": "",
            "wallet_address": "",
            "notifications": True,
            "created_at": utc_now_iso(),
        }
        identity = await self._directory.create_with_credential(email, password, metadata)
        logger.info(
            "User registered",
            extra={"identity_id": identity.id, "user_id": metadata["user_id"], "role": role},
        )

        token: str | None = None
        try:
            session = await self._directory.verify_credential(email, password)
        except UpstreamError as e:
            logger.warning(
                "Session issuance after registration failed",
                extra={"identity_id": identity.id, "reason": e.message},
            )
        else:
            if session is None:
                logger.warning(
                    "Session issuance after registration was rejected",
                    extra={"identity_id": identity.id},
                )
            else:
                token = session.access_token
                identity = session.identity

        return AuthResult(token=token, profile=profile_from_identity(identity))

    async def login(self, nickname: str | None, password: str | None) -> AuthResult:
        if not nickname or not password:
            raise ValidationError("Nickname and password are required.")

        identity = await self._resolver.resolve(nickname)
        if identity is None or not identity.email:
            logger.info("Login rejected", extra={"reason": "credentials"})
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        session = await self._directory.verify_credential(identity.email, password)
        if session is None:
            logger.info("Login rejected", extra={"reason": "credentials"})
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        return AuthResult(token=session.access_token, profile=profile_from_identity(session.identity))

    async def update_profile(
        self,
        caller: Identity,
        nickname: str | None,
        phone: str | None,
        province: str | None,
        wallet_address: str | None = None,
        notifications: Any = None,
    ) -> UserProfile:
        if not nickname or not phone or not province:
            raise ValidationError("Nickname, phone and province are required.")
        validate_nickname(nickname)
        if await self._resolver.exists_case_insensitive(nickname, exclude_id=caller.id):
            raise ConflictError("Nickname is already taken by another user.")

        patch = {
            "nickname": nickname,
            "phone": phone,
            "province": province,
            "wallet_address": wallet_address or "",
            "notifications": notifications is not False,
            "updated_at": utc_now_iso(),
        }
        updated = await self._directory.update_metadata(caller.id, patch)
        return profile_from_identity(updated)

    async def change_password(
        self,
        caller: Identity,
        current_password: str | None,
        new_password: str | None,
        confirm_password: str | None,
    ) -> None:
        if not current_password or not new_password or not confirm_password:
            raise ValidationError("All fields are required.")
        _require_password_length(new_password, field="New password")
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match.")
        if not caller.email:
            raise ValidationError("User not found.")

        session = await self._directory.verify_credential(caller.email, current_password)
        if session is None:
            raise ValidationError("Current password is incorrect.")

        await self._directory.update_password(caller.id, new_password)
        logger.info("Password changed", extra={"identity_id": caller.id})

    async def logout(self, access_token: str) -> None:
        await self._directory.revoke_session(access_token)
