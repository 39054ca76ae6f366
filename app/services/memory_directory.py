"""Process-local identity directory: bcrypt password hashes and signed, revocable session tokens.

Used by tests and by DIRECTORY_BACKEND=memory for local development. State lives for
the lifetime of the process only.
"""

import asyncio
import copy
import time
import uuid
from datetime import UTC, datetime
from typing import Any

import jwt

from app.core.security import (
    BCRYPT_ROUNDS,
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from app.schemas.identity import DirectorySession, Identity
from app.services.directory import DirectoryError, IdentityDirectory


class InMemoryDirectory(IdentityDirectory):
    """Dictionary-backed directory with the same contract as the Supabase client."""

    name = "memory"

    def __init__(self, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        self._bcrypt_rounds = bcrypt_rounds
        self._records: dict[str, dict[str, Any]] = {}
        # jti -> exp (epoch seconds); pruned once expired
        self._revoked: dict[str, int] = {}

    def _to_identity(self, record: dict[str, Any]) -> Identity:
        return Identity(
            id=record["id"],
            email=record["email"],
            user_metadata=copy.deepcopy(record["user_metadata"]),
            created_at=record["created_at"],
            last_sign_in_at=record["last_sign_in_at"],
        )

    def _get_record(self, identity_id: str) -> dict[str, Any]:
        record = self._records.get(identity_id)
        if record is None:
            raise DirectoryError("User not found.", upstream_status=404)
        return record

    def _ensure_email_free(self, email: str) -> None:
        if any(r["email"] == email for r in self._records.values()):
            raise DirectoryError(
                "A user with this email address has already been registered.",
                upstream_status=422,
            )

    async def list_all(self) -> list[Identity]:
        return [self._to_identity(r) for r in self._records.values()]

    async def get_by_id(self, identity_id: str) -> Identity | None:
        record = self._records.get(identity_id)
        return self._to_identity(record) if record else None

    async def create_with_credential(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> Identity:
        normalized = email.strip().lower()
        self._ensure_email_free(normalized)
        password_hash = await asyncio.to_thread(hash_password, password, self._bcrypt_rounds)
        # another create may have taken the email while hashing
        self._ensure_email_free(normalized)
        identity_id = str(uuid.uuid4())
        self._records[identity_id] = {
            "id": identity_id,
            "email": normalized,
            "password_hash": password_hash,
            "user_metadata": copy.deepcopy(metadata),
            "created_at": datetime.now(UTC),
            "last_sign_in_at": None,
        }
        return self._to_identity(self._records[identity_id])

    async def verify_credential(self, email: str, password: str) -> DirectorySession | None:
        normalized = email.strip().lower()
        record = next(
            (r for r in self._records.values() if r["email"] == normalized), None
        )
        if record is None:
            return None
        if not await asyncio.to_thread(verify_password, password, record["password_hash"]):
            return None
        record["last_sign_in_at"] = datetime.now(UTC)
        token, payload = create_session_token(record["id"])
        expires_in = int((payload["exp"] - payload["iat"]).total_seconds())
        return DirectorySession(
            access_token=token,
            expires_in=expires_in,
            identity=self._to_identity(record),
        )

    async def resolve_session(self, access_token: str) -> Identity | None:
        try:
            payload = decode_session_token(access_token)
        except jwt.PyJWTError:
            return None
        if payload.get("jti") in self._revoked:
            return None
        record = self._records.get(str(payload.get("sub") or ""))
        return self._to_identity(record) if record else None

    async def update_metadata(self, identity_id: str, patch: dict[str, Any]) -> Identity:
        record = self._get_record(identity_id)
        record["user_metadata"].update(copy.deepcopy(patch))
        return self._to_identity(record)

    async def update_password(self, identity_id: str, password: str) -> Identity:
        record = self._get_record(identity_id)
        record["password_hash"] = await asyncio.to_thread(hash_password, password, self._bcrypt_rounds)
        return self._to_identity(record)

    async def revoke_session(self, access_token: str) -> None:
        try:
            payload = decode_session_token(access_token)
        except jwt.PyJWTError:
            return
        jti = payload.get("jti")
        if jti:
            self._prune_revoked()
            self._revoked[jti] = int(payload.get("exp") or 0)

    def _prune_revoked(self) -> None:
        now = int(time.time())
        for jti in [j for j, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]
