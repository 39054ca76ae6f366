"""Shared builders for tests: a fast in-memory directory and identities."""

import asyncio
from typing import Any

from app.core.config import get_settings
from app.services.accounts import AccountService
from app.services.memory_directory import InMemoryDirectory

# Lowest bcrypt cost keeps hashing fast in tests.
TEST_BCRYPT_ROUNDS = 4


def make_directory() -> InMemoryDirectory:
    return InMemoryDirectory(bcrypt_rounds=TEST_BCRYPT_ROUNDS)


def seed_account(
    directory: InMemoryDirectory,
    nickname: str,
    password: str = "secret1",
    role: str = "user",
    **metadata: Any,
):
    """Register an account through the account service; optionally patch extra metadata."""
    service = AccountService(directory, get_settings())
    result = asyncio.run(
        service.register(nickname, password, terms_accepted=True, role=role)
    )
    if metadata:
        asyncio.run(directory.update_metadata(result.profile.id, metadata))
    return result
