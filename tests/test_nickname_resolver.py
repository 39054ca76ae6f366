"""Unit tests for app.services.nickname_resolver: shape rules and case-insensitive lookup."""

import asyncio
import unittest
from unittest.mock import AsyncMock

from app.core.errors import ValidationError
from app.schemas.identity import Identity
from app.services.nickname_resolver import NicknameResolver, is_valid_nickname, validate_nickname


def _identity(identity_id: str, nickname: str | None) -> Identity:
    meta = {} if nickname is None else {"nickname": nickname}
    return Identity(id=identity_id, email=f"{identity_id}@example.local", user_metadata=meta)


def _resolver(*identities: Identity) -> tuple[NicknameResolver, AsyncMock]:
    directory = AsyncMock()
    directory.list_all.return_value = list(identities)
    return NicknameResolver(directory), directory


class TestNicknameShape(unittest.TestCase):
    def test_valid(self) -> None:
        for nickname in ("bob", "bob_123", "A" * 20, "___"):
            with self.subTest(nickname=nickname):
                self.assertTrue(is_valid_nickname(nickname))

    def test_invalid(self) -> None:
        for nickname in ("ab", "A" * 21, "bob smith", "bob-1", "bøb", "", None, 123):
            with self.subTest(nickname=nickname):
                self.assertFalse(is_valid_nickname(nickname))

    def test_validate_raises(self) -> None:
        with self.assertRaises(ValidationError):
            validate_nickname("no spaces")


class TestResolve(unittest.TestCase):
    def test_case_insensitive_match(self) -> None:
        resolver, _ = _resolver(_identity("1", "carol"), _identity("2", "alice"))
        found = asyncio.run(resolver.resolve("ALICE"))
        self.assertIsNotNone(found)
        self.assertEqual(found.id, "2")

    def test_not_found(self) -> None:
        resolver, _ = _resolver(_identity("1", "carol"))
        self.assertIsNone(asyncio.run(resolver.resolve("alice")))

    def test_identities_without_nickname_are_skipped(self) -> None:
        resolver, _ = _resolver(_identity("1", None), _identity("2", ""))
        self.assertIsNone(asyncio.run(resolver.resolve("alice")))

    def test_empty_nickname_skips_directory(self) -> None:
        resolver, directory = _resolver(_identity("1", "carol"))
        self.assertIsNone(asyncio.run(resolver.resolve("")))
        directory.list_all.assert_not_called()

    def test_scans_on_every_call(self) -> None:
        resolver, directory = _resolver(_identity("1", "carol"))
        asyncio.run(resolver.resolve("carol"))
        asyncio.run(resolver.resolve("carol"))
        self.assertEqual(directory.list_all.await_count, 2)

    def test_duplicates_return_a_single_match(self) -> None:
        resolver, _ = _resolver(_identity("1", "dup"), _identity("2", "DUP"))
        with self.assertLogs("app.services.nickname_resolver", level="WARNING"):
            found = asyncio.run(resolver.resolve("dup"))
        self.assertIn(found.id, {"1", "2"})


class TestExistsCaseInsensitive(unittest.TestCase):
    def test_exists(self) -> None:
        resolver, _ = _resolver(_identity("1", "alice"))
        self.assertTrue(asyncio.run(resolver.exists_case_insensitive("Alice")))

    def test_missing(self) -> None:
        resolver, _ = _resolver(_identity("1", "alice"))
        self.assertFalse(asyncio.run(resolver.exists_case_insensitive("bob")))

    def test_exclude_own_id(self) -> None:
        resolver, _ = _resolver(_identity("1", "alice"))
        self.assertFalse(asyncio.run(resolver.exists_case_insensitive("ALICE", exclude_id="1")))

    def test_exclude_does_not_hide_others(self) -> None:
        resolver, _ = _resolver(_identity("1", "alice"), _identity("2", "bob"))
        self.assertTrue(asyncio.run(resolver.exists_case_insensitive("alice", exclude_id="2")))


if __name__ == "__main__":
    unittest.main()
