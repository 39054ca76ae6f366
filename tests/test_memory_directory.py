"""Unit tests for app.services.memory_directory: credentials, sessions, metadata merge."""

import asyncio
import unittest
from unittest.mock import patch

from app.core.security import decode_session_token, hash_password, verify_password
from app.services.directory import DirectoryError
from tests.helpers import make_directory


class TestInMemoryDirectory(unittest.TestCase):
    def setUp(self) -> None:
        self.directory = make_directory()
        self.identity = asyncio.run(
            self.directory.create_with_credential(
                "Bob_1@Example.local", "secret1", {"nickname": "bob", "cwt": 0}
            )
        )

    def test_create_normalizes_email_and_stores_metadata(self) -> None:
        self.assertEqual(self.identity.email, "bob_1@example.local")
        self.assertEqual(self.identity.nickname, "bob")
        self.assertIsNotNone(self.identity.created_at)
        self.assertIsNone(self.identity.last_sign_in_at)

    def test_duplicate_email_rejected(self) -> None:
        with self.assertRaises(DirectoryError):
            asyncio.run(self.directory.create_with_credential("bob_1@example.local", "x" * 6, {}))

    def test_verify_credential(self) -> None:
        session = asyncio.run(self.directory.verify_credential("bob_1@example.local", "secret1"))
        self.assertIsNotNone(session)
        self.assertEqual(session.identity.id, self.identity.id)
        self.assertIsNotNone(session.identity.last_sign_in_at)
        self.assertGreater(session.expires_in, 0)

    def test_wrong_password_and_unknown_email(self) -> None:
        self.assertIsNone(asyncio.run(self.directory.verify_credential("bob_1@example.local", "nope12")))
        self.assertIsNone(asyncio.run(self.directory.verify_credential("x@example.local", "secret1")))

    def test_session_resolution_and_revocation(self) -> None:
        session = asyncio.run(self.directory.verify_credential("bob_1@example.local", "secret1"))
        resolved = asyncio.run(self.directory.resolve_session(session.access_token))
        self.assertEqual(resolved.id, self.identity.id)
        asyncio.run(self.directory.revoke_session(session.access_token))
        self.assertIsNone(asyncio.run(self.directory.resolve_session(session.access_token)))

    def test_expired_revocations_are_pruned(self) -> None:
        first = asyncio.run(self.directory.verify_credential("bob_1@example.local", "secret1"))
        second = asyncio.run(self.directory.verify_credential("bob_1@example.local", "secret1"))
        asyncio.run(self.directory.revoke_session(first.access_token))
        first_jti = decode_session_token(first.access_token)["jti"]
        self.assertIn(first_jti, self.directory._revoked)

        # Pretend the first token has expired.
        self.directory._revoked[first_jti] = 0
        asyncio.run(self.directory.revoke_session(second.access_token))

        second_jti = decode_session_token(second.access_token)["jti"]
        self.assertEqual(list(self.directory._revoked), [second_jti])
        self.assertIsNone(asyncio.run(self.directory.resolve_session(second.access_token)))

    def test_garbage_token(self) -> None:
        self.assertIsNone(asyncio.run(self.directory.resolve_session("not-a-token")))
        asyncio.run(self.directory.revoke_session("not-a-token"))

    def test_update_metadata_merges(self) -> None:
        updated = asyncio.run(self.directory.update_metadata(self.identity.id, {"cwt": 5}))
        self.assertEqual(updated.user_metadata, {"nickname": "bob", "cwt": 5})

    def test_returned_identities_are_copies(self) -> None:
        listed = asyncio.run(self.directory.list_all())
        listed[0].user_metadata["cwt"] = 999
        fresh = asyncio.run(self.directory.get_by_id(self.identity.id))
        self.assertEqual(fresh.user_metadata["cwt"], 0)

    def test_update_password(self) -> None:
        asyncio.run(self.directory.update_password(self.identity.id, "newpass1"))
        self.assertIsNone(asyncio.run(self.directory.verify_credential("bob_1@example.local", "secret1")))
        self.assertIsNotNone(asyncio.run(self.directory.verify_credential("bob_1@example.local", "newpass1")))

    def test_unknown_id(self) -> None:
        self.assertIsNone(asyncio.run(self.directory.get_by_id("missing")))
        with self.assertRaises(DirectoryError):
            asyncio.run(self.directory.update_metadata("missing", {"a": 1}))


class TestInMemoryDirectoryHashingOffLoop(unittest.TestCase):
    """bcrypt work runs in a worker thread so the event loop is not blocked."""

    @patch("app.services.memory_directory.asyncio.to_thread", wraps=asyncio.to_thread)
    def test_hash_and_verify_use_worker_thread(self, mock_to_thread) -> None:
        directory = make_directory()

        async def flow() -> None:
            identity = await directory.create_with_credential("a@example.local", "secret1", {})
            await directory.verify_credential("a@example.local", "secret1")
            await directory.update_password(identity.id, "newpass1")

        asyncio.run(flow())

        funcs = [c.args[0] for c in mock_to_thread.call_args_list]
        self.assertEqual(funcs, [hash_password, verify_password, hash_password])


if __name__ == "__main__":
    unittest.main()
