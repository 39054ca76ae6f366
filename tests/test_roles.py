"""Unit tests for app.services.roles: admin guard and role assignment."""

import asyncio
import unittest
from unittest.mock import AsyncMock

from app.core.errors import InvalidRoleError, NotFoundError
from app.schemas.identity import Identity
from app.services.roles import is_admin, set_role, validate_role


class TestIsAdmin(unittest.TestCase):
    """Only the exact string "admin" is authorized."""

    def test_admin_authorized(self) -> None:
        self.assertTrue(is_admin("admin"))

    def test_other_roles_forbidden(self) -> None:
        for role in ("moderator", "user", None, "Admin", "ADMIN", " admin", "", 1):
            with self.subTest(role=role):
                self.assertFalse(is_admin(role))


class TestValidateRole(unittest.TestCase):
    def test_allowed(self) -> None:
        for role in ("admin", "moderator", "user"):
            self.assertEqual(validate_role(role), role)

    def test_rejected(self) -> None:
        for role in ("superadmin", "Admin", "", None, 7):
            with self.subTest(role=role):
                with self.assertRaises(InvalidRoleError):
                    validate_role(role)


class TestSetRole(unittest.TestCase):
    def _directory(self, identity: Identity | None) -> AsyncMock:
        directory = AsyncMock()
        directory.get_by_id.return_value = identity
        directory.update_metadata.return_value = (
            identity.model_copy(update={"user_metadata": {**identity.user_metadata, "role": "moderator"}})
            if identity
            else None
        )
        return directory

    def test_invalid_role_fails_before_any_directory_call(self) -> None:
        directory = self._directory(Identity(id="u1", user_metadata={"role": "user"}))
        with self.assertRaises(InvalidRoleError):
            asyncio.run(set_role(directory, "u1", "superadmin"))
        directory.get_by_id.assert_not_called()
        directory.update_metadata.assert_not_called()

    def test_unknown_target(self) -> None:
        directory = self._directory(None)
        with self.assertRaises(NotFoundError):
            asyncio.run(set_role(directory, "missing", "user"))
        directory.update_metadata.assert_not_called()

    def test_assigns_role_and_reports_previous(self) -> None:
        directory = self._directory(Identity(id="u1", user_metadata={"role": "user", "nickname": "bob"}))
        result = asyncio.run(set_role(directory, "u1", "moderator"))
        directory.update_metadata.assert_awaited_once_with("u1", {"role": "moderator"})
        self.assertEqual(result.previous_role, "user")
        self.assertEqual(result.identity.role, "moderator")

    def test_previous_role_defaults_to_user(self) -> None:
        directory = self._directory(Identity(id="u1", user_metadata={}))
        result = asyncio.run(set_role(directory, "u1", "moderator"))
        self.assertEqual(result.previous_role, "user")


if __name__ == "__main__":
    unittest.main()
