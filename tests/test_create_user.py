"""Tests for the create_user bootstrap CLI."""

import asyncio
import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from app.scripts.create_user import _create
from app.services.directory import DirectoryNotConfiguredError
from app.services.nickname_resolver import NicknameResolver
from tests.helpers import make_directory


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.directory = make_directory()
        patcher = patch("app.scripts.create_user.build_directory", return_value=self.directory)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_creates_admin(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            code = asyncio.run(_create("root_admin", "secret1", "admin"))
        self.assertEqual(code, 0)
        self.assertIn("role 'admin'", out.getvalue())
        identity = asyncio.run(NicknameResolver(self.directory).resolve("root_admin"))
        self.assertEqual(identity.role, "admin")

    def test_duplicate_nickname_fails(self) -> None:
        with redirect_stdout(io.StringIO()):
            asyncio.run(_create("root_admin", "secret1", "admin"))
        err = io.StringIO()
        with redirect_stderr(err):
            code = asyncio.run(_create("ROOT_ADMIN", "secret1", "user"))
        self.assertEqual(code, 1)
        self.assertIn("taken", err.getvalue())

    def test_invalid_nickname_fails(self) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            code = asyncio.run(_create("x", "secret1", "user"))
        self.assertEqual(code, 1)
        self.assertTrue(err.getvalue().strip())


class TestCreateUserNotConfigured(unittest.TestCase):
    @patch(
        "app.scripts.create_user.build_directory",
        side_effect=DirectoryNotConfiguredError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required."),
    )
    def test_reports_configuration_error(self, _build: object) -> None:
        err = io.StringIO()
        with redirect_stderr(err):
            code = asyncio.run(_create("root_admin", "secret1", "admin"))
        self.assertEqual(code, 1)
        self.assertIn("SUPABASE_URL", err.getvalue())


if __name__ == "__main__":
    unittest.main()
