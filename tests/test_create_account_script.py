"""Tests for the create_account CLI."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from sqlalchemy.orm import sessionmaker

from tekyoflow.core.permissions import AccountRole
from tekyoflow.scripts import create_account as cli
from tekyoflow.services.accounts import find_by_email

from support import make_engine, make_settings


class TestCreateAccountCli(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.SessionTesting = sessionmaker(bind=self.engine)
        patches = [
            patch.object(cli, "SessionLocal", self.SessionTesting),
            patch.object(cli, "get_settings", lambda: make_settings()),
            patch.object(cli, "configure_logging", lambda level: None),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def tearDown(self) -> None:
        self.engine.dispose()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_president(self) -> None:
        code, out, _ = self._run(
            "boss@tekyoflow.org", "secret123", "Ada", "Lovelace", "PRESIDENT"
        )
        self.assertEqual(code, 0)
        self.assertIn("PRESIDENT", out)
        db = self.SessionTesting()
        try:
            account = find_by_email(db, "boss@tekyoflow.org")
            self.assertEqual(account.role, AccountRole.PRESIDENT)
            self.assertEqual(account.firstname, "ADA")
        finally:
            db.close()

    def test_role_defaults_to_guest(self) -> None:
        code, out, _ = self._run("guest@tekyoflow.org", "secret123", "Ada", "Lovelace")
        self.assertEqual(code, 0)
        self.assertIn("GUEST", out)

    def test_duplicate(self) -> None:
        self._run("boss@tekyoflow.org", "secret123", "Ada", "Lovelace")
        code, _, err = self._run("boss@tekyoflow.org", "secret123", "Ada", "Lovelace")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_short_password(self) -> None:
        code, _, err = self._run("boss@tekyoflow.org", "short", "Ada", "Lovelace")
        self.assertEqual(code, 1)
        self.assertIn("Password", err)

    def test_short_name(self) -> None:
        code, _, _ = self._run("boss@tekyoflow.org", "secret123", "A", "Lovelace")
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
