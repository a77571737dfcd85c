"""Unit tests for tekyoflow.services.accounts against an in-memory database."""

import unittest
from unittest.mock import patch

from sqlalchemy.orm import sessionmaker

from tekyoflow.core.permissions import AccountRole
from tekyoflow.core.security import verify_password
from tekyoflow.services.accounts import (
    AccountNotFoundError,
    EmailAlreadyRegisteredError,
    create_account,
    email_taken,
    find_by_email,
    find_by_id,
    get_by_email,
    get_by_id,
    list_accounts,
    set_role,
    soft_delete,
    update_account,
)

from support import make_engine


class AccountStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = sessionmaker(bind=self.engine)()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def _create(self, email: str, role: AccountRole = AccountRole.GUEST, **kwargs: str):
        values = {"firstname": " ada ", "lastname": "lovelace", "password": "secret123"}
        values.update(kwargs)
        return create_account(self.db, email=email, bcrypt_rounds=4, role=role, **values)


class TestCreateAccount(AccountStoreTestCase):
    def test_defaults_and_normalization(self) -> None:
        account = self._create("ada@tekyoflow.org")
        self.assertEqual(account.role, AccountRole.GUEST)
        self.assertEqual(account.firstname, "ADA")
        self.assertEqual(account.lastname, "LOVELACE")
        self.assertIsNone(account.deleted_at)
        self.assertIsNotNone(account.created_at)
        self.assertTrue(account.hashed_password.startswith(account.salt))
        self.assertTrue(verify_password("secret123", account.hashed_password))

    def test_default_role_is_guest(self) -> None:
        account = create_account(
            self.db,
            firstname="Ada",
            lastname="Lovelace",
            email="ada@tekyoflow.org",
            password="secret123",
            bcrypt_rounds=4,
        )
        self.assertEqual(account.role, AccountRole.GUEST)

    def test_duplicate_email(self) -> None:
        self._create("ada@tekyoflow.org")
        with self.assertRaises(EmailAlreadyRegisteredError) as ctx:
            self._create("ada@tekyoflow.org")
        self.assertEqual(ctx.exception.email, "ada@tekyoflow.org")

    def test_concurrent_insert_hits_unique_index(self) -> None:
        self._create("ada@tekyoflow.org")
        # Another writer inserted the same email after the pre-check ran.
        with patch("tekyoflow.services.accounts.email_taken", return_value=False):
            with self.assertRaises(EmailAlreadyRegisteredError):
                self._create("ada@tekyoflow.org")
        self.assertEqual(len(list_accounts(self.db, include_guests=True)), 1)


class TestLookups(AccountStoreTestCase):
    def test_find_by_email_and_id(self) -> None:
        account = self._create("ada@tekyoflow.org")
        self.assertEqual(find_by_email(self.db, "ada@tekyoflow.org").id, account.id)
        self.assertEqual(find_by_id(self.db, account.id).email, "ada@tekyoflow.org")
        self.assertIsNone(find_by_email(self.db, "nobody@tekyoflow.org"))
        self.assertIsNone(find_by_id(self.db, account.id + 100))

    def test_get_raises_when_missing(self) -> None:
        account = self._create("ada@tekyoflow.org")
        self.assertEqual(get_by_id(self.db, account.id).email, "ada@tekyoflow.org")
        self.assertEqual(get_by_email(self.db, "ada@tekyoflow.org").id, account.id)
        with self.assertRaises(AccountNotFoundError):
            get_by_id(self.db, account.id + 100)
        soft_delete(self.db, account)
        with self.assertRaises(AccountNotFoundError):
            get_by_email(self.db, "ada@tekyoflow.org")


class TestSoftDelete(AccountStoreTestCase):
    def test_hidden_from_reads_but_email_stays_reserved(self) -> None:
        account = self._create("ada@tekyoflow.org", role=AccountRole.MEMBER)
        soft_delete(self.db, account)
        self.assertIsNotNone(account.deleted_at)
        self.assertIsNone(find_by_email(self.db, "ada@tekyoflow.org"))
        self.assertIsNone(find_by_id(self.db, account.id))
        self.assertEqual(list_accounts(self.db, include_guests=True), [])
        self.assertTrue(email_taken(self.db, "ada@tekyoflow.org"))
        with self.assertRaises(EmailAlreadyRegisteredError):
            self._create("ada@tekyoflow.org")


class TestUpdateAccount(AccountStoreTestCase):
    def test_partial_update(self) -> None:
        account = self._create("ada@tekyoflow.org")
        old_hash = account.hashed_password
        update_account(self.db, account, bcrypt_rounds=4, lastname=" king ")
        self.assertEqual(account.lastname, "KING")
        self.assertEqual(account.firstname, "ADA")
        self.assertEqual(account.hashed_password, old_hash)

    def test_password_change_uses_new_salt(self) -> None:
        account = self._create("ada@tekyoflow.org")
        old_salt = account.salt
        update_account(self.db, account, bcrypt_rounds=4, password="another-pass")
        self.assertNotEqual(account.salt, old_salt)
        self.assertTrue(verify_password("another-pass", account.hashed_password))

    def test_email_conflict(self) -> None:
        self._create("grace@tekyoflow.org")
        account = self._create("ada@tekyoflow.org")
        with self.assertRaises(EmailAlreadyRegisteredError):
            update_account(self.db, account, bcrypt_rounds=4, email="grace@tekyoflow.org")

    def test_concurrent_email_change_hits_unique_index(self) -> None:
        self._create("grace@tekyoflow.org")
        account = self._create("ada@tekyoflow.org")
        with patch("tekyoflow.services.accounts.email_taken", return_value=False):
            with self.assertRaises(EmailAlreadyRegisteredError):
                update_account(self.db, account, bcrypt_rounds=4, email="grace@tekyoflow.org")
        self.assertEqual(find_by_id(self.db, account.id).email, "ada@tekyoflow.org")


class TestListAndRoles(AccountStoreTestCase):
    def test_guests_excluded_on_request(self) -> None:
        self._create("guest@tekyoflow.org")
        self._create("member@tekyoflow.org", role=AccountRole.MEMBER)
        self.assertEqual(
            [a.email for a in list_accounts(self.db, include_guests=False)],
            ["member@tekyoflow.org"],
        )
        self.assertEqual(len(list_accounts(self.db, include_guests=True)), 2)

    def test_set_role(self) -> None:
        account = self._create("guest@tekyoflow.org")
        set_role(self.db, account, AccountRole.AMBASSADOR)
        self.assertEqual(find_by_id(self.db, account.id).role, AccountRole.AMBASSADOR)


if __name__ == "__main__":
    unittest.main()
