"""Shared fixtures for API tests: in-memory SQLite, settings override, token helpers."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tekyoflow.core.config import Settings, get_settings
from tekyoflow.core.database import get_db
from tekyoflow.core.permissions import AccountRole
from tekyoflow.core.security import TokenIssuer
from tekyoflow.main import app
from tekyoflow.models import Account, Base
from tekyoflow.services.accounts import create_account

TEST_SECRET = "test-secret-value"
TEST_PASSWORD = "secret123"


def make_settings(**overrides: object) -> Settings:
    """Settings for tests: SQLite, fixed secret, cheapest bcrypt cost."""
    values: dict[str, object] = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": TEST_SECRET,
        "JWT_EXPIRE_MINUTES": 60,
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(**values)


def make_engine() -> Engine:
    """Fresh in-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """Runs the real app against an in-memory database with test settings."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.SessionTesting = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.settings = make_settings()

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    def add_account(
        self,
        email: str,
        role: AccountRole = AccountRole.MEMBER,
        firstname: str = "Ada",
        lastname: str = "Lovelace",
        password: str = TEST_PASSWORD,
    ) -> Account:
        db = self.SessionTesting()
        try:
            return create_account(
                db,
                firstname=firstname,
                lastname=lastname,
                email=email,
                password=password,
                bcrypt_rounds=4,
                role=role,
            )
        finally:
            db.close()

    def token_for(self, account: Account) -> str:
        return TokenIssuer(self.settings.token_config()).issue(
            account.id, account.email, account.role
        )

    def headers_for(self, account: Account) -> dict[str, str]:
        return bearer(self.token_for(account))
