"""Password hashing and JWT issuance/verification for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import bcrypt
import jwt

# Min/max lengths for credentials and names (shared by schemas and CLI).
NAME_MIN_LEN = 2
NAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Claims that make up the authenticated identity carried by a token.
IDENTITY_CLAIMS = ("id", "email", "role")


def generate_salt(rounds: int) -> str:
    """Return a fresh bcrypt salt for the given cost."""
    return bcrypt.gensalt(rounds=rounds).decode("utf-8")


def hash_password(plain_password: str, salt: str) -> str:
    """Hash a plain-text password with the given salt. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, salt.encode("utf-8")).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@dataclass(frozen=True)
class TokenConfig:
    """Signing parameters shared by TokenIssuer and TokenVerifier."""

    secret: str
    algorithm: str = "HS256"
    expire_minutes: int = 1440


class TokenIssuer:
    """Signs access tokens carrying {id, email, role} with a fixed expiry window."""

    def __init__(self, config: TokenConfig) -> None:
        self.config = config

    def issue(self, account_id: int, email: str, role: str | Enum) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "id": account_id,
            "email": email,
            "role": role.value if isinstance(role, Enum) else role,
            "iat": now,
            "exp": now + timedelta(minutes=self.config.expire_minutes),
        }
        return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)


class TokenVerifier:
    """Validates signature and expiry of access tokens."""

    def __init__(self, config: TokenConfig) -> None:
        self.config = config

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token; return its identity claims (id, email, role).
        Raises jwt.PyJWTError on invalid, expired or malformed tokens.
        """
        payload = jwt.decode(
            token,
            self.config.secret,
            algorithms=[self.config.algorithm],
            options={"require": ["exp"]},
        )
        account_id = payload.get("id")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(account_id, int) or isinstance(account_id, bool):
            raise jwt.InvalidTokenError("Token payload has no integer id")
        if not isinstance(payload.get("email"), str):
            raise jwt.InvalidTokenError("Token payload has no email")
        if payload.get("role") is not None and not isinstance(payload["role"], str):
            raise jwt.InvalidTokenError("Token role must be a string")
        return {claim: payload.get(claim) for claim in IDENTITY_CLAIMS}
