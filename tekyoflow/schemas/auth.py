"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tekyoflow.core.permissions import AccountRole
from tekyoflow.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """New account data; the account always starts as GUEST."""

    model_config = ConfigDict(str_strip_whitespace=True)

    firstname: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    lastname: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class CurrentUser(BaseModel):
    """
    Identity decoded from a verified access token.

    role is kept exactly as signed; RoleGate rejects values outside AccountRole.
    """

    id: int
    email: str
    role: str | None = None


class AccountSummary(BaseModel):
    """Account returned alongside a freshly issued token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    firstname: str
    lastname: str
    email: str
    role: AccountRole
    created_at: datetime | None = None


class TokenResponse(BaseModel):
    """JWT access token and the account it was issued for."""

    token: str = Field(..., description="JWT access token")
    account: AccountSummary
