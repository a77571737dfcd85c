"""Request/response schemas for account endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from tekyoflow.core.permissions import AccountRole
from tekyoflow.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


class ProfileResponse(BaseModel):
    """Profile of the authenticated account."""

    model_config = ConfigDict(from_attributes=True)

    firstname: str
    lastname: str
    email: str
    role: AccountRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; at least one field must be provided."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    firstname: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    lastname: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )

    @model_validator(mode="after")
    def require_one_field(self) -> "ProfileUpdateRequest":
        if all(
            value is None
            for value in (self.firstname, self.lastname, self.email, self.password)
        ):
            raise ValueError(
                "at least one of firstname, lastname, email, password is required"
            )
        return self


class AccountListItem(BaseModel):
    """
    Account entry in the member listing.

    Office roles see every field; other roles only get names and role, so the
    optional fields are dropped from the response when unset.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    firstname: str
    lastname: str
    role: AccountRole
    email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleUpdateRequest(BaseModel):
    """New role for another account."""

    role: AccountRole
