"""Pydantic request/response schemas."""

from tekyoflow.schemas.account import (
    AccountListItem,
    ProfileResponse,
    ProfileUpdateRequest,
    RoleUpdateRequest,
)
from tekyoflow.schemas.auth import (
    AccountSummary,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from tekyoflow.schemas.budget import (
    BudgetRequestParams,
    PdfGeneratedResponse,
    PdfListResponse,
)
from tekyoflow.schemas.health import HealthResponse

__all__ = [
    "AccountListItem",
    "AccountSummary",
    "BudgetRequestParams",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "PdfGeneratedResponse",
    "PdfListResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "RoleUpdateRequest",
    "TokenResponse",
]
