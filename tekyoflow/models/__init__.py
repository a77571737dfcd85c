"""SQLAlchemy ORM models."""

from tekyoflow.models.account import Account
from tekyoflow.models.base import Base

__all__ = ["Account", "Base"]
