"""ORM model for association accounts (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Enum, Integer, String, func

from tekyoflow.core.permissions import AccountRole
from tekyoflow.models.base import Base


class Account(Base):
    """
    Member account for JWT authentication and role-based access control.

    Rows are never hard-deleted: deleted_at marks a soft-deleted account and
    every store query filters it out.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    firstname = Column(String(50), nullable=False)
    lastname = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    salt = Column(String(64), nullable=False)
    role = Column(
        Enum(AccountRole, name="account_role", values_callable=lambda e: [r.value for r in e]),
        nullable=False,
        default=AccountRole.GUEST,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
