"""Account store: queries and mutations on the accounts table."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from tekyoflow.core.permissions import AccountRole
from tekyoflow.core.security import generate_salt, hash_password
from tekyoflow.models import Account

logger = logging.getLogger(__name__)


class AccountNotFoundError(Exception):
    """Raised when no live account matches the lookup."""

    def __init__(self, message: str = "Account not found") -> None:
        self.message = message
        super().__init__(message)


class EmailAlreadyRegisteredError(Exception):
    """Raised when an email is already used by another account (live or soft-deleted)."""

    def __init__(self, email: str) -> None:
        self.email = email
        self.message = "Account with this email already exists"
        super().__init__(self.message)


def _normalize_name(value: str) -> str:
    return value.strip().upper()


def _live(db: Session) -> Query:
    """Accounts that are not soft-deleted."""
    return db.query(Account).filter(Account.deleted_at.is_(None))


def find_by_email(db: Session, email: str) -> Account | None:
    return _live(db).filter(Account.email == email).first()


def find_by_id(db: Session, account_id: int) -> Account | None:
    return _live(db).filter(Account.id == account_id).first()


def get_by_email(db: Session, email: str) -> Account:
    """Like find_by_email, but raises AccountNotFoundError instead of returning None."""
    account = find_by_email(db, email)
    if account is None:
        raise AccountNotFoundError()
    return account


def get_by_id(db: Session, account_id: int) -> Account:
    account = find_by_id(db, account_id)
    if account is None:
        raise AccountNotFoundError()
    return account


def email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    """True if any account, soft-deleted included, already uses email."""
    query = db.query(Account.id).filter(Account.email == email)
    if exclude_id is not None:
        query = query.filter(Account.id != exclude_id)
    return query.first() is not None


def _commit_email(db: Session, email: str) -> None:
    """Commit; a unique-index hit on email from a concurrent writer becomes a conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyRegisteredError(email) from e


def create_account(
    db: Session,
    *,
    firstname: str,
    lastname: str,
    email: str,
    password: str,
    bcrypt_rounds: int,
    role: AccountRole = AccountRole.GUEST,
) -> Account:
    """Insert a new account with a freshly salted password hash."""
    if email_taken(db, email):
        raise EmailAlreadyRegisteredError(email)
    salt = generate_salt(bcrypt_rounds)
    account = Account(
        firstname=_normalize_name(firstname),
        lastname=_normalize_name(lastname),
        email=email,
        hashed_password=hash_password(password, salt),
        salt=salt,
        role=role,
    )
    db.add(account)
    _commit_email(db, email)
    db.refresh(account)
    logger.info(
        "Account created",
        extra={"account_id": account.id, "role": account.role.value},
    )
    return account


def update_account(
    db: Session,
    account: Account,
    *,
    bcrypt_rounds: int,
    firstname: str | None = None,
    lastname: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> Account:
    """
    Apply a profile update. Names are upper-cased; a new password is hashed with a
    fresh salt. Raises EmailAlreadyRegisteredError if email belongs to someone else.
    """
    if email is not None and email != account.email:
        if email_taken(db, email, exclude_id=account.id):
            raise EmailAlreadyRegisteredError(email)
        account.email = email
    if firstname is not None:
        account.firstname = _normalize_name(firstname)
    if lastname is not None:
        account.lastname = _normalize_name(lastname)
    if password is not None:
        account.salt = generate_salt(bcrypt_rounds)
        account.hashed_password = hash_password(password, account.salt)
    _commit_email(db, account.email)
    db.refresh(account)
    return account


def set_role(db: Session, account: Account, role: AccountRole) -> Account:
    previous = account.role
    account.role = role
    db.commit()
    db.refresh(account)
    logger.info(
        "Account role changed",
        extra={
            "account_id": account.id,
            "previous_role": previous.value,
            "role": role.value,
        },
    )
    return account


def soft_delete(db: Session, account: Account) -> None:
    """Mark the account deleted; the row is kept."""
    account.deleted_at = datetime.now(timezone.utc)
    db.commit()
    logger.info("Account soft-deleted", extra={"account_id": account.id})


def list_accounts(db: Session, *, include_guests: bool) -> list[Account]:
    query = _live(db)
    if not include_guests:
        query = query.filter(Account.role != AccountRole.GUEST)
    return query.order_by(Account.id).all()
