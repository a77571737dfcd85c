"""
Create an account with any role (e.g. the first president). Run from project root:
  python -m tekyoflow.scripts.create_account EMAIL PASSWORD FIRSTNAME LASTNAME [role]
Example:
  python -m tekyoflow.scripts.create_account board@example.org your-password Ada Lovelace PRESIDENT
"""
import argparse
import logging
import sys

from tekyoflow.core.config import get_settings
from tekyoflow.core.database import SessionLocal
from tekyoflow.core.logging import configure_logging
from tekyoflow.core.permissions import AccountRole
from tekyoflow.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from tekyoflow.services.accounts import EmailAlreadyRegisteredError, create_account

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a TekyoFlow account.")
    parser.add_argument("email", help="Login email (must be unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("firstname", help=f"First name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument("lastname", help=f"Last name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=AccountRole.GUEST.value,
        choices=[r.value for r in AccountRole],
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    email = args.email.strip()
    if "@" not in email:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    for name in (args.firstname, args.lastname):
        if not (NAME_MIN_LEN <= len(name.strip()) <= NAME_MAX_LEN):
            print(f"Names must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters.", file=sys.stderr)
            return 1

    db = SessionLocal()
    try:
        account = create_account(
            db,
            firstname=args.firstname,
            lastname=args.lastname,
            email=email,
            password=args.password,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
            role=AccountRole(args.role),
        )
    except EmailAlreadyRegisteredError:
        print(f"Account '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created account '{account.email}' with role '{account.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
