"""Account endpoints: own profile, member listing, role changes and soft deletion."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from tekyoflow.api.v1.auth import (
    Access,
    evaluate_gate,
    get_current_user,
    get_token_issuer,
    issue_for,
    whitelist_roles,
)
from tekyoflow.core.config import Settings, get_settings
from tekyoflow.core.database import get_db
from tekyoflow.core.permissions import FORBIDDEN_ROLE_MESSAGE, OFFICE_GATE, AccountRole
from tekyoflow.core.security import TokenIssuer
from tekyoflow.models import Account
from tekyoflow.schemas.account import (
    AccountListItem,
    ProfileResponse,
    ProfileUpdateRequest,
    RoleUpdateRequest,
)
from tekyoflow.schemas.auth import CurrentUser
from tekyoflow.services.accounts import (
    AccountNotFoundError,
    EmailAlreadyRegisteredError,
    get_by_email,
    get_by_id,
    list_accounts,
    set_role,
    soft_delete,
    update_account,
)

router = APIRouter()


def _get_or_404(
    db: Session, *, account_id: int | None = None, email: str | None = None
) -> Account:
    try:
        if account_id is not None:
            return get_by_id(db, account_id)
        return get_by_email(db, email)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


def _office_view(account: Account) -> AccountListItem:
    return AccountListItem.model_validate(account)


def _member_view(account: Account) -> AccountListItem:
    return AccountListItem(
        firstname=account.firstname,
        lastname=account.lastname,
        role=account.role,
    )


@router.get("", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    """Profile of the account the token was issued for."""
    account = _get_or_404(db, email=current_user.email)
    return ProfileResponse.model_validate(account)


@router.patch("", response_model=ProfileResponse)
def update_profile(
    body: ProfileUpdateRequest,
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> ProfileResponse:
    """
    Update names, email or password of the authenticated account.

    Names are stored upper-cased; a new password is re-hashed with a fresh salt.
    The refreshed token is returned in the Authorization response header.
    """
    account = _get_or_404(db, email=current_user.email)
    try:
        account = update_account(
            db,
            account,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
            firstname=body.firstname,
            lastname=body.lastname,
            email=body.email,
            password=body.password,
        )
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    response.headers["Authorization"] = f"Bearer {issue_for(issuer, account)}"
    return ProfileResponse.model_validate(account)


@router.get(
    "/all",
    response_model=list[AccountListItem],
    response_model_exclude_none=True,
)
def get_all_accounts(
    access: Annotated[Access, Depends(evaluate_gate(OFFICE_GATE))],
    db: Annotated[Session, Depends(get_db)],
) -> list[AccountListItem]:
    """
    List live accounts.

    Office roles get every account with email and timestamps; other roles get
    names and roles of non-guest accounts only.
    """
    accounts = list_accounts(db, include_guests=access.granted)
    view = _office_view if access.granted else _member_view
    return [view(a) for a in accounts]


@router.patch(
    "/{account_id}/role",
    response_model=AccountListItem,
)
def update_role(
    account_id: int,
    body: RoleUpdateRequest,
    officer: Annotated[
        CurrentUser,
        Depends(whitelist_roles(AccountRole.PRESIDENT, AccountRole.VICE_PRESIDENT)),
    ],
    db: Annotated[Session, Depends(get_db)],
) -> AccountListItem:
    """
    Change another account's role (president and vice-president only).

    Nobody may change their own role. Only the president may grant PRESIDENT or
    change the role of a PRESIDENT account.
    """
    if officer.id == account_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot change your own role",
        )
    account = _get_or_404(db, account_id=account_id)
    president_involved = AccountRole.PRESIDENT in (account.role, body.role)
    if president_involved and officer.role != AccountRole.PRESIDENT.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_ROLE_MESSAGE)
    return _office_view(set_role(db, account, body.role))


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: int,
    president: Annotated[CurrentUser, Depends(whitelist_roles(AccountRole.PRESIDENT))],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Soft-delete an account (president only). The row is kept with deleted_at set."""
    if president.id == account_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    account = _get_or_404(db, account_id=account_id)
    soft_delete(db, account)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
