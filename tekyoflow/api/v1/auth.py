"""Registration, login and the auth dependencies (get_current_user, role gates)."""

import logging
from collections.abc import Callable
from typing import Annotated, NamedTuple

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tekyoflow.core.config import Settings, get_settings
from tekyoflow.core.database import get_db
from tekyoflow.core.permissions import FORBIDDEN_ROLE_MESSAGE, AccountRole, RoleGate
from tekyoflow.core.security import TokenIssuer, TokenVerifier, verify_password
from tekyoflow.models import Account
from tekyoflow.schemas.auth import (
    AccountSummary,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from tekyoflow.services.accounts import (
    EmailAlreadyRegisteredError,
    create_account,
    find_by_email,
)

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_token_issuer(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenIssuer:
    return TokenIssuer(settings.token_config())


def get_token_verifier(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenVerifier:
    return TokenVerifier(settings.token_config())


def issue_for(issuer: TokenIssuer, account: Account) -> str:
    """Sign a token carrying the account's current id, email and role."""
    return issuer.issue(account.id, account.email, account.role)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.
    401 when no token is sent, 403 when it is invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = credentials.credentials
    try:
        claims = verifier.verify(token)
    except jwt.PyJWTError as e:
        logger.info("Rejected access token", extra={"reason": type(e).__name__})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )
    return CurrentUser(**claims)


class Access(NamedTuple):
    """Authenticated user and whether a RoleGate admitted them."""

    user: CurrentUser
    granted: bool


def evaluate_gate(gate: RoleGate) -> Callable[..., Access]:
    """Dependency factory: authenticate, then evaluate gate once without rejecting."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> Access:
        return Access(user=current_user, granted=gate.allows(current_user.role))

    return dependency


def require_gate(gate: RoleGate) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticate, then 403 unless gate admits the user's role."""
    evaluate = evaluate_gate(gate)

    def dependency(
        access: Annotated[Access, Depends(evaluate)],
    ) -> CurrentUser:
        if not access.granted:
            logger.info(
                "Role gate denied access",
                extra={
                    "account_id": access.user.id,
                    "role": access.user.role,
                    "gate_mode": gate.mode.value,
                },
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=FORBIDDEN_ROLE_MESSAGE,
            )
        return access.user

    return dependency


def whitelist_roles(*roles: AccountRole) -> Callable[..., CurrentUser]:
    """Admit only the given roles."""
    return require_gate(RoleGate.whitelist(*roles))


def blacklist_roles(*roles: AccountRole) -> Callable[..., CurrentUser]:
    """Admit every role except the given ones."""
    return require_gate(RoleGate.blacklist(*roles))


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> TokenResponse:
    """
    Create a GUEST account and return a JWT for it.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        account = create_account(
            db,
            firstname=body.firstname,
            lastname=body.lastname,
            email=body.email,
            password=body.password,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return TokenResponse(
        token=issue_for(issuer, account),
        account=AccountSummary.model_validate(account),
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> TokenResponse:
    """Authenticate with email and password; returns a JWT access token."""
    account = find_by_email(db, body.email)
    if account is None or not verify_password(body.password, account.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return TokenResponse(
        token=issue_for(issuer, account),
        account=AccountSummary.model_validate(account),
    )
