"""Budget request PDF endpoints: generate, preview, download and list."""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse, HTMLResponse
from sqlalchemy.orm import Session

from tekyoflow.api.v1.auth import blacklist_roles, get_current_user, require_gate
from tekyoflow.core.config import Settings, get_settings
from tekyoflow.core.database import get_db
from tekyoflow.core.permissions import OFFICE_GATE, AccountRole
from tekyoflow.models import Account
from tekyoflow.schemas.auth import CurrentUser
from tekyoflow.schemas.budget import (
    BudgetRequestParams,
    PdfGeneratedResponse,
    PdfListResponse,
)
from tekyoflow.services.accounts import AccountNotFoundError, get_by_id
from tekyoflow.services.pdf import (
    HtmlToPdfConverter,
    InvalidFilenameError,
    PdfGenerationError,
    budget_template_variables,
    generate_budget_pdf,
    list_pdfs,
    render_budget_html,
    resolve_pdf_path,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Guests cannot file budget requests.
require_non_guest = blacklist_roles(AccountRole.GUEST)


def get_pdf_converter(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HtmlToPdfConverter:
    return HtmlToPdfConverter(timeout_sec=settings.PDF_RENDER_TIMEOUT_SEC)


def _requesting_account(db: Session, user: CurrentUser) -> Account:
    try:
        return get_by_id(db, user.id)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e


@router.get("/budget-request", response_model=PdfGeneratedResponse)
async def generate_budget_request(
    params: Annotated[BudgetRequestParams, Query()],
    user: Annotated[CurrentUser, Depends(require_non_guest)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    converter: Annotated[HtmlToPdfConverter, Depends(get_pdf_converter)],
) -> PdfGeneratedResponse:
    """
    Render a budget request for the given item as a PDF.

    Contact details come from the requesting account. The returned filename can
    be fetched from /pdf/download/{filename}.
    """
    account = _requesting_account(db, user)
    try:
        filename = await generate_budget_pdf(params, account, settings, converter)
    except PdfGenerationError as e:
        logger.error(
            "Budget PDF generation failed",
            extra={"account_id": account.id, "reason": e.message[:500]},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return PdfGeneratedResponse(filename=filename)


@router.get("/budget-request/preview", response_class=HTMLResponse)
def preview_budget_request(
    params: Annotated[BudgetRequestParams, Query()],
    user: Annotated[CurrentUser, Depends(require_non_guest)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HTMLResponse:
    """The budget request template rendered as HTML, without printing it."""
    account = _requesting_account(db, user)
    html = render_budget_html(
        Path(settings.PDF_TEMPLATE_DIR), budget_template_variables(params, account)
    )
    return HTMLResponse(content=html)


@router.get("/download/{filename}", response_class=FileResponse)
def download_pdf(
    filename: str,
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileResponse:
    """Stream a generated PDF inline."""
    try:
        path = resolve_pdf_path(Path(settings.PDF_OUTPUT_DIR), filename)
    except InvalidFilenameError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename")
    except FileNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(
        path,
        media_type="application/pdf",
        filename=filename,
        content_disposition_type="inline",
    )


@router.get("", response_model=PdfListResponse)
def get_all_pdfs(
    _officer: Annotated[CurrentUser, Depends(require_gate(OFFICE_GATE))],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PdfListResponse:
    """Filenames of every generated PDF (office roles only)."""
    return PdfListResponse(pdfs=list_pdfs(Path(settings.PDF_OUTPUT_DIR)))
