"""Budget request PDFs: render the HTML template and print it with headless Chromium."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from tekyoflow.models import Account
from tekyoflow.schemas.budget import BudgetRequestParams

if TYPE_CHECKING:
    from tekyoflow.core.config import Settings

logger = logging.getLogger(__name__)

BUDGET_TEMPLATE_NAME = "budget_request.html"

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class PdfGenerationError(Exception):
    """Raised when the browser fails to produce a usable PDF."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class InvalidFilenameError(Exception):
    """Raised for download names that could escape the output directory."""


@dataclass
class PdfOptions:
    """Page setup passed to the browser's print-to-PDF."""

    format: str = "A4"
    print_background: bool = True
    margin: dict[str, str] = field(
        default_factory=lambda: {
            "top": "0.5in",
            "right": "0.5in",
            "bottom": "0.5in",
            "left": "0.5in",
        }
    )
    landscape: bool = False
    scale: float = 1.0


BUDGET_PDF_OPTIONS = PdfOptions(
    margin={"top": "0.5mm", "right": "0.5mm", "bottom": "0.5mm", "left": "0.5mm"},
)


class HtmlToPdfConverter:
    """Prints HTML documents to PDF files through a headless Chromium."""

    def __init__(self, timeout_sec: float = 30.0) -> None:
        self.timeout_ms = timeout_sec * 1000

    async def convert(self, html: str, output_path: Path, options: PdfOptions) -> None:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                try:
                    page = await browser.new_page()
                    await page.set_content(
                        html, wait_until="networkidle", timeout=self.timeout_ms
                    )
                    await page.pdf(
                        path=str(output_path),
                        format=options.format,
                        print_background=options.print_background,
                        margin=options.margin,
                        landscape=options.landscape,
                        scale=options.scale,
                        prefer_css_page_size=True,
                    )
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise PdfGenerationError(f"Browser failed to render PDF: {e}", cause=e) from e


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def budget_template_variables(
    params: BudgetRequestParams, account: Account
) -> dict[str, str]:
    """Values substituted into the budget request template."""
    return {
        "ITEM_NAME": params.name,
        "ITEM_DESCRIPTION": params.description,
        "ITEM_QUANTITY": _format_number(params.quantity),
        "PRICE_PER_UNIT": _format_number(params.price_per_unit),
        "TOTAL_PRICE": params.total_price,
        "ITEM_LINK": str(params.link),
        "ITEM_IMAGE": str(params.image),
        "CONTACT_NAME": f"{account.firstname} {account.lastname}",
        "CONTACT_EMAIL": account.email,
        "CONTACT_ROLE": account.role.value,
    }


def render_budget_html(template_dir: Path, variables: dict[str, str]) -> str:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html"]),
    )
    return env.get_template(BUDGET_TEMPLATE_NAME).render(**variables)


async def generate_budget_pdf(
    params: BudgetRequestParams,
    account: Account,
    settings: "Settings",
    converter: HtmlToPdfConverter,
) -> str:
    """
    Render the budget request for account and write it under PDF_OUTPUT_DIR.

    Returns the generated filename. Raises PdfGenerationError if the browser
    fails or produces an empty file.
    """
    html = render_budget_html(
        settings.PDF_TEMPLATE_DIR, budget_template_variables(params, account)
    )
    output_dir = Path(settings.PDF_OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"budget-{int(time.time() * 1000)}.pdf"

    start = time.perf_counter()
    try:
        await converter.convert(html, output_path, BUDGET_PDF_OPTIONS)
    except PdfGenerationError:
        output_path.unlink(missing_ok=True)
        raise
    elapsed = time.perf_counter() - start

    if not output_path.is_file() or output_path.stat().st_size == 0:
        output_path.unlink(missing_ok=True)
        raise PdfGenerationError("Generated PDF file is empty")

    logger.info(
        "Budget PDF generated",
        extra={
            "pdf_filename": output_path.name,
            "account_id": account.id,
            "render_seconds": elapsed,
        },
    )
    return output_path.name


def resolve_pdf_path(output_dir: Path, filename: str) -> Path:
    """
    Map a download name to a file inside output_dir.

    Raises InvalidFilenameError for names containing path separators or '..'.
    Raises FileNotFoundError when no such file exists.
    """
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        raise InvalidFilenameError(filename)
    path = Path(output_dir) / filename
    if not path.is_file():
        raise FileNotFoundError(filename)
    return path


def list_pdfs(output_dir: Path) -> list[str]:
    """Names of generated PDFs, sorted; empty when nothing was generated yet."""
    directory = Path(output_dir)
    if not directory.is_dir():
        return []
    return sorted(p.name for p in directory.iterdir() if p.is_file() and p.suffix == ".pdf")
