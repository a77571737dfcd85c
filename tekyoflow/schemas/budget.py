"""Schemas for budget request PDF generation."""

from pydantic import AnyUrl, BaseModel, Field


class BudgetRequestParams(BaseModel):
    """Query parameters describing the item a budget is requested for."""

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    quantity: float
    price_per_unit: float
    image: AnyUrl
    link: AnyUrl

    @property
    def total_price(self) -> str:
        """quantity x price_per_unit, formatted with two decimals."""
        return f"{self.quantity * self.price_per_unit:.2f}"


class PdfGeneratedResponse(BaseModel):
    status: int = 200
    filename: str
    message: str = "PDF generated successfully"


class PdfListResponse(BaseModel):
    status: int = 200
    pdfs: list[str]
