"""
CleanRecord model representing one canonical transaction row.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

CLEAN_FIELDS: tuple[str, ...] = (
    "order_id",
    "order_date",
    "customer_name",
    "country",
    "product_id",
    "product_name",
    "category",
    "quantity",
    "unit_price",
    "discount_code",
    "sales_rep",
    "payment_method",
    "order_source",
)


class CleanRecord(BaseModel):
    """
    Canonical output row produced by the cleaning pipeline.

    Attributes:
        origin_index: Position of the source row (metadata, not an output column)
        order_id: Canonical positive integer-like identifier, unique per run
        order_date: Calendar date
        customer_name: Cleaned, capitalized name or None if originally blank
        country: Canonical country name (unmapped values pass through)
        product_name: Non-placeholder product name
        quantity: Strictly positive quantity (sign-corrected or imputed)
        unit_price: Strictly positive unit price (sign-corrected or imputed)
        Other fields: trimmed passthrough values
    """

    origin_index: int = Field(..., ge=0)
    order_id: str = Field(..., min_length=1)
    order_date: date
    customer_name: str | None = None
    country: str | None = None
    product_id: str | None = None
    product_name: str = Field(..., min_length=1)
    category: str | None = None
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., gt=0)
    discount_code: str | None = None
    sales_rep: str | None = None
    payment_method: str | None = None
    order_source: str | None = None

    def to_row(self) -> dict[str, Any]:
        """Return the 13 output columns with the date in ISO form."""
        row = {name: getattr(self, name) for name in CLEAN_FIELDS}
        row["order_date"] = self.order_date.isoformat()
        return row

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "origin_index": 7,
                "order_id": "1042",
                "order_date": "2023-03-05",
                "customer_name": "Jane odoe",
                "country": "United States",
                "product_id": "P-118",
                "product_name": "Denim Jacket",
                "category": "Apparel",
                "quantity": 2.0,
                "unit_price": 49.99,
                "discount_code": "SPRING10",
                "sales_rep": "Alex",
                "payment_method": "Card",
                "order_source": "Online",
            }
        }
