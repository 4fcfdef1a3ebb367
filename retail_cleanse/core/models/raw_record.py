"""
RawRecord model representing one ingested transaction row (ephemeral).
"""

from typing import Any

from pydantic import BaseModel, Field

RAW_FIELDS: tuple[str, ...] = (
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
    "email",
)


class RawRecord(BaseModel):
    """
    A single transaction row exactly as it was read from the source.

    Note: RawRecord values are never coerced. Any field may be absent,
    blank or malformed; rejection is the job of downstream stages.

    Attributes:
        origin_index: Position of the row in the original input ordering
        order_id .. email: Source fields, preserved verbatim
    """

    origin_index: int = Field(..., ge=0)
    order_id: Any = None
    order_date: Any = None
    customer_name: Any = None
    country: Any = None
    product_id: Any = None
    product_name: Any = None
    category: Any = None
    quantity: Any = None
    unit_price: Any = None
    discount_code: Any = None
    sales_rep: Any = None
    payment_method: Any = None
    order_source: Any = None
    email: Any = None

    def payload(self) -> dict[str, Any]:
        """Return the source fields without origin metadata."""
        return {name: getattr(self, name) for name in RAW_FIELDS}

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "origin_index": 7,
                "order_id": " 1042 ",
                "order_date": "05/03/2023",
                "customer_name": "  jane   O'DOE ",
                "country": "usa",
                "product_id": "P-118",
                "product_name": "Denim Jacket",
                "category": "Apparel",
                "quantity": "-2",
                "unit_price": "0",
                "discount_code": "SPRING10",
                "sales_rep": "Alex",
                "payment_method": "Card",
                "order_source": "Online",
                "email": "jane@example.com",
            }
        }
