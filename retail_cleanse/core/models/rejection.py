"""
Rejection model representing one rejection ledger entry.
"""

from typing import Literal

from pydantic import BaseModel, Field

Stage = Literal["identity", "normalization", "imputation"]

ReasonCode = Literal[
    "invalid_id",
    "duplicate_id",
    "missing_or_invalid_date",
    "invalid_product",
    "unresolvable_price_gap",
    "unresolvable_quantity_gap",
]

STAGES: tuple[str, ...] = ("identity", "normalization", "imputation")

REASON_CODES: tuple[str, ...] = (
    "invalid_id",
    "duplicate_id",
    "missing_or_invalid_date",
    "invalid_product",
    "unresolvable_price_gap",
    "unresolvable_quantity_gap",
)


class Rejection(BaseModel):
    """
    A record excluded from the clean output, with the reason why.

    Attributes:
        origin_index: Position of the rejected source row
        stage: Pipeline stage that rejected the record
        reason_code: Machine-readable rejection reason
        order_id: Raw order id as read (may be missing or malformed)
        detail: Human-readable explanation
    """

    origin_index: int = Field(..., ge=0)
    stage: Stage
    reason_code: ReasonCode
    order_id: str | None = None
    detail: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "origin_index": 12,
                "stage": "identity",
                "reason_code": "duplicate_id",
                "order_id": "1042",
                "detail": "order_id 1042 first seen at origin index 7",
            }
        }
