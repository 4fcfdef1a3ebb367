"""
AuditLog model representing a lineage entry for a field modification.
"""

from pydantic import BaseModel, Field


class AuditLog(BaseModel):
    """
    Lineage entry tracking one value change applied to a kept record.

    Attributes:
        origin_index: Which source row was modified
        order_id: Canonical order id of the record
        transformation_type: Type of change (e.g., "date_normalization", "price_imputation")
        field_name: Which field was affected
        old_value: Value before the change (as string)
        new_value: Value after the change (as string)
        rule_applied: Which normalizer or imputation rule made the change
    """

    origin_index: int = Field(..., ge=0)
    order_id: str | None = None
    transformation_type: str = Field(..., min_length=1)
    field_name: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    rule_applied: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "origin_index": 7,
                "order_id": "1042",
                "transformation_type": "sign_correction",
                "field_name": "quantity",
                "old_value": "-2",
                "new_value": "2.0",
                "rule_applied": "NumericNormalizer",
            }
        }
