"""
ProductNormalizer - rejects records whose product name is a placeholder.
"""

from typing import Any

from .base_normalizer import BaseNormalizer, NormalizationError, is_blank


class ProductNormalizer(BaseNormalizer):
    """
    Trims the product name and rejects missing or placeholder names.

    Parameters:
    - placeholders: names treated as missing, compared case-insensitively
    """

    transformation_type = "field_trimming"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.placeholders = {
            p.strip().lower() for p in self.parameters.get("placeholders") or []
        }

    def normalize(self, value: Any, record: dict[str, Any]) -> str:
        """
        Raises:
            NormalizationError: If the name is blank or a placeholder
        """
        if is_blank(value):
            raise NormalizationError(
                reason_code="invalid_product",
                field_name=self.field_name,
                message="Product name is missing",
            )

        name = str(value).strip()
        if name.lower() in self.placeholders:
            raise NormalizationError(
                reason_code="invalid_product",
                field_name=self.field_name,
                message=f"Product name {name!r} is a placeholder",
            )
        return name

    @property
    def rule_type(self) -> str:
        return "product"
