"""
CountryNormalizer - maps known country variants to one canonical name.
"""

from typing import Any

from .base_normalizer import BaseNormalizer, is_blank


class CountryNormalizer(BaseNormalizer):
    """
    Maps abbreviations and casing variants to a canonical country name.

    Parameters:
    - lookup: lowercase variant -> canonical name

    The table is open-ended: values it does not know pass through trimmed.
    Such values are a data-quality gap to extend the table with, not an
    error, so callers report them via is_mapped().
    """

    transformation_type = "country_mapping"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.lookup: dict[str, str] = dict(self.parameters.get("lookup") or {})

    def is_mapped(self, value: Any) -> bool:
        """True if the value is blank or has an entry in the lookup table."""
        if is_blank(value):
            return True
        return str(value).strip().lower() in self.lookup

    def normalize(self, value: Any, record: dict[str, Any]) -> str | None:
        if is_blank(value):
            return None

        token = str(value).strip()
        return self.lookup.get(token.lower(), token)

    @property
    def rule_type(self) -> str:
        return "country"
