"""
DateNormalizer - parses known date encodings into a calendar date.
"""

from datetime import date, datetime
from typing import Any

from .base_normalizer import BaseNormalizer, NormalizationError, is_blank


class DateNormalizer(BaseNormalizer):
    """
    Parses a date field into a ``datetime.date``.

    Parameters:
    - formats: strptime formats tried in priority order; the first one
      matching the token's shape wins

    Tokens matching no configured format fall through to a generic ISO
    parse, so timestamps such as "2023-03-05T10:15:00" still resolve.
    """

    transformation_type = "date_normalization"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.formats: list[str] = list(self.parameters.get("formats") or [])
        if not self.formats:
            raise ValueError("DateNormalizer requires 'formats' parameter")

    def parse(self, value: Any) -> date | None:
        """Return the parsed date, or None if the value is not a date."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if is_blank(value):
            return None

        token = str(value).strip()
        for fmt in self.formats:
            try:
                return datetime.strptime(token, fmt).date()
            except ValueError:
                continue

        try:
            return datetime.fromisoformat(token).date()
        except ValueError:
            return None

    def normalize(self, value: Any, record: dict[str, Any]) -> date:
        """
        Parse the date.

        Raises:
            NormalizationError: If the value is missing or matches no known encoding
        """
        parsed = self.parse(value)
        if parsed is None:
            raise NormalizationError(
                reason_code="missing_or_invalid_date",
                field_name=self.field_name,
                message=f"Cannot parse {value!r} as a date",
            )
        return parsed

    def describe_change(self, old_value: Any, new_value: Any) -> str | None:
        if isinstance(old_value, str) and old_value == new_value.isoformat():
            return None
        if isinstance(old_value, date) and not isinstance(old_value, datetime):
            return None
        return self.transformation_type

    @property
    def rule_type(self) -> str:
        return "date"
