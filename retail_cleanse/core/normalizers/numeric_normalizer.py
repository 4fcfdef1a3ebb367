"""
NumericNormalizer - parses quantities and prices and corrects their sign.
"""

import math
import re
from typing import Any

from .base_normalizer import BaseNormalizer, is_blank

_CURRENCY_PREFIX = re.compile(r"^[$€£¥]\s*")


class NumericNormalizer(BaseNormalizer):
    """
    Parses a numeric field and replaces negative values with their absolute value.

    Negative values are treated as data-entry errors, not as returns or
    credits. This discards the distinction between a return and a forward
    sale and needs product-owner sign-off before the data feeds refunds
    reporting.

    Unparseable values become None and are filled by the imputation stage
    like any other gap. Zero stays zero for the same reason.
    """

    transformation_type = "sign_correction"

    def parse(self, value: Any) -> float | None:
        """Parse a raw value to float, or None if it is blank or not a number."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int | float):
            number = float(value)
        elif is_blank(value):
            return None
        else:
            token = _CURRENCY_PREFIX.sub("", str(value).strip()).replace(",", "")
            try:
                number = float(token)
            except ValueError:
                return None

        if not math.isfinite(number):
            return None
        return number

    def normalize(self, value: Any, record: dict[str, Any]) -> float | None:
        number = self.parse(value)
        if number is None:
            return None
        return abs(number)

    def describe_change(self, old_value: Any, new_value: Any) -> str | None:
        if new_value is None:
            return None if is_blank(old_value) else "unparseable_numeric"
        parsed = self.parse(old_value)
        if parsed is not None and parsed < 0:
            return "sign_correction"
        return None

    @property
    def rule_type(self) -> str:
        return "numeric"
