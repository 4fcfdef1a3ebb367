"""
PassthroughNormalizer - trims descriptive fields that carry no cleaning rule.
"""

from typing import Any

from .base_normalizer import BaseNormalizer, is_blank


class PassthroughNormalizer(BaseNormalizer):
    """Trims surrounding whitespace; blank values become None."""

    transformation_type = "field_trimming"

    def normalize(self, value: Any, record: dict[str, Any]) -> str | None:
        if is_blank(value):
            return None
        return str(value).strip()

    def describe_change(self, old_value: Any, new_value: Any) -> str | None:
        if old_value is None:
            return None
        return super().describe_change(str(old_value), new_value)

    @property
    def rule_type(self) -> str:
        return "passthrough"
