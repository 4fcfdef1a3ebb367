"""
Base normalizer interface for all field cleaning rules.

All normalizers must inherit from BaseNormalizer and implement normalize().
"""

from abc import ABC, abstractmethod
from typing import Any

from retail_cleanse.core.errors import NormalizationError

__all__ = ["BaseNormalizer", "NormalizationError", "is_blank"]


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty after trimming."""
    return value is None or (isinstance(value, str) and value.strip() == "")


class BaseNormalizer(ABC):
    """
    Abstract base class for all normalizers.

    Each normalizer cleans one field of a record. It returns the cleaned
    value, or raises NormalizationError when the record must be rejected.
    """

    transformation_type = "normalization"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize normalizer.

        Args:
            field_name: Name of the field to normalize
            parameters: Rule-specific parameters (e.g., date formats)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def normalize(self, value: Any, record: dict[str, Any]) -> Any:
        """
        Clean a value.

        Args:
            value: The raw field value
            record: The entire raw payload (for context-dependent rules)

        Returns:
            The cleaned value

        Raises:
            NormalizationError: If the record must be rejected
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def describe_change(self, old_value: Any, new_value: Any) -> str | None:
        """
        Classify a value change for the audit trail.

        Returns the transformation type, or None when the change is not
        worth recording.
        """
        if old_value == new_value:
            return None
        return self.transformation_type

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
