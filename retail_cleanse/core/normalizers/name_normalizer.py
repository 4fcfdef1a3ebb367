"""
NameNormalizer - cleans customer names. Never rejects a record.
"""

from typing import Any

from .base_normalizer import BaseNormalizer, is_blank


class NameNormalizer(BaseNormalizer):
    """
    Strips quote artifacts, collapses whitespace and capitalizes.

    Parameters:
    - artifact_characters: characters removed wherever they appear

    Blank names become None. Casing follows ``str.capitalize``: first
    letter upper, the rest lower.
    """

    transformation_type = "name_cleanup"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        artifacts = self.parameters.get("artifact_characters", "'")
        self._delete_table = str.maketrans("", "", artifacts)

    def normalize(self, value: Any, record: dict[str, Any]) -> str | None:
        if is_blank(value):
            return None

        cleaned = str(value).translate(self._delete_table)
        cleaned = " ".join(cleaned.split())
        if not cleaned:
            return None
        return cleaned.capitalize()

    @property
    def rule_type(self) -> str:
        return "name"
