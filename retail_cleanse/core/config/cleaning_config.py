"""
Cleaning rules configuration model.

Sentinel ids, product placeholders, the country alias table and the date
formats reflect observed data-quality noise and vary by source, so they
live here as data rather than in the normalizers.
"""

import re

from pydantic import BaseModel, Field, field_validator

from retail_cleanse.core.models.raw_record import RAW_FIELDS

DEFAULT_INVALID_ORDER_IDS = ["", "0", "???", "99999", "ORDX", "OrderID"]

DEFAULT_DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y", "%d-%b-%Y", "%d-%b-%y"]

DEFAULT_PRODUCT_PLACEHOLDERS = ["unknown item", "unknown", "()", "(unknown)", "n/a"]

DEFAULT_COUNTRY_ALIASES = {
    "United States": ["usa", "us", "u.s.", "u.s.a.", "united states of america", "america"],
    "United Kingdom": ["uk", "u.k.", "gb", "great britain", "england"],
    "United Arab Emirates": ["uae", "u.a.e."],
    "Germany": ["de", "deutschland"],
    "Canada": ["ca", "can"],
    "Australia": ["au", "aus"],
    "India": ["in", "ind"],
}


class CleaningConfig(BaseModel):
    """
    Externally supplied cleaning tables.

    Attributes:
        invalid_order_ids: Sentinel order ids, compared case-insensitively after trimming
        order_id_pattern: Regex a valid order id must fully match
        date_formats: strptime formats tried in priority order
        name_artifact_characters: Characters stripped from customer names
        country_aliases: Canonical country name -> known variants
        product_placeholders: Product names treated as missing, case-insensitive
        required_columns: Fields the source must expose or the run aborts
    """

    invalid_order_ids: list[str] = Field(default_factory=lambda: list(DEFAULT_INVALID_ORDER_IDS))
    order_id_pattern: str = r"^\d+$"
    date_formats: list[str] = Field(default_factory=lambda: list(DEFAULT_DATE_FORMATS), min_length=1)
    name_artifact_characters: str = "'\"`’"
    country_aliases: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_COUNTRY_ALIASES.items()}
    )
    product_placeholders: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRODUCT_PLACEHOLDERS)
    )
    required_columns: list[str] = Field(default_factory=lambda: list(RAW_FIELDS))

    @field_validator("order_id_pattern")
    @classmethod
    def check_pattern_compiles(cls, v):
        """Validate that the order id pattern is a usable regex."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid order_id_pattern: {e}")
        return v

    @field_validator("required_columns")
    @classmethod
    def check_known_columns(cls, v):
        """Validate that required columns name known raw fields."""
        unknown = [name for name in v if name not in RAW_FIELDS]
        if unknown:
            raise ValueError(f"Unknown required columns: {unknown}")
        return v

    def country_lookup(self) -> dict[str, str]:
        """
        Build the case-insensitive variant -> canonical name table.

        Canonical names map to themselves so differently-cased spellings
        of the full name are also normalized.
        """
        lookup: dict[str, str] = {}
        for canonical, variants in self.country_aliases.items():
            lookup[canonical.strip().lower()] = canonical
            for variant in variants:
                lookup[variant.strip().lower()] = canonical
        return lookup

    class Config:
        extra = "forbid"
        frozen = True
