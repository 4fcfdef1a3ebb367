"""
Normalizer engine for applying field cleaning rules to records.

The engine builds one normalizer per field from the cleaning config and
applies them to each identity-resolved record, short-circuiting on the
first rejection.
"""

from dataclasses import dataclass, field
from typing import Any

from retail_cleanse.core.config import CleaningConfig
from retail_cleanse.core.models import AuditLog, RawRecord, Rejection

from .base_normalizer import BaseNormalizer, NormalizationError
from .country_normalizer import CountryNormalizer
from .date_normalizer import DateNormalizer
from .name_normalizer import NameNormalizer
from .numeric_normalizer import NumericNormalizer
from .passthrough_normalizer import PassthroughNormalizer
from .product_normalizer import ProductNormalizer

# (field_name, rule_type) in application order. Rejecting rules come
# first so a record failing both date and product reports the date.
NORMALIZATION_PLAN: tuple[tuple[str, str], ...] = (
    ("order_date", "date"),
    ("product_name", "product"),
    ("customer_name", "name"),
    ("country", "country"),
    ("quantity", "numeric"),
    ("unit_price", "numeric"),
    ("product_id", "passthrough"),
    ("category", "passthrough"),
    ("discount_code", "passthrough"),
    ("sales_rep", "passthrough"),
    ("payment_method", "passthrough"),
    ("order_source", "passthrough"),
)


@dataclass
class NormalizedRecord:
    """A record that survived normalization, before imputation."""

    origin_index: int
    order_id: str
    values: dict[str, Any]
    changes: list[AuditLog] = field(default_factory=list)
    unmapped_country: str | None = None


class NormalizerEngine:
    """
    Orchestrates field normalizers on identity-resolved records.
    """

    NORMALIZER_REGISTRY = {
        "date": DateNormalizer,
        "name": NameNormalizer,
        "country": CountryNormalizer,
        "product": ProductNormalizer,
        "numeric": NumericNormalizer,
        "passthrough": PassthroughNormalizer,
    }

    def __init__(self, config: CleaningConfig | None = None):
        """
        Initialize the engine with cleaning tables.

        Args:
            config: Cleaning configuration (defaults to built-in tables)
        """
        self.config = config or CleaningConfig()
        self.normalizers: list[BaseNormalizer] = []
        self._build_normalizers()

    def _parameters_for(self, rule_type: str) -> dict[str, Any]:
        if rule_type == "date":
            return {"formats": self.config.date_formats}
        if rule_type == "name":
            return {"artifact_characters": self.config.name_artifact_characters}
        if rule_type == "country":
            return {"lookup": self.config.country_lookup()}
        if rule_type == "product":
            return {"placeholders": self.config.product_placeholders}
        return {}

    def _build_normalizers(self) -> None:
        """Build normalizer instances from the normalization plan."""
        for field_name, rule_type in NORMALIZATION_PLAN:
            normalizer_class = self.NORMALIZER_REGISTRY.get(rule_type)
            if not normalizer_class:
                raise ValueError(f"Unknown rule type: {rule_type}")
            self.normalizers.append(normalizer_class(field_name, self._parameters_for(rule_type)))

    def normalize_record(self, order_id: str, record: RawRecord) -> NormalizedRecord | Rejection:
        """
        Apply every normalizer to a record.

        Args:
            order_id: Canonical order id from identity resolution
            record: The raw record

        Returns:
            NormalizedRecord with cleaned values and audit entries, or a
            Rejection from the first normalizer that refused the record
        """
        payload = record.payload()
        values: dict[str, Any] = {"order_id": order_id}
        changes: list[AuditLog] = []
        unmapped_country = None

        raw_id = payload["order_id"]
        if str(raw_id) != order_id:
            changes.append(AuditLog(
                origin_index=record.origin_index,
                order_id=order_id,
                transformation_type="id_canonicalization",
                field_name="order_id",
                old_value=str(raw_id),
                new_value=order_id,
                rule_applied="IdentityResolver",
            ))

        for normalizer in self.normalizers:
            field_name = normalizer.field_name
            old_value = payload.get(field_name)

            try:
                new_value = normalizer.normalize(old_value, payload)
            except NormalizationError as e:
                return Rejection(
                    origin_index=record.origin_index,
                    stage="normalization",
                    reason_code=e.reason_code,
                    order_id=order_id,
                    detail=e.message,
                )

            values[field_name] = new_value

            transformation = normalizer.describe_change(old_value, new_value)
            if transformation:
                changes.append(AuditLog(
                    origin_index=record.origin_index,
                    order_id=order_id,
                    transformation_type=transformation,
                    field_name=field_name,
                    old_value=None if old_value is None else str(old_value),
                    new_value=None if new_value is None else str(new_value),
                    rule_applied=normalizer.__class__.__name__,
                ))

            if isinstance(normalizer, CountryNormalizer) and not normalizer.is_mapped(old_value):
                unmapped_country = new_value

        return NormalizedRecord(
            origin_index=record.origin_index,
            order_id=order_id,
            values=values,
            changes=changes,
            unmapped_country=unmapped_country,
        )

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded normalizers.

        Returns:
            Dictionary with normalizer counts by rule type
        """
        counts: dict[str, int] = {}
        for normalizer in self.normalizers:
            counts[normalizer.rule_type] = counts.get(normalizer.rule_type, 0) + 1
        return {"total_rules": len(self.normalizers), "rules_by_type": counts}
