"""
Imputation of missing quantities and unit prices.

Imputation runs in two passes. build_tables() aggregates the normalized
survivors into immutable lookup tables using only originally-positive
values; apply() then fills each record's gaps against those tables
without reading any other record, so imputed values never feed later
imputations.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from retail_cleanse.core.models import AuditLog, CleanRecord, Rejection
from retail_cleanse.core.normalizers import NormalizedRecord
from retail_cleanse.observability.logger import get_logger

logger = get_logger(__name__)

PriceGroup = tuple[str, str]


def _is_gap(value: float | None) -> bool:
    return value is None or value == 0


def price_group(values: Mapping) -> PriceGroup | None:
    """Donor group key, or None when product name or category is missing."""
    product_name = values.get("product_name")
    category = values.get("category")
    if product_name is None or category is None:
        return None
    return (product_name, category)


@dataclass(frozen=True)
class ImputationTables:
    """
    Lookup tables computed once per run.

    Attributes:
        quantity_mean: Mean of strictly-positive quantities, None if there are none
        max_price_by_group: (product_name, category) -> max strictly-positive unit price
    """

    quantity_mean: float | None
    max_price_by_group: Mapping[PriceGroup, float]


def build_tables(records: list[NormalizedRecord]) -> ImputationTables:
    """
    Aggregate pass: compute donor tables from pre-imputation values.

    Args:
        records: Normalized survivors of the run

    Returns:
        Frozen ImputationTables
    """
    quantities = [
        r.values["quantity"] for r in records
        if r.values.get("quantity") is not None and r.values["quantity"] > 0
    ]
    quantity_mean = sum(quantities) / len(quantities) if quantities else None

    max_prices: dict[PriceGroup, float] = {}
    for r in records:
        price = r.values.get("unit_price")
        group = price_group(r.values)
        if price is None or price <= 0 or group is None:
            continue
        if price > max_prices.get(group, 0.0):
            max_prices[group] = price

    logger.info(
        f"Imputation tables built: quantity_mean={quantity_mean}, "
        f"price_groups={len(max_prices)}"
    )
    return ImputationTables(
        quantity_mean=quantity_mean,
        max_price_by_group=MappingProxyType(max_prices),
    )


class ImputationEngine:
    """
    Apply pass: fills zero/null quantity and unit price on one record.

    Quantity gaps take the global mean of positive quantities. Price gaps
    take the highest positive price among records with the same product
    name and category. A gap with no donor rejects the record.
    """

    def apply(
        self, record: NormalizedRecord, tables: ImputationTables
    ) -> tuple[CleanRecord | Rejection, list[AuditLog]]:
        """
        Fill gaps on a record.

        Args:
            record: A normalized record
            tables: Lookup tables from build_tables()

        Returns:
            (CleanRecord, audit entries) on success, or (Rejection, []) when
            a gap has no donor
        """
        values = dict(record.values)
        changes: list[AuditLog] = []

        if _is_gap(values.get("quantity")):
            if tables.quantity_mean is None:
                return self._reject(record, "unresolvable_quantity_gap",
                                    "No positive quantities available to impute from"), []
            changes.append(self._entry(record, "quantity", values.get("quantity"),
                                       tables.quantity_mean, "quantity_imputation",
                                       "GlobalMeanQuantity"))
            values["quantity"] = tables.quantity_mean

        if _is_gap(values.get("unit_price")):
            group = price_group(values)
            donor_price = tables.max_price_by_group.get(group) if group else None
            if donor_price is None:
                return self._reject(
                    record, "unresolvable_price_gap",
                    f"No donor price for product {values.get('product_name')!r} "
                    f"in category {values.get('category')!r}",
                ), []
            changes.append(self._entry(record, "unit_price", values.get("unit_price"),
                                       donor_price, "price_imputation",
                                       "MaxPriceByProductCategory"))
            values["unit_price"] = donor_price

        return CleanRecord(origin_index=record.origin_index, **values), changes

    def _reject(self, record: NormalizedRecord, reason_code: str, detail: str) -> Rejection:
        return Rejection(
            origin_index=record.origin_index,
            stage="imputation",
            reason_code=reason_code,
            order_id=record.order_id,
            detail=detail,
        )

    def _entry(self, record, field_name, old_value, new_value, transformation_type, rule):
        return AuditLog(
            origin_index=record.origin_index,
            order_id=record.order_id,
            transformation_type=transformation_type,
            field_name=field_name,
            old_value=None if old_value is None else str(old_value),
            new_value=str(new_value),
            rule_applied=rule,
        )
