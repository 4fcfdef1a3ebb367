"""
Identity resolution: one record per valid order id.

Resolution is two-pass. The first pass computes the first-occurrence
origin index of every valid order id; the second decides each record
against that table. The surviving duplicate therefore depends on input
order, which callers must preserve.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from retail_cleanse.core.config import CleaningConfig
from retail_cleanse.core.models import RawRecord, Rejection
from retail_cleanse.observability.logger import get_logger

logger = get_logger(__name__)


@dataclass
class IdentityResolution:
    """Partition produced by the identity resolver."""

    kept: list[tuple[str, RawRecord]] = field(default_factory=list)
    rejected: list[Rejection] = field(default_factory=list)


class IdentityResolver:
    """
    Rejects structurally invalid order ids and keeps the first of each duplicate set.
    """

    def __init__(self, config: CleaningConfig | None = None):
        self.config = config or CleaningConfig()
        self.sentinels = {s.strip().lower() for s in self.config.invalid_order_ids}
        self.pattern = re.compile(self.config.order_id_pattern)

    def canonical_id(self, value: Any) -> str | None:
        """
        Return the canonical form of an order id, or None if it is invalid.

        Invalid means null, blank after trimming, a configured sentinel
        (case-insensitive), not matching the id pattern, or not positive.
        Integer-like ids drop leading zeros so "0042" and "42" collide.
        """
        if value is None:
            return None
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        token = str(value).strip()
        if not token or token.lower() in self.sentinels:
            return None
        if not self.pattern.fullmatch(token):
            return None
        if token.isdigit():
            if int(token) <= 0:
                return None
            token = str(int(token))
            # zero-padded sentinels such as "099999"
            if token in self.sentinels:
                return None
        return token

    def resolve(self, records: list[RawRecord]) -> IdentityResolution:
        """
        Partition records into kept and rejected.

        Args:
            records: RawRecords in input order

        Returns:
            IdentityResolution with kept (canonical_id, record) pairs in
            input order and rejections tagged invalid_id or duplicate_id
        """
        canonical = [self.canonical_id(record.order_id) for record in records]

        # Pass 1: first occurrence per valid id
        first_seen: dict[str, int] = {}
        for record, order_id in zip(records, canonical):
            if order_id is not None and (
                order_id not in first_seen or record.origin_index < first_seen[order_id]
            ):
                first_seen[order_id] = record.origin_index

        # Pass 2: per-record decision
        resolution = IdentityResolution()
        for record, order_id in zip(records, canonical):
            raw_id = None if record.order_id is None else str(record.order_id)
            if order_id is None:
                resolution.rejected.append(Rejection(
                    origin_index=record.origin_index,
                    stage="identity",
                    reason_code="invalid_id",
                    order_id=raw_id,
                    detail=f"order_id {raw_id!r} is missing, a sentinel, or malformed",
                ))
            elif first_seen[order_id] != record.origin_index:
                resolution.rejected.append(Rejection(
                    origin_index=record.origin_index,
                    stage="identity",
                    reason_code="duplicate_id",
                    order_id=raw_id,
                    detail=f"order_id {order_id} first seen at origin index {first_seen[order_id]}",
                ))
            else:
                resolution.kept.append((order_id, record))

        logger.info(
            f"Identity resolution: {len(resolution.kept)} kept, "
            f"{len(resolution.rejected)} rejected"
        )
        return resolution
