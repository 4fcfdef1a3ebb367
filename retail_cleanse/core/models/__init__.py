"""
Core data models for the retail cleaning pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .audit_log import AuditLog
from .clean_record import CLEAN_FIELDS, CleanRecord
from .raw_record import RAW_FIELDS, RawRecord
from .reconciliation import PipelineResult, ReconciliationReport
from .rejection import REASON_CODES, STAGES, Rejection

__all__ = [
    "RAW_FIELDS",
    "CLEAN_FIELDS",
    "REASON_CODES",
    "STAGES",
    "RawRecord",
    "CleanRecord",
    "Rejection",
    "AuditLog",
    "ReconciliationReport",
    "PipelineResult",
]
