"""
Exception hierarchy for the cleaning pipeline.

Record-level failures never surface as exceptions outside the pipeline:
they are converted to rejection ledger entries. Only run-level failures
(bad configuration, a source missing expected columns) propagate.
"""


class CleaningError(Exception):
    """Base class for run-level pipeline failures."""


class ConfigError(CleaningError):
    """Raised when the cleaning rules configuration is invalid."""


class SchemaError(CleaningError):
    """Raised when an input source is missing expected columns."""

    def __init__(self, missing_columns: list[str]):
        self.missing_columns = missing_columns
        super().__init__(
            f"Input source is missing required columns: {', '.join(missing_columns)}"
        )


class NormalizationError(Exception):
    """Raised by a field normalizer when a record must be rejected."""

    def __init__(self, reason_code: str, field_name: str, message: str):
        self.reason_code = reason_code
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{reason_code}] {field_name}: {message}")
