"""
Run-level result models: the reconciliation report and the pipeline result.
"""

from pydantic import BaseModel, Field

from .audit_log import AuditLog
from .clean_record import CleanRecord
from .rejection import Rejection


class ReconciliationReport(BaseModel):
    """
    Accounts for every difference between input and output row counts.

    Attributes:
        input_count: Rows ingested
        output_count: Clean records produced
        rejections_by_reason: Rejected rows per reason code
        rejections_by_stage: Rejected rows per pipeline stage
        imputed_quantities: Kept records whose quantity was imputed
        imputed_prices: Kept records whose unit price was imputed
        sign_corrections: Negative quantities/prices flipped to positive
        unmapped_countries: Country values with no alias entry, with counts
    """

    input_count: int = Field(..., ge=0)
    output_count: int = Field(..., ge=0)
    rejections_by_reason: dict[str, int] = Field(default_factory=dict)
    rejections_by_stage: dict[str, int] = Field(default_factory=dict)
    imputed_quantities: int = 0
    imputed_prices: int = 0
    sign_corrections: int = 0
    unmapped_countries: dict[str, int] = Field(default_factory=dict)

    @property
    def rejected_count(self) -> int:
        return sum(self.rejections_by_reason.values())

    @property
    def is_balanced(self) -> bool:
        """True when input = output + all rejections."""
        return self.input_count == self.output_count + self.rejected_count

    def summary_lines(self) -> list[str]:
        """Render the report as plain text lines for operators."""
        lines = [
            f"Input records: {self.input_count}",
            f"Clean records: {self.output_count}",
            f"Rejected records: {self.rejected_count}",
        ]
        for reason, count in sorted(self.rejections_by_reason.items()):
            lines.append(f"  {reason}: {count}")
        lines.append(f"Imputed quantities: {self.imputed_quantities}")
        lines.append(f"Imputed prices: {self.imputed_prices}")
        lines.append(f"Sign corrections: {self.sign_corrections}")
        if self.unmapped_countries:
            unmapped = ", ".join(
                f"{value} ({count})" for value, count in sorted(self.unmapped_countries.items())
            )
            lines.append(f"Unmapped country values: {unmapped}")
        lines.append(f"Balanced: {'yes' if self.is_balanced else 'NO'}")
        return lines


class PipelineResult(BaseModel):
    """Everything a single pipeline run produces."""

    clean_records: list[CleanRecord] = Field(default_factory=list)
    rejections: list[Rejection] = Field(default_factory=list)
    audit_log: list[AuditLog] = Field(default_factory=list)
    report: ReconciliationReport
