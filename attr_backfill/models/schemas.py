from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Schema-less table item. "Attribute absent" and "attribute present but falsy"
# are distinguished by key membership.
Record = Dict[str, Any]


class ScanPage(BaseModel):
    items: List[Record] = Field(default_factory=list)
    next_token: Optional[Any] = None  # opaque LastEvaluatedKey, passed back verbatim
    has_more: bool = False


class UpdateOutcome(BaseModel):
    success: bool
    key: Record = Field(default_factory=dict)
    updated_record: Optional[Record] = None
    error_message: Optional[str] = None


class RunStats(BaseModel):
    """Counters for one backfill run. Only ever incremented."""

    scanned: int = Field(default=0, ge=0)
    missing_attribute: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)

    def record_page(self, scanned: int, missing: int) -> None:
        self.scanned += scanned
        self.missing_attribute += missing

    def record_outcomes(self, outcomes: List[UpdateOutcome]) -> None:
        for outcome in outcomes:
            if outcome.success:
                self.updated += 1
            else:
                self.failed += 1

    def summary(self) -> str:
        return (
            f"Scanned: {self.scanned}, Missing: {self.missing_attribute}, "
            f"Updated: {self.updated}, Failed: {self.failed}"
        )
