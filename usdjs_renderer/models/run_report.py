"""Batch run result data structures."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ItemResult(BaseModel):
    """Outcome of one corpus sample."""
    sample_rel: str
    status: str  # ok, skipped, failed
    reason: Optional[str] = None
    output_path: Optional[str] = None
    # Set when the item was skipped because a file is absent on disk
    missing_path: Optional[str] = None


class RunReport(BaseModel):
    total: int = 0
    items: list[ItemResult] = Field(default_factory=list)

    @property
    def ok(self) -> int:
        return sum(1 for r in self.items if r.status == "ok")

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.items if r.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for r in self.items if r.status == "failed")

    @property
    def failures(self) -> list[ItemResult]:
        """Render failures plus skips caused by missing files, in run order."""
        return [
            r for r in self.items
            if r.status == "failed" or (r.status == "skipped" and r.missing_path)
        ]
