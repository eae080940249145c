"""
Report models - reconciliation outcome and run metadata.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ReconciliationResult(BaseModel):
    """
    Classification of one sync run.

    ``added``, ``updated`` and ``removed`` are disjoint and describe intent:
    an id stays in ``added`` even when its file could not be written.
    Persistence failures are tracked in the ``*_failures`` lists.
    """
    added: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    total: int = Field(default=0, description="Listings seen in the current feed")

    write_failures: list[str] = Field(default_factory=list)
    delete_failures: list[str] = Field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "added": len(self.added),
            "updated": len(self.updated),
            "removed": len(self.removed),
            "total": self.total,
        }

    @property
    def has_failures(self) -> bool:
        return bool(self.write_failures or self.delete_failures)


class SyncReport(BaseModel):
    """Metadata for a sync run."""
    run_id: str = Field(description="Unique run identifier")
    started_at: datetime
    completed_at: Optional[datetime] = None

    feed_url: str
    content_dir: str
    dry_run: bool = False

    # Feed info
    feed_shape: str = "unknown"
    bytes_fetched: int = 0
    records_decoded: int = 0

    result: ReconciliationResult = Field(default_factory=ReconciliationResult)

    def to_summary(self) -> dict[str, Any]:
        """Export the headline numbers without per-id lists."""
        return {
            "run_id": self.run_id,
            "feed_url": self.feed_url,
            "dry_run": self.dry_run,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            **self.result.counts,
            "failures": len(self.result.write_failures) + len(self.result.delete_failures),
        }
