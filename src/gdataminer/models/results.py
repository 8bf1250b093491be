"""Result models for a reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional


CollectionStatus = Literal["success", "truncated", "failed"]
FailureStage = Literal["item", "child", "children", "creator", "contributor", "equipment"]


@dataclass(slots=True, frozen=True)
class ItemFailure:
    """Structured log entry for a failure isolated to one item or relation."""

    collection: str
    provider_id: str
    stage: FailureStage
    error_type: str
    message: str


@dataclass(slots=True)
class CollectionResult:
    """Outcome of crawling a single collection."""

    collection: str
    namespace: str
    status: CollectionStatus = "success"

    pages: int = 0
    items_seen: int = 0
    items_resynced: int = 0
    items_skipped: int = 0
    items_failed: int = 0

    error_type: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(slots=True)
class PassResult:
    """Aggregate result of ReconciliationDriver.run_pass."""

    datasource: str
    deletion_candidates: set[str] = field(default_factory=set)
    collections: dict[str, CollectionResult] = field(default_factory=dict)
    failures: list[ItemFailure] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        summary: dict[str, int] = {
            "resynced": 0,
            "skipped": 0,
            "failed": 0,
            "deletion_candidates": len(self.deletion_candidates),
        }
        for result in self.collections.values():
            summary["resynced"] += result.items_resynced
            summary["skipped"] += result.items_skipped
            summary["failed"] += result.items_failed
        return summary
