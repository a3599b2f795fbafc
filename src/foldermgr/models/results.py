"""Result models for bulk operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional


OperationStatus = Literal["success", "failed", "skipped"]
BulkStatus = Literal["success", "failed"]


@dataclass(slots=True)
class OperationResult:
    """Result for a single item within a bulk operation."""

    item_id: str
    seq: int
    action: str
    status: OperationStatus

    error_type: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None

    result_item_id: Optional[str] = None


@dataclass(slots=True)
class BulkResult:
    """Aggregate result for bulk_move/bulk_copy/bulk_delete/bulk_share."""

    action: str
    status: BulkStatus
    stopped_item_id: Optional[str]
    results: list[OperationResult]

    summary: dict[str, int] = field(default_factory=dict)

    @property
    def succeeded_ids(self) -> list[str]:
        return [r.item_id for r in self.results if r.status == "success"]

    @property
    def created_ids(self) -> list[str]:
        """Ids of new items (copies), in batch order."""
        return [r.result_item_id for r in self.results if r.result_item_id]
