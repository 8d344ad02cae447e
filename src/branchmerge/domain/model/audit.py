"""Audit records for branch consolidation decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from .enums import MergeReason


@dataclass(eq=False, kw_only=True)
class BranchMerge:
    """Audit record for one duplicate branch absorbed into its canonical branch.

    Both ids are kept as plain values: the duplicate no longer exists once the
    merge commits, and the trail must survive later deletions.
    """

    id: UUID = field(default_factory=uuid4)
    canonical_id: str
    duplicate_id: str
    reason: MergeReason = MergeReason.MANUAL
    merged_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    merged_by: str | None = None
    reassigned_references: int = 0
