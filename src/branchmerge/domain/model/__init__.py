"""Public domain model surface."""

from __future__ import annotations

from branchmerge.domain.model.audit import BranchMerge
from branchmerge.domain.model.branch import Branch
from branchmerge.domain.model.dependents import BranchOrder, BranchReference, BranchTransaction
from branchmerge.domain.model.enums import EntityType, MergeReason, OrderStatus

__all__ = [  # noqa: RUF022
    # branch
    "Branch",
    # dependents
    "BranchReference",
    "BranchTransaction",
    "BranchOrder",
    # audit
    "BranchMerge",
    # enums
    "EntityType",
    "MergeReason",
    "OrderStatus",
]
