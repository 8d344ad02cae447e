"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    BranchMergeRepository,
    BranchRepository,
    DependentRecordRepository,
    PersistenceError,
    Repository,
)
from .unit_of_work import (
    ConsolidationRepositories,
    ConsolidationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BranchMergeRepository",
    "BranchRepository",
    "ConsolidationRepositories",
    "ConsolidationUnitOfWork",
    "DependentRecordRepository",
    "PersistenceError",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
