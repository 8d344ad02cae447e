"""SQLAlchemy adapter package for branchmerge."""

from __future__ import annotations

from .mappings import (
    ENTITY_TYPE_BY_TABLE,
    BranchReferenceColumn,
    branch_reference_columns,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyBranchMergeRepository,
    SqlAlchemyBranchRepository,
    SqlAlchemyDependentRecordRepository,
    translate_errors,
)
from .unit_of_work import (
    SqlAlchemyConsolidationUnitOfWork,
    StartupError,
    configure_sqlite_engine,
    create_store_engine,
    shutdown,
    startup,
)

__all__ = [
    "ENTITY_TYPE_BY_TABLE",
    "BranchReferenceColumn",
    "SqlAlchemyBranchMergeRepository",
    "SqlAlchemyBranchRepository",
    "SqlAlchemyConsolidationUnitOfWork",
    "SqlAlchemyDependentRecordRepository",
    "StartupError",
    "branch_reference_columns",
    "configure_sqlite_engine",
    "create_store_engine",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
    "translate_errors",
]
