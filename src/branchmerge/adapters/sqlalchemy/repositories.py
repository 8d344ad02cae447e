"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from branchmerge.adapters.sqlalchemy.mappings import branch_merge_table, branch_table
from branchmerge.domain.model import Branch, BranchMerge
from branchmerge.domain.ports.persistence import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from branchmerge.adapters.sqlalchemy.mappings import BranchReferenceColumn
    from branchmerge.domain.model import BranchReference, EntityType


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise driver and ORM failures as the domain ``PersistenceError``."""

    try:
        yield
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc


def _rowcount(result: object) -> int:
    return cast("CursorResult[Any]", result).rowcount


class SqlAlchemyBranchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Branch) -> None:
        self.session.add(entity)

    def get(self, branch_id: str) -> Branch | None:
        with translate_errors(f"load branch {branch_id}"):
            return self.session.get(Branch, branch_id)

    def exists(self, branch_id: str) -> bool:
        stmt = select(branch_table.c.id).where(branch_table.c.id == branch_id).limit(1)
        with translate_errors(f"check branch {branch_id}"):
            return self.session.execute(stmt).scalar_one_or_none() is not None

    def find_by_ids(self, branch_ids: Sequence[str], *, lock: bool = False) -> list[Branch]:
        if not branch_ids:
            return []
        stmt = select(Branch).where(branch_table.c.id.in_(list(branch_ids)))
        if lock:
            stmt = stmt.with_for_update()
        with translate_errors("load branches"):
            return list(self.session.scalars(stmt))

    def list_all(self) -> list[Branch]:
        with translate_errors("list branches"):
            return list(self.session.scalars(select(Branch)))

    def delete_by_ids(self, branch_ids: Sequence[str]) -> int:
        if not branch_ids:
            return 0
        stmt = delete(branch_table).where(branch_table.c.id.in_(list(branch_ids)))
        with translate_errors("delete branches"):
            return _rowcount(self.session.execute(stmt))


class SqlAlchemyDependentRecordRepository:
    """Moves the branch reference of one dependent-record table in bulk."""

    def __init__(self, session: Session, reference: BranchReferenceColumn) -> None:
        self.session = session
        self._reference = reference

    @property
    def entity_type(self) -> EntityType:
        return self._reference.entity_type

    def add(self, record: BranchReference) -> None:
        self.session.add(record)

    def reassign_references(self, from_ids: Sequence[str], to_id: str) -> int:
        if not from_ids:
            return 0
        column = self._reference.column
        stmt = update(column.table).where(column.in_(list(from_ids))).values({column: to_id})
        with translate_errors(f"reassign {self.entity_type} records"):
            return _rowcount(self.session.execute(stmt))

    def count_references(self, branch_ids: Sequence[str]) -> int:
        if not branch_ids:
            return 0
        column = self._reference.column
        stmt = select(func.count()).select_from(column.table).where(column.in_(list(branch_ids)))
        with translate_errors(f"count {self.entity_type} records"):
            return self.session.execute(stmt).scalar_one()


class SqlAlchemyBranchMergeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: BranchMerge) -> None:
        self.session.add(entity)

    def for_canonical(self, canonical_id: str) -> list[BranchMerge]:
        stmt = (
            select(BranchMerge)
            .where(branch_merge_table.c.canonical_id == canonical_id)
            .order_by(branch_merge_table.c.merged_at, branch_merge_table.c.duplicate_id)
        )
        with translate_errors(f"load merges into {canonical_id}"):
            return list(self.session.scalars(stmt))


if TYPE_CHECKING:
    from branchmerge.domain.ports.persistence import (
        BranchMergeRepository,
        BranchRepository,
        DependentRecordRepository,
    )

    _session_stub = cast("Session", object())
    _branch_repo: BranchRepository = SqlAlchemyBranchRepository(_session_stub)
    _merge_repo: BranchMergeRepository = SqlAlchemyBranchMergeRepository(_session_stub)
    _dependent_repo: DependentRecordRepository = SqlAlchemyDependentRecordRepository(
        _session_stub, cast("BranchReferenceColumn", object())
    )
