"""Ports for persisting branches and the records that reference them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from branchmerge.domain.model import Branch, BranchMerge, BranchReference, EntityType


class PersistenceError(RuntimeError):
    """Raised by store adapters when a read, write or commit fails.

    Adapters translate their driver-specific errors into this type so the domain
    never depends on a particular database library.
    """


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class BranchRepository(Repository["Branch"], Protocol):
    """Persistence contract for branches."""

    def get(self, branch_id: str) -> Branch | None: ...

    def exists(self, branch_id: str) -> bool: ...

    def find_by_ids(self, branch_ids: Sequence[str], *, lock: bool = False) -> list[Branch]:
        """Return the branches that exist among ``branch_ids``; callers diff the rest."""
        ...

    def list_all(self) -> list[Branch]: ...

    def delete_by_ids(self, branch_ids: Sequence[str]) -> int: ...


@runtime_checkable
class DependentRecordRepository(Protocol):
    """Persistence contract for one record type holding a branch reference."""

    @property
    def entity_type(self) -> EntityType: ...

    def add(self, record: BranchReference) -> None: ...

    def reassign_references(self, from_ids: Sequence[str], to_id: str) -> int: ...

    def count_references(self, branch_ids: Sequence[str]) -> int: ...


@runtime_checkable
class BranchMergeRepository(Repository["BranchMerge"], Protocol):
    """Persistence contract for the merge audit trail."""

    def for_canonical(self, canonical_id: str) -> list[BranchMerge]: ...
