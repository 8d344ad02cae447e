"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from branchmerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyConsolidationUnitOfWork,
    is_started,
    startup,
)
from branchmerge.config import get_consolidation_config
from branchmerge.domain import queries
from branchmerge.domain.consolidation import CancellationToken, MergeRequest
from branchmerge.domain.consolidation import merge_branches as consolidate
from branchmerge.domain.demo import seed_demo_data
from branchmerge.domain.ports.unit_of_work import ConsolidationUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable

    from branchmerge.domain.model import Branch

UnitOfWorkFactory = Callable[[], ConsolidationUnitOfWork]


log = getLogger(__name__)


def _resolve_unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyConsolidationUnitOfWork


def merge_branches(
    canonical_id: str,
    duplicate_ids: Iterable[str],
    *,
    requested_by: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    timeout_seconds: float | None = None,
) -> Branch:
    """Merge the duplicate branches into the canonical branch using the configured store."""

    config = get_consolidation_config()
    request = MergeRequest.of(canonical_id, duplicate_ids, requested_by=requested_by)
    # store startup and migrations must not eat into the merge deadline
    factory = _resolve_unit_of_work(unit_of_work_factory)
    effective_timeout = timeout_seconds if timeout_seconds is not None else config.timeout_seconds
    cancellation = (
        CancellationToken.with_timeout(effective_timeout) if effective_timeout is not None else None
    )
    log.info(
        "Starting branch merge: canonical=%s, duplicates=%s, timeout=%s, lock_rows=%s",
        request.canonical_id,
        list(request.duplicate_ids),
        effective_timeout,
        config.lock_rows,
    )
    return consolidate(
        request,
        unit_of_work_factory=factory,
        cancellation=cancellation,
        lock_rows=config.lock_rows,
    )


def list_branches(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[Branch]:
    return queries.list_branches(unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory))


def get_branch(
    branch_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Branch | None:
    return queries.get_branch(
        branch_id,
        unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory),
    )


def seed_demo_branches(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> int:
    """Insert the demo branches (and their dependent records) that are missing."""

    return seed_demo_data(unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory))
