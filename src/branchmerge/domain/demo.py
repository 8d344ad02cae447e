"""Demo data for trying out branch consolidation."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from branchmerge.domain.model import Branch, BranchOrder, BranchTransaction, OrderStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from branchmerge.domain.model import BranchReference
    from branchmerge.domain.ports.persistence import DependentRecordRepository
    from branchmerge.domain.ports.unit_of_work import (
        ConsolidationRepositories,
        ConsolidationUnitOfWork,
    )

log = getLogger(__name__)

# id, added, name, source_url, address, merchant_id
_DEMO_BRANCH_ROWS: Final = (
    (
        "demo-branch-1",
        datetime(2023, 1, 1, 10, 0, tzinfo=UTC),
        "Coffee Shop Central",
        "https://example.com/coffee-central",
        "123 Coffee Ave, Downtown",
        "merchant-A",
    ),
    (
        "demo-branch-2",
        datetime(2023, 1, 5, 11, 0, tzinfo=UTC),
        "Coffee Shop North",
        None,
        "456 North St, Suburbia",
        "merchant-A",
    ),
    (
        "demo-branch-3",
        datetime(2023, 1, 10, 9, 30, tzinfo=UTC),
        "Coffee Shop Express",
        "https://example.com/coffee-express",
        "789 Express Ln, Mall",
        "merchant-A",
    ),
    (
        "demo-branch-4",
        datetime(2023, 2, 1, 14, 0, tzinfo=UTC),
        "Teahouse Grand",
        None,
        "101 Tea Blvd, Arts District",
        "merchant-B",
    ),
    (
        "demo-branch-5",
        datetime(2023, 2, 5, 15, 0, tzinfo=UTC),
        "Teahouse Mini",
        "https://example.com/tea-mini",
        "202 Mini St, Old Town",
        "merchant-B",
    ),
    (
        "demo-branch-6",
        datetime(2023, 3, 1, 8, 0, tzinfo=UTC),
        "Snack Joint HQ",
        None,
        "303 Snack Rd, Industrial Park",
        "merchant-C",
    ),
)


def demo_branches() -> list[Branch]:
    return [
        Branch(
            id=branch_id,
            date_added_utc=added,
            name=name,
            source_url=source_url,
            address=address,
            merchant_id=merchant_id,
        )
        for branch_id, added, name, source_url, address, merchant_id in _DEMO_BRANCH_ROWS
    ]


def demo_dependents() -> list[BranchReference]:
    return [
        BranchTransaction(
            branch_id="demo-branch-2",
            amount_cents=450,
            occurred_at_utc=datetime(2023, 1, 6, 8, 15, tzinfo=UTC),
            description="Flat white",
        ),
        BranchTransaction(
            branch_id="demo-branch-2",
            amount_cents=1275,
            occurred_at_utc=datetime(2023, 1, 7, 12, 40, tzinfo=UTC),
            description="Lunch combo",
        ),
        BranchOrder(
            branch_id="demo-branch-3",
            reference="ORD-1001",
            status=OrderStatus.FULFILLED,
            placed_at_utc=datetime(2023, 1, 11, 9, 0, tzinfo=UTC),
        ),
        BranchTransaction(
            branch_id="demo-branch-5",
            amount_cents=380,
            occurred_at_utc=datetime(2023, 2, 6, 16, 5, tzinfo=UTC),
            description="Matcha latte",
        ),
    ]


def seed_demo_data(*, unit_of_work_factory: Callable[[], ConsolidationUnitOfWork]) -> int:
    """Insert the demo branches that are not stored yet, with their dependent records.

    Returns the number of branches inserted; already-present ids are left alone.
    """

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        inserted: set[str] = set()
        for branch in demo_branches():
            if repositories.branches.exists(branch.id):
                continue
            repositories.branches.add(branch)
            inserted.add(branch.id)

        for record in demo_dependents():
            if record.branch_id in inserted:
                _dependent_repository(repositories, record).add(record)

        uow.commit()

    log.info("Seeded %d demo branches", len(inserted))
    return len(inserted)


def _dependent_repository(
    repositories: ConsolidationRepositories,
    record: BranchReference,
) -> DependentRecordRepository:
    for dependents in repositories.dependents:
        if dependents.entity_type == record.ENTITY_TYPE:
            return dependents
    raise LookupError(f"No repository for {record.ENTITY_TYPE} records")
