"""Read-only lookups over stored branches."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from branchmerge.domain.model import Branch
    from branchmerge.domain.ports.unit_of_work import ConsolidationUnitOfWork


def list_branches(*, unit_of_work_factory: Callable[[], ConsolidationUnitOfWork]) -> list[Branch]:
    """Return every stored branch, in no particular order."""

    with unit_of_work_factory() as uow:
        return uow.repositories.branches.list_all()


def get_branch(
    branch_id: str,
    *,
    unit_of_work_factory: Callable[[], ConsolidationUnitOfWork],
) -> Branch | None:
    """Return the branch with ``branch_id``, or ``None`` when it does not exist."""

    with unit_of_work_factory() as uow:
        return uow.repositories.branches.get(branch_id)
