"""Branch consolidation: validate a merge set, then reassign and delete atomically."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from branchmerge.domain.model import BranchMerge
from branchmerge.domain.ports.persistence import PersistenceError

from .cancellation import CancellationToken
from .errors import (
    CanonicalNotFound,
    ConsolidationError,
    ConsolidationFailed,
    DuplicatesNotFound,
    InvalidRequest,
    SelfMergeNotAllowed,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from branchmerge.domain.model import Branch
    from branchmerge.domain.ports.unit_of_work import (
        ConsolidationRepositories,
        ConsolidationUnitOfWork,
    )

    from .request import MergeRequest


log = getLogger(__name__)


def validate_request(request: MergeRequest) -> tuple[str, ...]:
    """Run the checks that need no store access.

    Returns the duplicate ids with repeats removed, first occurrence kept.
    """

    if not request.duplicate_ids:
        raise InvalidRequest("At least one branch must be selected for merging")
    if not _is_present(request.canonical_id):
        raise InvalidRequest("Canonical branch id must be a non-empty string")
    if not all(_is_present(branch_id) for branch_id in request.duplicate_ids):
        raise InvalidRequest("Branch ids to merge must be non-empty strings")

    duplicate_ids = _unique(request.duplicate_ids)
    if request.canonical_id in duplicate_ids:
        raise SelfMergeNotAllowed(request.canonical_id)
    return duplicate_ids


def merge_branches(
    request: MergeRequest,
    *,
    unit_of_work_factory: Callable[[], ConsolidationUnitOfWork],
    cancellation: CancellationToken | None = None,
    lock_rows: bool = True,
) -> Branch:
    """Absorb the duplicate branches into the canonical branch and return it.

    Every dependent record pointing at a duplicate is moved to the canonical
    branch, then the duplicates are deleted. Either all of it commits or none
    of it does; the canonical branch itself is never modified.
    """

    token = cancellation or CancellationToken()

    try:
        token.raise_if_cancelled("validation")
        duplicate_ids = validate_request(request)
        log.info(
            "Merging branches %s into %s",
            ", ".join(duplicate_ids),
            request.canonical_id,
        )
        with unit_of_work_factory() as uow:
            repositories = uow.repositories
            canonical = _load_merge_set(
                repositories,
                request.canonical_id,
                duplicate_ids,
                lock=lock_rows,
            )
            reassigned = _reassign_dependents(repositories, duplicate_ids, canonical.id, token)

            token.raise_if_cancelled("deleting duplicates")
            deleted = repositories.branches.delete_by_ids(duplicate_ids)
            if deleted != len(duplicate_ids):
                # another writer removed some of the rows after validation
                raise ConsolidationFailed(
                    f"Expected to delete {len(duplicate_ids)} branches but deleted {deleted}; "
                    "retry the merge"
                )
            if not repositories.branches.exists(canonical.id):
                raise ConsolidationFailed(
                    f"Canonical branch {canonical.id} was removed by a concurrent merge; "
                    "retry the merge"
                )

            for duplicate_id in duplicate_ids:
                repositories.merges.add(
                    BranchMerge(
                        canonical_id=canonical.id,
                        duplicate_id=duplicate_id,
                        merged_by=request.requested_by,
                        reassigned_references=reassigned,
                    )
                )

            token.raise_if_cancelled("commit")
            uow.commit()
    except PersistenceError as exc:
        log.exception("Branch merge into %s rolled back", request.canonical_id)
        raise ConsolidationFailed(f"Branch merge into {request.canonical_id} failed: {exc}") from exc
    except ConsolidationError as exc:
        if exc.client_error:
            log.warning("Branch merge into %s rejected: %s", request.canonical_id, exc)
        else:
            log.warning("Branch merge into %s rolled back: %s", request.canonical_id, exc)
        raise

    log.info(
        "Merged %d branches into %s (reassigned %d dependent records)",
        deleted,
        canonical.id,
        reassigned,
    )
    return canonical


def _load_merge_set(
    repositories: ConsolidationRepositories,
    canonical_id: str,
    duplicate_ids: Sequence[str],
    *,
    lock: bool,
) -> Branch:
    found = {
        branch.id: branch
        for branch in repositories.branches.find_by_ids([canonical_id, *duplicate_ids], lock=lock)
    }
    canonical = found.get(canonical_id)
    if canonical is None:
        raise CanonicalNotFound(canonical_id)
    missing = [branch_id for branch_id in duplicate_ids if branch_id not in found]
    if missing:
        raise DuplicatesNotFound(missing)
    return canonical


def _reassign_dependents(
    repositories: ConsolidationRepositories,
    duplicate_ids: Sequence[str],
    canonical_id: str,
    token: CancellationToken,
) -> int:
    total = 0
    for dependents in repositories.dependents:
        token.raise_if_cancelled(f"reassigning {dependents.entity_type} records")
        moved = dependents.reassign_references(duplicate_ids, canonical_id)
        log.debug("Reassigned %d %s records to %s", moved, dependents.entity_type, canonical_id)
        total += moved
    return total


def _is_present(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))
