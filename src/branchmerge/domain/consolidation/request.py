"""Input value for a branch merge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import InvalidRequest

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class MergeRequest:
    """Absorb ``duplicate_ids`` into the branch ``canonical_id``.

    Which branch survives is the caller's decision; the engine applies no
    heuristic of its own.
    """

    canonical_id: str
    duplicate_ids: tuple[str, ...]
    requested_by: str | None = None

    @classmethod
    def of(
        cls,
        canonical_id: str,
        duplicate_ids: Iterable[str],
        *,
        requested_by: str | None = None,
    ) -> MergeRequest:
        if isinstance(duplicate_ids, str):
            raise InvalidRequest("Branch ids to merge must be given as a list, not a single string")
        return cls(
            canonical_id=canonical_id,
            duplicate_ids=tuple(duplicate_ids),
            requested_by=requested_by,
        )
