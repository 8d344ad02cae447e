"""Errors reported by the consolidation engine.

Every error carries enough structure (kind plus the offending ids) for a caller
to render a precise message. ``client_error`` marks requests that can never
succeed as sent; ``retryable`` marks failures that left no partial state behind
and may be retried from scratch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Sequence


class ConsolidationError(Exception):
    """Base class for every error raised by a branch merge."""

    client_error: ClassVar[bool] = True
    retryable: ClassVar[bool] = False


class InvalidRequest(ConsolidationError, ValueError):
    """Raised when the merge request is structurally malformed."""


class SelfMergeNotAllowed(ConsolidationError):
    """Raised when the canonical branch also appears among the duplicates."""

    def __init__(self, canonical_id: str) -> None:
        super().__init__("Cannot merge canonical branch with itself")
        self.canonical_id = canonical_id


class CanonicalNotFound(ConsolidationError):
    """Raised when the canonical id does not resolve to a stored branch."""

    def __init__(self, canonical_id: str) -> None:
        super().__init__(f"Canonical branch with ID {canonical_id} not found")
        self.canonical_id = canonical_id


class DuplicatesNotFound(ConsolidationError):
    """Raised when one or more duplicate ids do not resolve to stored branches."""

    def __init__(self, missing_ids: Sequence[str]) -> None:
        self.missing_ids: tuple[str, ...] = tuple(missing_ids)
        super().__init__(f"Branches not found: {', '.join(self.missing_ids)}")


class ConsolidationFailed(ConsolidationError):
    """Raised when the merge could not be committed; the store was rolled back."""

    client_error: ClassVar[bool] = False
    retryable: ClassVar[bool] = True


class ConsolidationCancelled(ConsolidationFailed):
    """Raised when the caller cancelled the merge or its deadline passed."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Branch merge cancelled before {stage}; no changes were applied")
        self.stage = stage
