"""Branch consolidation engine."""

from __future__ import annotations

from .cancellation import CancellationToken
from .engine import merge_branches, validate_request
from .errors import (
    CanonicalNotFound,
    ConsolidationCancelled,
    ConsolidationError,
    ConsolidationFailed,
    DuplicatesNotFound,
    InvalidRequest,
    SelfMergeNotAllowed,
)
from .request import MergeRequest

__all__ = [
    "CancellationToken",
    "CanonicalNotFound",
    "ConsolidationCancelled",
    "ConsolidationError",
    "ConsolidationFailed",
    "DuplicatesNotFound",
    "InvalidRequest",
    "MergeRequest",
    "SelfMergeNotAllowed",
    "merge_branches",
    "validate_request",
]
