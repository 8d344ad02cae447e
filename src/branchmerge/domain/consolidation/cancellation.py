"""Caller-supplied cancellation and deadlines for a merge."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from .errors import ConsolidationCancelled

if TYPE_CHECKING:
    from collections.abc import Callable


class CancellationToken:
    """Cooperative cancellation signal, optionally bounded by a monotonic deadline."""

    def __init__(
        self,
        *,
        deadline: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._deadline = deadline
        self._clock = clock
        self._cancelled = False

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> CancellationToken:
        if seconds <= 0:
            raise ValueError("Timeout must be positive")
        return cls(deadline=clock() + seconds, clock=clock)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self._deadline is not None and self._clock() >= self._deadline

    def raise_if_cancelled(self, stage: str) -> None:
        if self.cancelled:
            raise ConsolidationCancelled(stage)
