"""Defaults for branch consolidation runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_bool, optional_env_float
from .errors import ConfigurationError

DEFAULT_LOCK_ROWS = True


@dataclass(frozen=True, slots=True)
class ConsolidationConfig:
    lock_rows: bool = DEFAULT_LOCK_ROWS
    timeout_seconds: float | None = None


def get_consolidation_config() -> ConsolidationConfig:
    timeout = optional_env_float("BRANCHMERGE_MERGE_TIMEOUT_SECONDS")
    if timeout is not None and timeout <= 0:
        raise ConfigurationError("BRANCHMERGE_MERGE_TIMEOUT_SECONDS must be positive")
    return ConsolidationConfig(
        lock_rows=optional_env_bool("BRANCHMERGE_LOCK_ROWS", default=DEFAULT_LOCK_ROWS),
        timeout_seconds=timeout,
    )
