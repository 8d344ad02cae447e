from __future__ import annotations

import logging

import pytest

from branchmerge.config import (
    ConfigurationError,
    ConsolidationConfig,
    MissingConfigurationError,
    configure_logging,
    get_consolidation_config,
    optional_env_bool,
    optional_env_float,
    require_env_vars,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BRANCHMERGE_LOCK_ROWS", "BRANCHMERGE_MERGE_TIMEOUT_SECONDS", "BM_FLAG", "BM_NUM"):
        monkeypatch.delenv(name, raising=False)


def test_require_env_vars_reports_missing_sorted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BM_PRESENT", "value")
    monkeypatch.setenv("BM_BLANK", "   ")
    monkeypatch.delenv("BM_ABSENT", raising=False)

    with pytest.raises(MissingConfigurationError, match="BM_ABSENT, BM_BLANK"):
        require_env_vars(["BM_PRESENT", "BM_BLANK", "BM_ABSENT"])

    assert require_env_vars(["BM_PRESENT"]) == {"BM_PRESENT": "value"}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), (" yes ", True), ("off", False), ("0", False), ("", True)],
)
def test_optional_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("BM_FLAG", raw)

    assert optional_env_bool("BM_FLAG", default=True) is expected


def test_optional_env_bool_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BM_FLAG", "maybe")

    with pytest.raises(ConfigurationError, match="BM_FLAG"):
        optional_env_bool("BM_FLAG", default=False)


def test_optional_env_float(monkeypatch: pytest.MonkeyPatch) -> None:
    assert optional_env_float("BM_NUM") is None
    monkeypatch.setenv("BM_NUM", "2.5")
    assert optional_env_float("BM_NUM") == 2.5
    monkeypatch.setenv("BM_NUM", "soon")
    with pytest.raises(ConfigurationError):
        optional_env_float("BM_NUM")


def test_consolidation_config_defaults() -> None:
    assert get_consolidation_config() == ConsolidationConfig(lock_rows=True, timeout_seconds=None)


def test_consolidation_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BRANCHMERGE_LOCK_ROWS", "no")
    monkeypatch.setenv("BRANCHMERGE_MERGE_TIMEOUT_SECONDS", "12")

    assert get_consolidation_config() == ConsolidationConfig(lock_rows=False, timeout_seconds=12.0)


@pytest.mark.parametrize("raw", ["0", "-3"])
def test_consolidation_config_rejects_non_positive_timeout(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
) -> None:
    monkeypatch.setenv("BRANCHMERGE_MERGE_TIMEOUT_SECONDS", raw)

    with pytest.raises(ConfigurationError, match="positive"):
        get_consolidation_config()


def test_configure_logging_forwards_to_basic_config(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(logging, "basicConfig", fake_basic_config)

    configure_logging(level=logging.DEBUG, force=True)

    assert captured["level"] == logging.DEBUG
    assert captured["force"] is True
    assert "%(name)s" in str(captured["format"])
