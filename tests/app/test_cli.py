from __future__ import annotations

import json
import logging

import pytest

from branchmerge.domain.consolidation import (
    CanonicalNotFound,
    ConsolidationFailed,
    SelfMergeNotAllowed,
)
from branchmerge.ui import cli as cli_module
from tests.helpers.branches import make_branch, sample_branches


@pytest.fixture(autouse=True)
def capture_cli_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="branchmerge.ui.cli")


def test_merge_command_passes_arguments(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    captured: dict[str, object] = {}

    def fake_merge(canonical_id: str, duplicate_ids: list[str], **kwargs: object) -> object:
        captured["canonical_id"] = canonical_id
        captured["duplicate_ids"] = duplicate_ids
        captured.update(kwargs)
        return sample_branches()[0]

    monkeypatch.setattr(cli_module, "merge_branches", fake_merge)

    cli_module.main(
        [
            "merge",
            "--canonical",
            "branch-1",
            "--duplicate",
            "branch-2",
            "--duplicate",
            "branch-3",
            "--by",
            "ops",
            "--timeout",
            "2.5",
        ]
    )

    assert captured == {
        "canonical_id": "branch-1",
        "duplicate_ids": ["branch-2", "branch-3"],
        "requested_by": "ops",
        "timeout_seconds": 2.5,
    }
    assert '"name": "Main Branch"' in caplog.text


def test_merge_command_rejects_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_merge(*_: object, **__: object) -> object:
        raise AssertionError("merge should not run")

    monkeypatch.setattr(cli_module, "merge_branches", fake_merge)

    with pytest.raises(SystemExit) as info:
        cli_module.main(["merge", "--canonical", "a", "--duplicate", "b", "--timeout", "0"])

    assert info.value.code == 2


@pytest.mark.parametrize("error", [SelfMergeNotAllowed("a"), CanonicalNotFound("a")])
def test_client_errors_exit_with_code_2(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    error: Exception,
) -> None:
    def fake_merge(*_: object, **__: object) -> object:
        raise error

    monkeypatch.setattr(cli_module, "merge_branches", fake_merge)

    with pytest.raises(SystemExit) as info:
        cli_module.main(["merge", "--canonical", "a", "--duplicate", "a"])

    assert info.value.code == 2
    assert str(error) in caplog.text


def test_retryable_failure_exits_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_merge(*_: object, **__: object) -> object:
        raise ConsolidationFailed("store unavailable")

    monkeypatch.setattr(cli_module, "merge_branches", fake_merge)

    with pytest.raises(SystemExit) as info:
        cli_module.main(["merge", "--canonical", "a", "--duplicate", "b"])

    assert info.value.code == 1


def test_unexpected_error_exits_with_code_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_list() -> object:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_module, "list_branches", fake_list)

    with pytest.raises(SystemExit) as info:
        cli_module.main(["list"])

    assert info.value.code == 1


def test_list_command_renders_branches(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setattr(cli_module, "list_branches", sample_branches)

    cli_module.main(["list"])

    assert "3 branches" in caplog.text
    assert '"id": "branch-2"' in caplog.text


def test_show_command_handles_missing_branch(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    branches = {"b-1": make_branch("b-1", name="Main")}
    monkeypatch.setattr(cli_module, "get_branch", branches.get)

    cli_module.main(["show", "b-1"])
    cli_module.main(["show", "ghost"])

    assert '"name": "Main"' in caplog.text
    assert "Branch ghost not found" in caplog.text


def test_seed_demo_command_reports_count(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setattr(cli_module, "seed_demo_branches", lambda: 4)

    cli_module.main(["seed-demo"])

    assert "Inserted 4 demo branches" in caplog.text


def test_merge_requires_a_duplicate() -> None:
    with pytest.raises(SystemExit) as info:
        cli_module.main(["merge", "--canonical", "a"])

    assert info.value.code == 2


def test_render_sorts_keys() -> None:
    rendered = cli_module._render({"b": 1, "a": None})  # noqa: SLF001

    assert json.loads(rendered) == {"a": None, "b": 1}
    assert rendered.index('"a"') < rendered.index('"b"')
