from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from branchmerge import app as app_module
from branchmerge.adapters.sqlalchemy.unit_of_work import shutdown
from branchmerge.config import ConfigurationError
from branchmerge.domain.consolidation import CancellationToken, ConsolidationCancelled
from branchmerge.domain.model import EntityType
from tests.helpers.branches import sample_branches
from tests.helpers.fakes import FakeStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    from branchmerge.domain.consolidation import MergeRequest


@pytest.fixture
def store() -> FakeStore:
    store = FakeStore()
    store.add_branches(*sample_branches())
    store.add_reference(EntityType.ORDER, "order-1", "branch-2")
    return store


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BRANCHMERGE_LOCK_ROWS", raising=False)
    monkeypatch.delenv("BRANCHMERGE_MERGE_TIMEOUT_SECONDS", raising=False)


def test_merge_branches_uses_supplied_unit_of_work(store: FakeStore) -> None:
    branch = app_module.merge_branches(
        "branch-1",
        ["branch-2"],
        requested_by="ops",
        unit_of_work_factory=store.unit_of_work,
    )

    assert branch.id == "branch-1"
    assert set(store.state.branches) == {"branch-1", "branch-3"}
    assert store.state.references[EntityType.ORDER] == {"order-1": "branch-1"}
    assert [merge.merged_by for merge in store.state.merges] == ["ops"]
    assert store.lock_requests == [True]


def test_merge_branches_honours_lock_rows_setting(
    store: FakeStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("BRANCHMERGE_LOCK_ROWS", "false")

    app_module.merge_branches("branch-1", ["branch-3"], unit_of_work_factory=store.unit_of_work)

    assert store.lock_requests == [False]


def test_merge_branches_builds_token_from_configured_timeout(
    store: FakeStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: dict[str, object] = {}

    def fake_consolidate(request: MergeRequest, **kwargs: object) -> object:
        captured["request"] = request
        captured.update(kwargs)
        return sample_branches()[0]

    monkeypatch.setattr(app_module, "consolidate", fake_consolidate)
    monkeypatch.setenv("BRANCHMERGE_MERGE_TIMEOUT_SECONDS", "30")

    app_module.merge_branches(
        "branch-1",
        iter(["branch-2", "branch-3"]),
        unit_of_work_factory=store.unit_of_work,
    )

    request = captured["request"]
    assert isinstance(request, app_module.MergeRequest)
    assert request.duplicate_ids == ("branch-2", "branch-3")
    token = captured["cancellation"]
    assert isinstance(token, CancellationToken)
    assert not token.cancelled
    assert captured["lock_rows"] is True


def test_merge_branches_without_timeout_passes_no_token(
    store: FakeStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured: dict[str, object] = {}

    def fake_consolidate(request: MergeRequest, **kwargs: object) -> object:
        _ = request
        captured.update(kwargs)
        return sample_branches()[0]

    monkeypatch.setattr(app_module, "consolidate", fake_consolidate)

    app_module.merge_branches("branch-1", ["branch-2"], unit_of_work_factory=store.unit_of_work)

    assert captured["cancellation"] is None


def test_expired_timeout_cancels_merge(
    store: FakeStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def expired(seconds: float) -> CancellationToken:
        _ = seconds
        token = CancellationToken()
        token.cancel()
        return token

    monkeypatch.setattr(app_module.CancellationToken, "with_timeout", staticmethod(expired))
    before = store.state.snapshot()

    with pytest.raises(ConsolidationCancelled):
        app_module.merge_branches(
            "branch-1",
            ["branch-2"],
            unit_of_work_factory=store.unit_of_work,
            timeout_seconds=5,
        )

    assert store.state.snapshot() == before


def test_timeout_starts_after_unit_of_work_is_resolved(
    store: FakeStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    events: list[str] = []
    real_with_timeout = CancellationToken.with_timeout

    def resolve(factory: object) -> object:
        events.append("resolve")
        return factory

    def with_timeout(seconds: float) -> CancellationToken:
        events.append("token")
        return real_with_timeout(seconds)

    monkeypatch.setattr(app_module, "_resolve_unit_of_work", resolve)
    monkeypatch.setattr(app_module.CancellationToken, "with_timeout", staticmethod(with_timeout))

    app_module.merge_branches(
        "branch-1",
        ["branch-2"],
        unit_of_work_factory=store.unit_of_work,
        timeout_seconds=30,
    )

    assert events == ["resolve", "token"]


def test_invalid_timeout_configuration_is_rejected(
    store: FakeStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("BRANCHMERGE_MERGE_TIMEOUT_SECONDS", "0")

    with pytest.raises(ConfigurationError):
        app_module.merge_branches("branch-1", ["branch-2"], unit_of_work_factory=store.unit_of_work)


def test_queries_use_supplied_unit_of_work(store: FakeStore) -> None:
    assert len(app_module.list_branches(unit_of_work_factory=store.unit_of_work)) == 3
    branch = app_module.get_branch("branch-3", unit_of_work_factory=store.unit_of_work)
    assert branch is not None
    assert branch.name == "Third Branch"


@pytest.fixture
def default_adapter(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    shutdown()
    yield
    shutdown()


@pytest.mark.usefixtures("default_adapter")
def test_default_unit_of_work_starts_configured_store() -> None:
    assert app_module.seed_demo_branches() == 6

    branches = app_module.list_branches()
    assert len(branches) == 6

    merged = app_module.merge_branches("demo-branch-4", ["demo-branch-5"])
    assert merged.name == "Teahouse Grand"
    assert app_module.get_branch("demo-branch-5") is None
