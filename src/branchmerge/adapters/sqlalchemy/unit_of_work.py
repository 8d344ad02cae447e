"""SQLAlchemy-backed units of work for branch consolidation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from branchmerge.adapters.sqlalchemy.mappings import branch_reference_columns, start_mappers
from branchmerge.adapters.sqlalchemy.migrations import upgrade_head
from branchmerge.adapters.sqlalchemy.repositories import (
    SqlAlchemyBranchMergeRepository,
    SqlAlchemyBranchRepository,
    SqlAlchemyDependentRecordRepository,
    translate_errors,
)
from branchmerge.config import get_database_config
from branchmerge.domain.ports.unit_of_work import (
    ConsolidationRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call branchmerge.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _on_sqlite_connect(dbapi_connection: Any, _connection_record: object) -> None:  # noqa: ANN401
    # pysqlite must not issue its own deferred BEGIN; _on_sqlite_begin does it
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(connection: Connection) -> None:
    # writers are serialised from the first statement of every transaction
    connection.exec_driver_sql("BEGIN IMMEDIATE")


def configure_sqlite_engine(engine: Engine) -> None:
    """Enforce foreign keys and open every transaction with ``BEGIN IMMEDIATE``.

    No-op for other dialects and for engines that are already configured. Only
    connections opened afterwards are affected.
    """

    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _on_sqlite_connect):
        event.listen(engine, "connect", _on_sqlite_connect)
    if not event.contains(engine, "begin", _on_sqlite_begin):
        event.listen(engine, "begin", _on_sqlite_begin)


def create_store_engine(
    database_uri: str,
    *,
    busy_timeout_seconds: float | None = None,
) -> Engine:
    """Create an engine for the branch store.

    SQLite engines are passed through ``configure_sqlite_engine``; when given,
    ``busy_timeout_seconds`` bounds how long a connection waits for another
    writer before failing with "database is locked".
    """

    connect_args: dict[str, Any] = {}
    if busy_timeout_seconds is not None and database_uri.startswith("sqlite"):
        connect_args["timeout"] = busy_timeout_seconds
    engine = create_engine(database_uri, future=True, connect_args=connect_args)
    configure_sqlite_engine(engine)
    return engine


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, schema, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = get_database_config()
        resolved_engine = create_store_engine(
            database_uri or config.uri,
            busy_timeout_seconds=config.busy_timeout_seconds,
        )
    else:
        resolved_engine = engine
        configure_sqlite_engine(resolved_engine)
    start_mappers()
    branch_reference_columns()
    upgrade_head(engine=resolved_engine)

    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
            self.session = None
        return False

    def commit(self) -> None:
        with translate_errors("commit"):
            self.session.commit()

    def rollback(self) -> None:
        with translate_errors("roll back"):
            self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyConsolidationUnitOfWork(BaseSqlAlchemyUnitOfWork[ConsolidationRepositories]):
    """Unit of work managing SQLAlchemy sessions for branch consolidation."""

    def _build_repositories(self, session: Session) -> ConsolidationRepositories:
        return ConsolidationRepositories(
            branches=SqlAlchemyBranchRepository(session),
            dependents=tuple(
                SqlAlchemyDependentRecordRepository(session, reference)
                for reference in branch_reference_columns()
            ),
            merges=SqlAlchemyBranchMergeRepository(session),
        )


if TYPE_CHECKING:
    from branchmerge.domain.ports.unit_of_work import ConsolidationUnitOfWork

    _uow_check: ConsolidationUnitOfWork = SqlAlchemyConsolidationUnitOfWork()
