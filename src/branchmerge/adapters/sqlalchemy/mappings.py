"""SQLAlchemy mapping metadata for the branchmerge domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Final, NamedTuple

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from branchmerge.domain.model import (
    Branch,
    BranchMerge,
    BranchOrder,
    BranchTransaction,
    EntityType,
    MergeReason,
    OrderStatus,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
BRANCH_ID_LENGTH: Final[int] = 255


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Branches ---------------------------------------------------------------------

branch_table = Table(
    "merchant_branch",
    mapper_registry.metadata,
    Column("id", String(BRANCH_ID_LENGTH), primary_key=True),
    Column("date_added_utc", UTCDateTime(), nullable=False),
    Column("name", String(BRANCH_ID_LENGTH), nullable=False),
    Column("source_url", String(BRANCH_ID_LENGTH), nullable=True),
    Column("address", String(BRANCH_ID_LENGTH), nullable=True),
    Column("merchant_id", String(BRANCH_ID_LENGTH), nullable=True),
    Index(None, "merchant_id"),
)

# Dependent records ------------------------------------------------------------
# Every branch reference is ON DELETE RESTRICT: a branch may only disappear once
# its dependents have been moved elsewhere.

transaction_table = Table(
    "branch_transaction",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "branch_id",
        String(BRANCH_ID_LENGTH),
        ForeignKey("merchant_branch.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("amount_cents", Integer, nullable=False),
    Column("currency", String(3), nullable=False),
    Column("occurred_at_utc", UTCDateTime(), nullable=False),
    Column("description", String, nullable=True),
    Index(None, "branch_id"),
)

order_table = Table(
    "branch_order",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "branch_id",
        String(BRANCH_ID_LENGTH),
        ForeignKey("merchant_branch.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("reference", String, nullable=False),
    Column("status", Enum(OrderStatus, native_enum=False), nullable=False),
    Column("placed_at_utc", UTCDateTime(), nullable=False),
    Index(None, "branch_id"),
)

# Audit ------------------------------------------------------------------------

branch_merge_table = Table(
    "branch_merge",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("canonical_id", String(BRANCH_ID_LENGTH), nullable=False),
    Column("duplicate_id", String(BRANCH_ID_LENGTH), nullable=False),
    Column("reason", Enum(MergeReason, native_enum=False), nullable=False),
    Column("merged_at", UTCDateTime(), nullable=False),
    Column("merged_by", String, nullable=True),
    Column("reassigned_references", Integer, nullable=False, default=0),
    Index(None, "canonical_id"),
)

ENTITY_TYPE_BY_TABLE: Final[dict[str, EntityType]] = {
    transaction_table.name: EntityType.TRANSACTION,
    order_table.name: EntityType.ORDER,
}


class BranchReferenceColumn(NamedTuple):
    """A column holding a foreign key onto ``merchant_branch.id``."""

    entity_type: EntityType
    column: Column[str]


@cache
def branch_reference_columns() -> tuple[BranchReferenceColumn, ...]:
    """Find every dependent-record column that points at a branch.

    Discovered from the metadata's foreign keys so a newly added dependent table
    cannot be skipped by a merge; an unregistered one fails loudly instead.
    """

    references: list[BranchReferenceColumn] = []
    for table in mapper_registry.metadata.sorted_tables:
        for column in table.columns:
            if not any(fk.references(branch_table) for fk in column.foreign_keys):
                continue
            entity_type = ENTITY_TYPE_BY_TABLE.get(table.name)
            if entity_type is None:
                raise RuntimeError(
                    f"Table {table.name!r} references merchant_branch but has no entity type"
                )
            references.append(BranchReferenceColumn(entity_type, column))
    return tuple(references)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Branch, branch_table)
    mapper_registry.map_imperatively(BranchTransaction, transaction_table)
    mapper_registry.map_imperatively(BranchOrder, order_table)
    mapper_registry.map_imperatively(BranchMerge, branch_merge_table)

    configure_mappers()
    return mapper_registry
