"""Create branch, dependent record and merge audit tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "20261019_0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "merchant_branch",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("date_added_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("source_url", sa.String(length=255), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("merchant_id", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_merchant_branch"),
    )
    op.create_index(
        "ix_merchant_branch_merchant_id", "merchant_branch", ["merchant_id"], unique=False
    )

    op.create_table(
        "branch_transaction",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("branch_id", sa.String(length=255), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("occurred_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["branch_id"],
            ["merchant_branch.id"],
            name="fk_branch_transaction_branch_transaction_branch_id_merchant_branch",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_branch_transaction"),
    )
    op.create_index(
        "ix_branch_transaction_branch_id", "branch_transaction", ["branch_id"], unique=False
    )

    op.create_table(
        "branch_order",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("branch_id", sa.String(length=255), nullable=False),
        sa.Column("reference", sa.String(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "FULFILLED", "CANCELLED", name="orderstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("placed_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["branch_id"],
            ["merchant_branch.id"],
            name="fk_branch_order_branch_order_branch_id_merchant_branch",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_branch_order"),
    )
    op.create_index("ix_branch_order_branch_id", "branch_order", ["branch_id"], unique=False)

    op.create_table(
        "branch_merge",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("canonical_id", sa.String(length=255), nullable=False),
        sa.Column("duplicate_id", sa.String(length=255), nullable=False),
        sa.Column(
            "reason",
            sa.Enum("MANUAL", name="mergereason", native_enum=False),
            nullable=False,
        ),
        sa.Column("merged_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("merged_by", sa.String(), nullable=True),
        sa.Column("reassigned_references", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_branch_merge"),
    )
    op.create_index(
        "ix_branch_merge_canonical_id", "branch_merge", ["canonical_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_branch_merge_canonical_id", table_name="branch_merge")
    op.drop_table("branch_merge")
    op.drop_index("ix_branch_order_branch_id", table_name="branch_order")
    op.drop_table("branch_order")
    op.drop_index("ix_branch_transaction_branch_id", table_name="branch_transaction")
    op.drop_table("branch_transaction")
    op.drop_index("ix_merchant_branch_merchant_id", table_name="merchant_branch")
    op.drop_table("merchant_branch")
