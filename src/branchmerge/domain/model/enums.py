"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for the record types the store knows about."""

    BRANCH = "branch"

    # Dependent records (carry a branch reference):
    TRANSACTION = "transaction"
    ORDER = "order"


class OrderStatus(StrEnum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


class MergeReason(StrEnum):
    MANUAL = "manual"
