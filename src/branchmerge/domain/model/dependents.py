"""Records that reference a branch and must follow it through a merge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Protocol
from uuid import UUID, uuid4

from branchmerge.domain.model.enums import EntityType, OrderStatus

if TYPE_CHECKING:
    from datetime import datetime


def new_id() -> UUID:
    return uuid4()


class BranchReference(Protocol):
    """Structural contract shared by every dependent record."""

    ENTITY_TYPE: ClassVar[EntityType]

    branch_id: str


@dataclass(eq=False, kw_only=True)
class BranchTransaction:
    """A payment recorded against a branch."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRANSACTION

    id: UUID = field(default_factory=new_id)
    branch_id: str
    amount_cents: int
    currency: str = "CAD"
    occurred_at_utc: datetime
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class BranchOrder:
    """An order placed with a branch."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ORDER

    id: UUID = field(default_factory=new_id)
    branch_id: str
    reference: str
    status: OrderStatus = OrderStatus.PENDING
    placed_at_utc: datetime
