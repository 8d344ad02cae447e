"""The merchant branch, the entity being consolidated."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import ClassVar

from branchmerge.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Branch:
    """A physical branch of a merchant, as discovered by an ingestion source.

    ``id`` is opaque and stable: consolidation never renumbers, recreates or
    edits a surviving branch. Branches sharing ``merchant_id`` are plausible
    merge candidates, but nothing here enforces that.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.BRANCH

    id: str
    name: str
    date_added_utc: datetime
    source_url: str | None = None
    address: str | None = None
    merchant_id: str | None = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("branch id must be non-empty")
        if not self.name or not self.name.strip():
            raise ValueError("branch name must be non-empty")
        if self.date_added_utc.tzinfo is None:
            self.date_added_utc = self.date_added_utc.replace(tzinfo=UTC)
        else:
            self.date_added_utc = self.date_added_utc.astimezone(UTC)

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    def as_dict(self) -> dict[str, str | None]:
        """Render the response shape handed back to callers."""

        return {
            "id": self.id,
            "date_added_utc": self.date_added_utc.isoformat(),
            "name": self.name,
            "source_url": self.source_url,
            "address": self.address,
            "merchant_id": self.merchant_id,
        }
