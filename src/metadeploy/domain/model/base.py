"""
Base building blocks:
stable identity, object type discriminator, retirement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar
from uuid import uuid4

if TYPE_CHECKING:
    from metadeploy.domain.model.enums import ObjectType

UUID_LENGTH = 36


def new_uuid() -> str:
    return str(uuid4())


def is_valid_uuid(value: str | None) -> bool:
    """Return whether ``value`` is usable as a stable identifier.

    Identifiers must be 36 characters long and contain no whitespace. The canonical
    dashed hex form is not enforced since some shared dictionaries use other tokens.
    """

    if value is None or len(value) != UUID_LENGTH:
        return False
    return not any(char.isspace() for char in value)


@dataclass(eq=False, kw_only=True)
class DeployableObject:
    """Persisted object carrying a stable, globally unique identifier.

    ``id`` is the storage key assigned on insert; ``uuid`` is the identity shared
    across installations and must never change once the object is stored.
    """

    uuid: str | None = field(default_factory=new_uuid)
    id: int | None = None

    # class-level discriminator; subclasses must override
    OBJECT_TYPE: ClassVar[ObjectType]

    @property
    def object_type(self) -> ObjectType:
        return self.OBJECT_TYPE


@dataclass(eq=False, kw_only=True)
class RetireableObject(DeployableObject):
    """Object which is soft-retired rather than deleted."""

    retired: bool = False
    retired_by: str | None = None
    date_retired: datetime | None = None
    retire_reason: str | None = None

    def retire(self, reason: str, *, retired_by: str | None = None) -> None:
        if not reason or not reason.strip():
            raise ValueError("retire reason is required")
        self.retired = True
        self.retire_reason = reason
        self.retired_by = retired_by
        self.date_retired = datetime.now(UTC)

    def unretire(self) -> None:
        self.retired = False
        self.retire_reason = None
        self.retired_by = None
        self.date_retired = None

    def copy_retirement_from(self, source: RetireableObject) -> None:
        self.retired = source.retired
        self.retire_reason = source.retire_reason
        self.retired_by = source.retired_by
        self.date_retired = source.date_retired
