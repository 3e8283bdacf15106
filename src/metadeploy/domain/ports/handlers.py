"""Per-type deploy handler contract."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from metadeploy.domain.model import DeployableObject, ObjectType


@runtime_checkable
class ObjectDeployHandler[T: DeployableObject](Protocol):
    """Strategy implementing reconciliation capabilities for one object type.

    Handlers hold no state between calls. ``overwrite`` must never copy identity
    fields from ``source`` to ``target``.
    """

    @property
    def object_type(self) -> ObjectType: ...

    def get_identifier(self, obj: T) -> str | None: ...

    def fetch(self, identifier: str) -> T | None: ...

    def find_alternate_match(self, incoming: T) -> T | None: ...

    def overwrite(self, source: T, target: T) -> None: ...

    def save(self, obj: T) -> T: ...

    def uninstall(self, obj: T, reason: str) -> None: ...
