"""Generic upsert/retire of deployable objects over the handler registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from metadeploy.domain.errors import (
    MissingIdentifierError,
    MissingMetadataError,
    ObjectSourceError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metadeploy.domain.deploy.registry import HandlerRegistry
    from metadeploy.domain.model import DeployableObject, ObjectType

log = logging.getLogger(__name__)


class ObjectReconciler:
    """Apply incoming objects onto stored state while keeping stored identities."""

    def __init__(self, registry: HandlerRegistry) -> None:
        self.registry = registry

    def install_object[T: DeployableObject](self, incoming: T) -> T:
        """Create ``incoming`` or overwrite the stored object it corresponds to.

        The stored object is looked up by exact identifier first, then by the
        handler's alternate match. When one is found it absorbs the incoming field
        values and keeps its own identity; otherwise ``incoming`` is saved as new.
        Returns whichever instance was persisted.
        """

        handler = self.registry.resolve(incoming)

        identifier = handler.get_identifier(incoming)
        if not identifier:
            raise MissingIdentifierError(incoming.object_type)

        existing = handler.fetch(identifier)
        if existing is None:
            existing = handler.find_alternate_match(incoming)

        if existing is not None and existing is not incoming:
            handler.overwrite(incoming, existing)
            return handler.save(existing)
        return handler.save(incoming)

    def install_from_source[T: DeployableObject](self, source: Iterable[T]) -> list[T]:
        """Install every object of a single-pass source in encounter order.

        Any failure aborts the call and is reported once, naming the source origin.
        Objects installed before the failure stay installed.
        """

        origin = str(getattr(source, "origin", type(source).__name__))
        installed: list[T] = []
        try:
            for incoming in source:
                installed.append(self.install_object(incoming))
        except Exception as exc:
            raise ObjectSourceError(origin, exc) from exc
        log.debug("Installed %s objects from %s", len(installed), origin)
        return installed

    def uninstall_object(self, outgoing: DeployableObject | None, reason: str) -> None:
        """Retire or remove ``outgoing``; ``None`` is accepted and ignored."""

        if outgoing is None:
            return
        handler = self.registry.resolve(outgoing)
        handler.uninstall(outgoing, reason)

    def fetch_object(
        self,
        object_type: type[DeployableObject] | ObjectType,
        identifier: str,
    ) -> Any:
        return self.registry.resolve(object_type).fetch(identifier)

    def save_object[T: DeployableObject](self, obj: T) -> T:
        return self.registry.resolve(obj).save(obj)

    def overwrite_object[T: DeployableObject](self, source: T, target: T) -> None:
        handler = self.registry.resolve(source)
        handler.overwrite(source, target)
        handler.save(target)

    def possible[T: DeployableObject](self, object_type: type[T], identifier: str) -> T | None:
        """Fetch an object which may not exist."""

        return self.registry.resolve(object_type).fetch(identifier)

    def existing[T: DeployableObject](self, object_type: type[T], identifier: str) -> T:
        """Fetch an object which must exist."""

        obj = self.possible(object_type, identifier)
        if obj is None:
            raise MissingMetadataError(
                getattr(object_type, "OBJECT_TYPE", object_type.__name__), identifier
            )
        return obj
