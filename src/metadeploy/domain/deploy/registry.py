"""Lookup table from object type to deploy handler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, overload

from metadeploy.domain.errors import DuplicateHandlerError, NoHandlerError
from metadeploy.domain.model import DeployableObject, ObjectType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metadeploy.domain.ports.handlers import ObjectDeployHandler


class HandlerRegistry:
    """Maps each object type to exactly one handler.

    The registry is filled once from a fixed collection of handlers. It performs no
    business logic; an unresolvable type is a configuration defect and raises
    ``NoHandlerError``.
    """

    def __init__(self, handlers: Iterable[ObjectDeployHandler[Any]] = ()) -> None:
        self._handlers: dict[ObjectType, ObjectDeployHandler[Any]] = {}
        for handler in handlers:
            self.register(handler.object_type, handler)

    def register(self, object_type: ObjectType, handler: ObjectDeployHandler[Any]) -> None:
        if object_type in self._handlers:
            raise DuplicateHandlerError(object_type)
        self._handlers[object_type] = handler

    @overload
    def resolve[T: DeployableObject](self, target: T) -> ObjectDeployHandler[T]: ...

    @overload
    def resolve[T: DeployableObject](self, target: type[T]) -> ObjectDeployHandler[T]: ...

    @overload
    def resolve(self, target: ObjectType | str) -> ObjectDeployHandler[Any]: ...

    def resolve(
        self,
        target: DeployableObject | type[DeployableObject] | ObjectType | str,
    ) -> ObjectDeployHandler[Any]:
        """Return the handler for an instance, a class or a type tag."""

        if isinstance(target, DeployableObject):
            return self.resolve_type(target.object_type)
        if isinstance(target, type):
            object_type = getattr(target, "OBJECT_TYPE", None)
            if object_type is None:
                raise NoHandlerError(target.__name__)
            return self.resolve_type(object_type)
        return self.resolve_type(target)

    def resolve_type(self, object_type: ObjectType | str) -> ObjectDeployHandler[Any]:
        try:
            key = ObjectType(object_type)
        except ValueError:
            raise NoHandlerError(object_type) from None
        handler = self._handlers.get(key)
        if handler is None:
            raise NoHandlerError(key)
        return handler

    def __contains__(self, object_type: object) -> bool:
        return object_type in self._handlers

    @property
    def supported_types(self) -> tuple[ObjectType, ...]:
        return tuple(self._handlers)
