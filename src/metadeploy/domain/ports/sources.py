"""Ports for lazily produced object streams."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from metadeploy.domain.model import DeployableObject


@runtime_checkable
class ObjectSource[T: DeployableObject](Protocol):
    """Finite, single-pass sequence of incoming objects.

    ``origin`` names where the objects come from (file name, generator name) and is
    used in error reports.
    """

    @property
    def origin(self) -> str: ...

    def __iter__(self) -> Iterator[T]: ...
