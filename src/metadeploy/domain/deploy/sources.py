"""In-memory object sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from metadeploy.domain.model import DeployableObject


@dataclass(slots=True)
class IterableSource[T: DeployableObject]:
    """Wrap any iterable (list, generator) as a named object source."""

    objects: Iterable[T]
    origin: str = "iterable"

    def __iter__(self) -> Iterator[T]:
        return iter(self.objects)
