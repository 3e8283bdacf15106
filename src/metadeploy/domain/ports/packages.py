"""Ports for locating and importing serialized packages."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import BinaryIO

    from metadeploy.domain.model import ImportMode


@runtime_checkable
class ResourceLoader(Protocol):
    """Locate a named resource, returning ``None`` when it does not exist."""

    def locate(self, filename: str) -> BinaryIO | None: ...


@runtime_checkable
class PackageImporter(Protocol):
    """Deserialises a package stream and imports its objects."""

    def configure(self, mode: ImportMode) -> None: ...

    def load(self, stream: BinaryIO) -> None: ...

    def import_package(self, group_uuid: str, version: int) -> None: ...


type PackageImporterFactory = Callable[[], PackageImporter]
