"""Ports for the persistence collaborator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from metadeploy.domain.model import ImportedPackage


@runtime_checkable
class SessionSync(Protocol):
    """Synchronisation points on the buffered persistence session."""

    def flush(self) -> None: ...

    def clear(self) -> None: ...


@runtime_checkable
class SettingsRepository(Protocol):
    """Key-value settings store (completion markers and similar flags)."""

    def get_value(self, name: str) -> str | None: ...

    def set_value(self, name: str, value: str) -> None: ...


@runtime_checkable
class ImportedPackageRepository(Protocol):
    """Records of imported package groups and their versions."""

    def get_by_group(self, group_uuid: str) -> ImportedPackage | None: ...

    def record(self, group_uuid: str, version: int, *, name: str | None = None) -> None: ...

    def list_all(self) -> Sequence[ImportedPackage]: ...
