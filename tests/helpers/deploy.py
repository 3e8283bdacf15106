"""Reusable fakes for deploy engine tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from metadeploy.domain.model import ImportedPackage, ObjectType, Privilege
from metadeploy.domain.model.enums import ImportMode

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import BinaryIO


@dataclass
class FakeSession:
    """Records synchronisation calls in order."""

    calls: list[str] = field(default_factory=list[str])

    def flush(self) -> None:
        self.calls.append("flush")

    def clear(self) -> None:
        self.calls.append("clear")


@dataclass
class FakeSettings:
    values: dict[str, str] = field(default_factory=dict[str, str])

    def get_value(self, name: str) -> str | None:
        return self.values.get(name)

    def set_value(self, name: str, value: str) -> None:
        self.values[name] = value


@dataclass
class FakeImportedPackages:
    packages: dict[str, ImportedPackage] = field(default_factory=dict[str, ImportedPackage])

    def get_by_group(self, group_uuid: str) -> ImportedPackage | None:
        return self.packages.get(group_uuid)

    def record(self, group_uuid: str, version: int, *, name: str | None = None) -> None:
        self.packages[group_uuid] = ImportedPackage(
            group_uuid=group_uuid,
            version=version,
            name=name,
            date_imported=datetime.now(UTC),
        )

    def list_all(self) -> Sequence[ImportedPackage]:
        return list(self.packages.values())


@dataclass
class FakeStream:
    name: str
    closed: bool = False

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeStream:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


@dataclass
class FakeLoader:
    """Loader serving fake streams for a fixed set of filenames."""

    available: set[str] = field(default_factory=set[str])
    opened: list[FakeStream] = field(default_factory=list[FakeStream])

    def locate(self, filename: str) -> BinaryIO | None:
        if filename not in self.available:
            return None
        stream = FakeStream(filename)
        self.opened.append(stream)
        return stream  # type: ignore[return-value]


@dataclass
class FakeImporter:
    """Importer recording its lifecycle; optionally fails on import."""

    events: list[str]
    fail_with: Exception | None = None

    def configure(self, mode: ImportMode) -> None:
        self.events.append(f"configure:{mode.value}")

    def load(self, stream: BinaryIO) -> None:
        self.events.append(f"load:{getattr(stream, 'name', '?')}")

    def import_package(self, group_uuid: str, version: int) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.events.append(f"import:{group_uuid}:{version}")


def importer_factory(
    events: list[str], fail_with: Exception | None = None
) -> Callable[[], FakeImporter]:
    def factory() -> FakeImporter:
        return FakeImporter(events, fail_with)

    return factory


class InMemoryPrivilegeHandler:
    """Name-keyed handler storing privileges in a dict."""

    object_type = ObjectType.PRIVILEGE

    def __init__(self) -> None:
        self.stored: dict[str, Privilege] = {}
        self.uninstalled: list[tuple[str, str]] = []

    def get_identifier(self, obj: Privilege) -> str | None:
        return obj.name

    def fetch(self, identifier: str) -> Privilege | None:
        return self.stored.get(identifier)

    def find_alternate_match(self, incoming: Privilege) -> Privilege | None:
        for stored in self.stored.values():
            if stored.uuid == incoming.uuid:
                return stored
        return None

    def overwrite(self, source: Privilege, target: Privilege) -> None:
        target.name = source.name
        target.description = source.description

    def save(self, obj: Privilege) -> Privilege:
        self.stored[obj.name] = obj
        return obj

    def uninstall(self, obj: Privilege, reason: str) -> None:
        self.stored.pop(obj.name, None)
        self.uninstalled.append((obj.name, reason))
