"""Zip archive importer for metadata packages.

An archive holds ``header.json`` (group uuid, version, name) and ``objects.json``
(the objects, in dependency order).
"""

from __future__ import annotations

import logging
import zipfile
from typing import TYPE_CHECKING, Final

from metadeploy.domain.model import ImportMode

from .schema import PackageContents, PackageHeader
from .translator import PayloadSource

if TYPE_CHECKING:
    from typing import BinaryIO

    from metadeploy.domain.deploy.reconciler import ObjectReconciler
    from metadeploy.domain.model import DeployableObject
    from metadeploy.domain.ports.persistence import ImportedPackageRepository

log = logging.getLogger(__name__)

HEADER_FILENAME: Final[str] = "header.json"
OBJECTS_FILENAME: Final[str] = "objects.json"


class PackageNotLoadedError(RuntimeError):
    """Raised when importing before a package stream has been loaded."""


class PackageMismatchError(ValueError):
    """Raised when the archive header names another group or version than requested."""


class ZipPackageImporter:
    """Import a zipped package through the object reconciler.

    ``MIRROR`` reconciles every object onto stored state. ``PREFER_EXISTING`` only
    creates objects that have no stored counterpart and leaves the rest untouched.
    The requested group and version are recorded once every object is in.
    """

    def __init__(
        self,
        reconciler: ObjectReconciler,
        imported_packages: ImportedPackageRepository,
    ) -> None:
        self.reconciler = reconciler
        self.imported_packages = imported_packages
        self.mode = ImportMode.MIRROR
        self._header: PackageHeader | None = None
        self._contents: PackageContents | None = None

    def configure(self, mode: ImportMode) -> None:
        self.mode = mode

    def load(self, stream: BinaryIO) -> None:
        with zipfile.ZipFile(stream) as archive:
            self._header = PackageHeader.model_validate_json(archive.read(HEADER_FILENAME))
            self._contents = PackageContents.model_validate_json(archive.read(OBJECTS_FILENAME))
        log.debug(
            "Loaded package %s v%s with %s objects",
            self._header.group_uuid,
            self._header.version,
            len(self._contents.objects),
        )

    @property
    def header(self) -> PackageHeader:
        if self._header is None:
            raise PackageNotLoadedError("No package loaded")
        return self._header

    @property
    def contents(self) -> PackageContents:
        if self._contents is None:
            raise PackageNotLoadedError("No package loaded")
        return self._contents

    def import_package(self, group_uuid: str, version: int) -> None:
        """Import the loaded archive as ``version`` of ``group_uuid``.

        The header must name the same group and version, otherwise nothing is
        imported or recorded.
        """

        header = self.header
        if header.group_uuid != group_uuid:
            raise PackageMismatchError(
                f"Package header group {header.group_uuid} does not match {group_uuid}"
            )
        if header.version != version:
            raise PackageMismatchError(
                f"Package header version {header.version} does not match {version}"
            )
        source = PayloadSource(
            self.contents.objects, self.reconciler, origin=header.name or group_uuid
        )

        if self.mode is ImportMode.MIRROR:
            self.reconciler.install_from_source(source)
        else:
            created = sum(1 for obj in source if self._create_if_absent(obj))
            log.debug("Created %s new objects from %s", created, source.origin)

        self.imported_packages.record(group_uuid, version, name=header.name)

    def _create_if_absent(self, incoming: DeployableObject) -> bool:
        handler = self.reconciler.registry.resolve(incoming)
        identifier = handler.get_identifier(incoming)
        if identifier and handler.fetch(identifier) is not None:
            return False
        if handler.find_alternate_match(incoming) is not None:
            return False
        self.reconciler.save_object(incoming)
        return True
