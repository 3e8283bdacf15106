"""Version-gated installation of serialized metadata packages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING, Final

from metadeploy.domain.errors import (
    ImportFailureError,
    InvalidFilenameError,
    ResourceNotFoundError,
)
from metadeploy.domain.model import ImportMode

if TYPE_CHECKING:
    from metadeploy.domain.ports.packages import PackageImporterFactory, ResourceLoader
    from metadeploy.domain.ports.persistence import ImportedPackageRepository

log = logging.getLogger(__name__)

PACKAGE_FILENAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[\w/-]+-(\d+)\.zip")


def parse_package_version(filename: str) -> int:
    """Return the version embedded in ``<name>-<version>.zip``."""

    match = PACKAGE_FILENAME_PATTERN.fullmatch(filename)
    if match is None:
        raise InvalidFilenameError(filename)
    return int(match.group(1))


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """Where to find a package and which group it belongs to.

    ``loader`` falls back to the deploy service's default loader when omitted.
    """

    filename: str
    group_uuid: str
    loader: ResourceLoader | None = None


@dataclass(slots=True)
class PackageInstaller:
    """Import a package only when its version is newer than the recorded one."""

    imported_packages: ImportedPackageRepository
    importer_factory: PackageImporterFactory
    mode: ImportMode = ImportMode.MIRROR

    def install_package(self, filename: str, loader: ResourceLoader, group_uuid: str) -> bool:
        """Import ``filename`` for ``group_uuid`` if needed.

        Returns ``False`` without side effects when the group already holds the
        same or a newer version, so repeated calls never re-apply or downgrade.
        """

        version = parse_package_version(filename)

        installed = self.imported_packages.get_by_group(group_uuid)
        if installed is not None and installed.version >= version:
            log.info(
                "Metadata package %s is already installed with version %s",
                filename,
                installed.version,
            )
            return False

        stream = loader.locate(filename)
        if stream is None:
            raise ResourceNotFoundError(filename, group_uuid)

        start = perf_counter()
        try:
            with stream:
                importer = self.importer_factory()
                importer.configure(self.mode)
                importer.load(stream)
                importer.import_package(group_uuid, version)
        except Exception as exc:
            raise ImportFailureError(filename, exc) from exc

        log.debug(
            "Loaded metadata package '%s' in %.0fms", filename, (perf_counter() - start) * 1000
        )
        return True
