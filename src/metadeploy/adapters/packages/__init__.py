"""Package archive adapter: loaders, payload schema and the zip importer."""

from __future__ import annotations

from .importer import (
    HEADER_FILENAME,
    OBJECTS_FILENAME,
    PackageMismatchError,
    PackageNotLoadedError,
    ZipPackageImporter,
)
from .loaders import DirectoryResourceLoader, PackageResourceLoader
from .schema import ObjectPayload, PackageContents, PackageHeader
from .translator import PayloadSource, json_file_source, to_domain

__all__ = [
    "HEADER_FILENAME",
    "OBJECTS_FILENAME",
    "DirectoryResourceLoader",
    "ObjectPayload",
    "PackageContents",
    "PackageHeader",
    "PackageMismatchError",
    "PackageNotLoadedError",
    "PackageResourceLoader",
    "PayloadSource",
    "ZipPackageImporter",
    "json_file_source",
    "to_domain",
]
