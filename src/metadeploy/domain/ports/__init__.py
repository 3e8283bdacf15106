"""Domain port definitions for adapters."""

from __future__ import annotations

from .handlers import ObjectDeployHandler
from .packages import PackageImporter, PackageImporterFactory, ResourceLoader
from .persistence import ImportedPackageRepository, SessionSync, SettingsRepository
from .sources import ObjectSource
from .unit_of_work import (
    DeployRepositories,
    DeployUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DeployRepositories",
    "DeployUnitOfWork",
    "ImportedPackageRepository",
    "ObjectDeployHandler",
    "ObjectSource",
    "PackageImporter",
    "PackageImporterFactory",
    "RepositoryCollection",
    "ResourceLoader",
    "SessionSync",
    "SettingsRepository",
    "UnitOfWork",
]
