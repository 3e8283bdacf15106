"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from metadeploy.adapters.packages import (
    DirectoryResourceLoader,
    ZipPackageImporter,
    json_file_source,
)
from metadeploy.adapters.sqlalchemy import (
    SqlAlchemyDeployUnitOfWork,
    default_handlers,
    is_started,
    startup,
)
from metadeploy.config import get_deploy_config
from metadeploy.domain.deploy import (
    ContentManager,
    DeployService,
    HandlerRegistry,
    ObjectReconciler,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from metadeploy.config import DeployConfig
    from metadeploy.domain.deploy import (
        BundleInstallReport,
        Chore,
        MetadataBundle,
        RefreshResult,
    )
    from metadeploy.domain.model import ImportedPackage, ImportMode
    from metadeploy.domain.ports.packages import ResourceLoader

UnitOfWorkFactory = Callable[[], SqlAlchemyDeployUnitOfWork]


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeployResult:
    bundles: BundleInstallReport
    chores: tuple[str, ...]


def _ensure_started() -> None:
    if not is_started():
        startup()


def build_deploy_service(
    uow: SqlAlchemyDeployUnitOfWork,
    *,
    config: DeployConfig | None = None,
    loader: ResourceLoader | None = None,
) -> DeployService:
    """Wire handlers, reconciler and package importer over an open unit of work."""

    effective_config = config or get_deploy_config()
    reconciler = ObjectReconciler(HandlerRegistry(default_handlers(uow.session)))

    def importer_factory() -> ZipPackageImporter:
        return ZipPackageImporter(reconciler, uow.repositories.imported_packages)

    default_loader = loader
    if default_loader is None and effective_config.package_dir is not None:
        default_loader = DirectoryResourceLoader(effective_config.package_dir)

    return DeployService.create(
        uow=uow,
        reconciler=reconciler,
        importer_factory=importer_factory,
        import_mode=effective_config.import_mode,
        chore_marker_suffix=effective_config.chore_marker_suffix,
        default_loader=default_loader,
    )


def deploy(
    bundles: Iterable[MetadataBundle],
    chores: Iterable[Chore] = (),
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: DeployConfig | None = None,
    loader: ResourceLoader | None = None,
) -> DeployResult:
    """Install ``bundles`` and run pending ``chores`` in a single transaction."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        service = build_deploy_service(uow, config=config, loader=loader)
        report = service.install_bundles(bundles)
        performed = service.perform_pending_chores(chores)
        uow.commit()

    log.info(
        "Finished deploy: bundles=%s, chores=%s, elapsed=%.0fms",
        len(report.installed),
        len(performed),
        report.elapsed_ms,
    )
    return DeployResult(bundles=report, chores=tuple(performed))


def install_package(
    filename: str,
    group_uuid: str,
    *,
    loader: ResourceLoader | None = None,
    mode: ImportMode | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: DeployConfig | None = None,
) -> bool:
    """Install one package archive if it is newer than the recorded version."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        service = build_deploy_service(uow, config=config, loader=loader)
        if mode is not None:
            service.packages.mode = mode
        if service.default_loader is None:
            raise ValueError("No package directory configured (set METADEPLOY_PACKAGE_DIR)")
        installed = service.install_package(filename, service.default_loader, group_uuid)
        uow.commit()

    log.info("Package %s %s", filename, "installed" if installed else "already up to date")
    return installed


def install_objects_file(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Reconcile every object listed in a standalone JSON file."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        service = build_deploy_service(uow)
        installed = service.install_from_source(json_file_source(path, service.reconciler))
        uow.commit()

    log.info("Installed %s objects from %s", len(installed), path)
    return len(installed)


def refresh_content(
    managers: Iterable[ContentManager],
    *,
    manager_type: type[ContentManager] = ContentManager,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RefreshResult:
    """Refresh content managers in priority order and commit the result."""

    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        service = build_deploy_service(uow)
        result = service.refresh_content_managers(managers, manager_type)
        uow.commit()
    return result


def list_imported_packages(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[ImportedPackage]:
    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        return list(uow.repositories.imported_packages.list_all())


def get_setting(
    name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> str | None:
    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        return uow.repositories.settings.get_value(name)


def set_setting(
    name: str,
    value: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    _ensure_started()
    effective_uow = unit_of_work_factory or SqlAlchemyDeployUnitOfWork
    with effective_uow() as uow:
        uow.repositories.settings.set_value(name, value)
        uow.commit()


def init_database(*, database_uri: str | None = None) -> None:
    """Create or upgrade the schema for the configured database."""

    startup(database_uri=database_uri, force=is_started())
    log.info("Database schema is up to date")
