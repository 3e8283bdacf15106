"""Deploy service facade used by lifecycle triggers and bundles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TextIO

from metadeploy.domain.deploy.bundles import BundleResolver
from metadeploy.domain.deploy.chores import ChoreRunner
from metadeploy.domain.deploy.content import ContentManager, ContentRefresher
from metadeploy.domain.deploy.packages import PackageInstaller
from metadeploy.domain.model import ImportMode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metadeploy.domain.deploy.bundles import BundleInstallReport, MetadataBundle
    from metadeploy.domain.deploy.chores import Chore
    from metadeploy.domain.deploy.content import RefreshResult
    from metadeploy.domain.deploy.packages import PackageDescriptor
    from metadeploy.domain.deploy.reconciler import ObjectReconciler
    from metadeploy.domain.model import DeployableObject, ObjectType
    from metadeploy.domain.ports.packages import PackageImporterFactory, ResourceLoader
    from metadeploy.domain.ports.unit_of_work import DeployUnitOfWork


@dataclass(slots=True)
class DeployService:
    """Single entry point over reconciliation, bundles, packages, content and chores."""

    reconciler: ObjectReconciler
    bundles: BundleResolver
    content: ContentRefresher
    packages: PackageInstaller
    chores: ChoreRunner
    default_loader: ResourceLoader | None = None

    @classmethod
    def create(
        cls,
        *,
        uow: DeployUnitOfWork,
        reconciler: ObjectReconciler,
        importer_factory: PackageImporterFactory,
        import_mode: ImportMode = ImportMode.MIRROR,
        chore_marker_suffix: str = ".done",
        chore_output: TextIO | None = None,
        default_loader: ResourceLoader | None = None,
    ) -> DeployService:
        repositories = uow.repositories
        return cls(
            reconciler=reconciler,
            bundles=BundleResolver(session=uow),
            content=ContentRefresher(session=uow),
            packages=PackageInstaller(
                imported_packages=repositories.imported_packages,
                importer_factory=importer_factory,
                mode=import_mode,
            ),
            chores=ChoreRunner(
                session=uow,
                settings=repositories.settings,
                marker_suffix=chore_marker_suffix,
                output=chore_output,
            ),
            default_loader=default_loader,
        )

    # Bundles --------------------------------------------------------------

    def install_bundles(self, bundles: Iterable[MetadataBundle]) -> BundleInstallReport:
        ordered = list(bundles)
        for bundle in ordered:
            bundle.bind(self)
        return self.bundles.install_bundles(ordered)

    # Packages -------------------------------------------------------------

    def install_package(self, filename: str, loader: ResourceLoader, group_uuid: str) -> bool:
        return self.packages.install_package(filename, loader, group_uuid)

    def install_package_descriptor(self, descriptor: PackageDescriptor) -> bool:
        loader = descriptor.loader or self.default_loader
        if loader is None:
            raise ValueError(f"No resource loader available for {descriptor.filename}")
        return self.install_package(descriptor.filename, loader, descriptor.group_uuid)

    # Objects --------------------------------------------------------------

    def install_object[T: DeployableObject](self, incoming: T) -> T:
        return self.reconciler.install_object(incoming)

    def install_from_source[T: DeployableObject](self, source: Iterable[T]) -> list[T]:
        return self.reconciler.install_from_source(source)

    def uninstall_object(self, outgoing: DeployableObject | None, reason: str) -> None:
        self.reconciler.uninstall_object(outgoing, reason)

    def fetch_object(
        self,
        object_type: type[DeployableObject] | ObjectType,
        identifier: str,
    ) -> Any:
        return self.reconciler.fetch_object(object_type, identifier)

    def save_object[T: DeployableObject](self, obj: T) -> T:
        return self.reconciler.save_object(obj)

    def overwrite_object[T: DeployableObject](self, source: T, target: T) -> None:
        self.reconciler.overwrite_object(source, target)

    def possible[T: DeployableObject](self, object_type: type[T], identifier: str) -> T | None:
        return self.reconciler.possible(object_type, identifier)

    def existing[T: DeployableObject](self, object_type: type[T], identifier: str) -> T:
        return self.reconciler.existing(object_type, identifier)

    # Content managers -----------------------------------------------------

    def refresh_manager(self, manager: ContentManager) -> None:
        self.content.refresh_manager(manager)

    def refresh_content_managers(
        self,
        candidates: Iterable[ContentManager],
        manager_type: type[ContentManager] = ContentManager,
    ) -> RefreshResult:
        return self.content.refresh_content_managers(candidates, manager_type)

    # Chores ---------------------------------------------------------------

    def perform_chore(self, chore: Chore) -> None:
        self.chores.perform_chore(chore)

    def is_chore_done(self, chore: Chore) -> bool:
        return self.chores.is_done(chore)

    def perform_pending_chores(self, chores: Iterable[Chore]) -> list[str]:
        return self.chores.perform_pending(chores)
