"""Dependency-ordered installation of metadata bundles."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from time import perf_counter
from typing import TYPE_CHECKING, ClassVar, Protocol

from metadeploy.domain.errors import (
    BundleInstallError,
    CyclicDependencyError,
    UnresolvedDependencyError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metadeploy.domain.deploy.packages import PackageDescriptor
    from metadeploy.domain.model import DeployableObject
    from metadeploy.domain.ports.persistence import SessionSync

log = logging.getLogger(__name__)


class BundleContext(Protocol):
    """Operations a bundle body may call while installing."""

    def install_object[T: DeployableObject](self, incoming: T) -> T: ...

    def install_from_source[T: DeployableObject](self, source: Iterable[T]) -> list[T]: ...

    def uninstall_object(self, outgoing: DeployableObject | None, reason: str) -> None: ...

    def install_package_descriptor(self, descriptor: PackageDescriptor) -> bool: ...

    def possible[T: DeployableObject](self, object_type: type[T], identifier: str) -> T | None: ...

    def existing[T: DeployableObject](self, object_type: type[T], identifier: str) -> T: ...


class MetadataBundle(ABC):
    """Named unit of declarative metadata change.

    Subclasses list the bundle classes they depend on in ``requires`` and apply
    their changes in ``install``. A bundle holds no run state of its own.
    """

    requires: ClassVar[tuple[type[MetadataBundle], ...]] = ()

    def __init__(self, context: BundleContext | None = None) -> None:
        self._context = context

    @abstractmethod
    def install(self) -> None: ...

    @classmethod
    def bundle_name(cls) -> str:
        return cls.__name__

    @property
    def context(self) -> BundleContext:
        if self._context is None:
            raise RuntimeError(f"Bundle {self.bundle_name()} is not bound to a deploy service")
        return self._context

    def bind(self, context: BundleContext) -> None:
        self._context = context

    def install_object[T: DeployableObject](self, incoming: T) -> T:
        return self.context.install_object(incoming)

    def install_all[T: DeployableObject](self, source: Iterable[T]) -> list[T]:
        return self.context.install_from_source(source)

    def install_package(self, descriptor: PackageDescriptor) -> bool:
        return self.context.install_package_descriptor(descriptor)

    def uninstall(self, outgoing: DeployableObject | None, reason: str) -> None:
        # None is allowed so callers can pass the result of possible(...)
        self.context.uninstall_object(outgoing, reason)

    def possible[T: DeployableObject](self, object_type: type[T], identifier: str) -> T | None:
        return self.context.possible(object_type, identifier)

    def existing[T: DeployableObject](self, object_type: type[T], identifier: str) -> T:
        return self.context.existing(object_type, identifier)


@dataclass(slots=True)
class BundleInstallReport:
    """Bundles installed by one run, in install order."""

    installed: tuple[str, ...]
    elapsed_ms: float


@dataclass(slots=True)
class _BundleRun:
    index: dict[type[MetadataBundle], MetadataBundle]
    installed: set[type[MetadataBundle]] = field(default_factory=set["type[MetadataBundle]"])
    visiting: list[type[MetadataBundle]] = field(default_factory=list["type[MetadataBundle]"])
    order: list[str] = field(default_factory=list[str])


@dataclass(slots=True)
class BundleResolver:
    """Install bundles so that requirements always complete before dependents."""

    session: SessionSync

    def install_bundles(self, bundles: Iterable[MetadataBundle]) -> BundleInstallReport:
        """Install ``bundles`` and their transitive requirements, each at most once.

        Bundles are keyed by concrete class; when a class appears twice the later
        instance is the one installed. Requirements missing from ``bundles`` raise
        ``UnresolvedDependencyError``, requirement cycles raise
        ``CyclicDependencyError`` and a failing install body raises
        ``BundleInstallError``. Any of these aborts the remaining run.
        """

        ordered = list(bundles)
        index: dict[type[MetadataBundle], MetadataBundle] = {}
        for bundle in ordered:
            index[type(bundle)] = bundle

        run = _BundleRun(index=index)
        start = perf_counter()
        log.info("Installing %s bundles", len(index))
        for bundle in ordered:
            self._install(index[type(bundle)], run)

        elapsed_ms = (perf_counter() - start) * 1000
        log.info("Installed %s bundles in %.0fms", len(run.order), elapsed_ms)
        return BundleInstallReport(installed=tuple(run.order), elapsed_ms=elapsed_ms)

    def _install(self, bundle: MetadataBundle, run: _BundleRun) -> None:
        bundle_type = type(bundle)
        if bundle_type in run.installed:
            return
        if bundle_type in run.visiting:
            cycle = run.visiting[run.visiting.index(bundle_type) :] + [bundle_type]
            raise CyclicDependencyError(tuple(item.bundle_name() for item in cycle))

        run.visiting.append(bundle_type)
        try:
            for required_type in bundle.requires:
                required = run.index.get(required_type)
                if required is None:
                    raise UnresolvedDependencyError(
                        required_type.bundle_name(), bundle_type.bundle_name()
                    )
                self._install(required, run)

            self._install_body(bundle)
        finally:
            run.visiting.pop()

        run.installed.add(bundle_type)
        run.order.append(bundle_type.bundle_name())

    def _install_body(self, bundle: MetadataBundle) -> None:
        name = bundle.bundle_name()
        log.info("Installing bundle %s", name)
        start = perf_counter()
        try:
            bundle.install()
            # later bundles must observe this bundle's writes
            self.session.flush()
        except Exception as exc:
            raise BundleInstallError(name, exc) from exc
        log.info("Installed bundle %s in %.0fms", name, (perf_counter() - start) * 1000)
