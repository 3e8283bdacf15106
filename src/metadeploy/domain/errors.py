"""Error taxonomy for the deploy engine.

Every failure surfaces to the immediate caller as one typed error. Wrapping errors
chain the original exception and also keep it on ``cause`` for diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metadeploy.domain.model import ObjectType


class DeployError(RuntimeError):
    """Base class for deploy engine failures."""


class NoHandlerError(DeployError):
    """Raised when no handler is registered for an object type."""

    def __init__(self, object_type: ObjectType | str) -> None:
        super().__init__(f"No handler registered for {object_type}")
        self.object_type = object_type


class DuplicateHandlerError(DeployError):
    """Raised when two handlers are registered for the same object type."""

    def __init__(self, object_type: ObjectType | str) -> None:
        super().__init__(f"Handler already registered for {object_type}")
        self.object_type = object_type


class MissingIdentifierError(DeployError):
    """Raised when an incoming object carries no identifier to reconcile against."""

    def __init__(self, object_type: ObjectType | str) -> None:
        super().__init__(f"Can't install {object_type} with no identifier")
        self.object_type = object_type


class MissingMetadataError(DeployError):
    """Raised when an object which is expected to exist cannot be found."""

    def __init__(self, object_type: ObjectType | str, identifier: str) -> None:
        super().__init__(f"Missing {object_type} with identifier '{identifier}'")
        self.object_type = object_type
        self.identifier = identifier


class ObjectSourceError(DeployError):
    """Raised when installing from an object source fails part way."""

    def __init__(self, origin: str, cause: BaseException) -> None:
        super().__init__(f"Unable to install objects from {origin}: {cause}")
        self.origin = origin
        self.cause = cause


class BundleError(DeployError):
    """Base class for bundle resolution and installation failures."""


class UnresolvedDependencyError(BundleError):
    """Raised when a required bundle type is absent from the supplied bundles."""

    def __init__(self, required: str, required_by: str) -> None:
        super().__init__(f"Can't find required bundle {required} for {required_by}")
        self.required = required
        self.required_by = required_by


class CyclicDependencyError(BundleError):
    """Raised when bundle requirements form a cycle."""

    def __init__(self, cycle: tuple[str, ...]) -> None:
        super().__init__(f"Cyclic bundle requirements: {' -> '.join(cycle)}")
        self.cycle = cycle


class BundleInstallError(BundleError):
    """Raised when a bundle's install body fails."""

    def __init__(self, bundle: str, cause: BaseException) -> None:
        super().__init__(f"Unable to install bundle {bundle}: {cause!r}")
        self.bundle = bundle
        self.cause = cause


class PackageError(DeployError):
    """Base class for package installation failures."""


class InvalidFilenameError(PackageError):
    """Raised when a package filename does not follow ``<name>-<version>.zip``."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            f"Invalid package filename {filename!r}: must match PackageNameWithNoSpaces-X.zip"
        )
        self.filename = filename


class ResourceNotFoundError(PackageError):
    """Raised when the resource loader cannot locate a package file."""

    def __init__(self, filename: str, group_uuid: str) -> None:
        super().__init__(f"Cannot load {filename} for group {group_uuid}")
        self.filename = filename
        self.group_uuid = group_uuid


class ImportFailureError(PackageError):
    """Raised when the package importer fails to import a located package."""

    def __init__(self, filename: str, cause: BaseException) -> None:
        super().__init__(f"Failed to install metadata package {filename}: {cause}")
        self.filename = filename
        self.cause = cause
