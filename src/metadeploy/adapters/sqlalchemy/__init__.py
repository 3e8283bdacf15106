"""SQLAlchemy adapter package for metadeploy."""

from __future__ import annotations

from .handlers import (
    EncounterRoleHandler,
    EncounterTypeHandler,
    FormHandler,
    FormResourceHandler,
    LocationHandler,
    PrivilegeHandler,
    RoleHandler,
    SqlAlchemyObjectHandler,
    VisitTypeHandler,
    default_handlers,
)
from .mappings import (
    TABLE_BY_CLASS,
    TABLE_BY_OBJECT_TYPE,
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyImportedPackageRepository,
    SqlAlchemySettingsRepository,
)
from .unit_of_work import (
    SqlAlchemyDeployUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_CLASS",
    "TABLE_BY_OBJECT_TYPE",
    "EncounterRoleHandler",
    "EncounterTypeHandler",
    "FormHandler",
    "FormResourceHandler",
    "LocationHandler",
    "PrivilegeHandler",
    "RoleHandler",
    "SqlAlchemyDeployUnitOfWork",
    "SqlAlchemyImportedPackageRepository",
    "SqlAlchemyObjectHandler",
    "SqlAlchemySettingsRepository",
    "StartupError",
    "VisitTypeHandler",
    "configured_engine",
    "create_all_tables",
    "default_handlers",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
