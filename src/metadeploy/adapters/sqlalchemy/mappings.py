"""SQLAlchemy mapping metadata for the metadeploy domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from metadeploy.domain.model import (
    DeployableObject,
    EncounterRole,
    EncounterType,
    Form,
    FormResource,
    GlobalProperty,
    ImportedPackage,
    Location,
    ObjectType,
    Privilege,
    Role,
    VisitType,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUID_COLUMN_LENGTH: Final[int] = 38


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _identity_columns() -> tuple[Column[int], Column[str]]:
    return (
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("uuid", String(UUID_COLUMN_LENGTH), nullable=False, unique=True),
    )


def _retire_columns() -> tuple[Column[bool], Column[str], Column[datetime], Column[str]]:
    return (
        Column("retired", Boolean, nullable=False, default=False),
        Column("retired_by", String, nullable=True),
        Column("date_retired", UTCDateTime, nullable=True),
        Column("retire_reason", String, nullable=True),
    )


# Security metadata ------------------------------------------------------------

privilege_table = Table(
    "privilege",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False, unique=True),
    Column("description", Text, nullable=True),
)

role_table = Table(
    "role",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False, unique=True),
    Column("description", Text, nullable=True),
)

role_privilege_table = Table(
    "role_privilege",
    mapper_registry.metadata,
    Column("role_id", Integer, ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "privilege_id", Integer, ForeignKey("privilege.id", ondelete="CASCADE"), primary_key=True
    ),
)

role_role_table = Table(
    "role_role",
    mapper_registry.metadata,
    Column("role_id", Integer, ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "inherited_role_id", Integer, ForeignKey("role.id", ondelete="CASCADE"), primary_key=True
    ),
)

# Clinical metadata ------------------------------------------------------------

location_table = Table(
    "location",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=True),
    *_retire_columns(),
)

encounter_type_table = Table(
    "encounter_type",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=True),
    *_retire_columns(),
)

encounter_role_table = Table(
    "encounter_role",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=True),
    *_retire_columns(),
)

visit_type_table = Table(
    "visit_type",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=True),
    *_retire_columns(),
)

form_table = Table(
    "form",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("name", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("version", String, nullable=True),
    Column(
        "encounter_type_id",
        Integer,
        ForeignKey("encounter_type.id", ondelete="SET NULL"),
        nullable=True,
    ),
    *_retire_columns(),
)

form_resource_table = Table(
    "form_resource",
    mapper_registry.metadata,
    *_identity_columns(),
    Column("form_id", Integer, ForeignKey("form.id", ondelete="CASCADE"), nullable=False),
    Column("name", String, nullable=False),
    Column("datatype_classname", String, nullable=True),
    Column("datatype_config", Text, nullable=True),
    Column("value", Text, nullable=True),
    UniqueConstraint("form_id", "name"),
)

# Bookkeeping ------------------------------------------------------------------

global_property_table = Table(
    "global_property",
    mapper_registry.metadata,
    Column("property", String, primary_key=True, key="name"),
    Column("value", Text, nullable=True),
    Column("description", Text, nullable=True),
)

imported_package_table = Table(
    "imported_package",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("group_uuid", String(UUID_COLUMN_LENGTH), nullable=False, unique=True),
    Column("version", Integer, nullable=False),
    Column("name", String, nullable=True),
    Column("date_imported", UTCDateTime, nullable=True),
)


TABLE_BY_CLASS: dict[type[DeployableObject], Table] = {
    Privilege: privilege_table,
    Role: role_table,
    Location: location_table,
    EncounterType: encounter_type_table,
    EncounterRole: encounter_role_table,
    VisitType: visit_type_table,
    Form: form_table,
    FormResource: form_resource_table,
}
TABLE_BY_OBJECT_TYPE: dict[ObjectType, Table] = {
    cls.OBJECT_TYPE: table for cls, table in TABLE_BY_CLASS.items()
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Privilege, privilege_table)

    mapper_registry.map_imperatively(
        Role,
        role_table,
        properties={
            "privileges": relationship(
                Privilege,
                secondary=role_privilege_table,
                order_by=privilege_table.c.name,
            ),
            "inherited_roles": relationship(
                Role,
                secondary=role_role_table,
                primaryjoin=role_table.c.id == role_role_table.c.role_id,
                secondaryjoin=role_table.c.id == role_role_table.c.inherited_role_id,
                order_by=role_table.c.name,
            ),
        },
    )

    for cls in (Location, EncounterType, EncounterRole, VisitType):
        mapper_registry.map_imperatively(cls, TABLE_BY_CLASS[cls])

    mapper_registry.map_imperatively(
        Form,
        form_table,
        properties={"encounter_type": relationship(EncounterType)},
    )

    mapper_registry.map_imperatively(
        FormResource,
        form_resource_table,
        properties={"form": relationship(Form)},
    )

    mapper_registry.map_imperatively(GlobalProperty, global_property_table)
    mapper_registry.map_imperatively(ImportedPackage, imported_package_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
