"""Domain model for deployable metadata."""

from __future__ import annotations

from .base import (
    UUID_LENGTH,
    DeployableObject,
    RetireableObject,
    is_valid_uuid,
    new_uuid,
)
from .enums import ImportMode, ObjectType
from .metadata import (
    EncounterRole,
    EncounterType,
    Form,
    FormResource,
    Location,
    Privilege,
    Role,
    VisitType,
)
from .settings import GlobalProperty, ImportedPackage

CLASS_BY_OBJECT_TYPE: dict[ObjectType, type[DeployableObject]] = {
    ObjectType.PRIVILEGE: Privilege,
    ObjectType.ROLE: Role,
    ObjectType.LOCATION: Location,
    ObjectType.ENCOUNTER_TYPE: EncounterType,
    ObjectType.ENCOUNTER_ROLE: EncounterRole,
    ObjectType.VISIT_TYPE: VisitType,
    ObjectType.FORM: Form,
    ObjectType.FORM_RESOURCE: FormResource,
}

__all__ = [
    "CLASS_BY_OBJECT_TYPE",
    "UUID_LENGTH",
    "DeployableObject",
    "EncounterRole",
    "EncounterType",
    "Form",
    "FormResource",
    "GlobalProperty",
    "ImportMode",
    "ImportedPackage",
    "Location",
    "ObjectType",
    "Privilege",
    "RetireableObject",
    "Role",
    "VisitType",
    "is_valid_uuid",
    "new_uuid",
]
