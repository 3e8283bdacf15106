"""Metadata objects managed by deploy handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from metadeploy.domain.model.base import DeployableObject, RetireableObject
from metadeploy.domain.model.enums import ObjectType


@dataclass(eq=False, kw_only=True)
class Privilege(DeployableObject):
    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.PRIVILEGE

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class Role(DeployableObject):
    """Role keyed by name, granting privileges directly and through inheritance."""

    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.ROLE

    name: str
    description: str | None = None
    privileges: list[Privilege] = field(default_factory=list["Privilege"])
    inherited_roles: list[Role] = field(default_factory=list["Role"])

    def all_privileges(self) -> set[str]:
        """Return privilege names granted directly or through inherited roles."""

        names: set[str] = set()
        seen: set[int] = set()
        pending: list[Role] = [self]
        while pending:
            role = pending.pop()
            if id(role) in seen:
                continue
            seen.add(id(role))
            names.update(privilege.name for privilege in role.privileges)
            pending.extend(role.inherited_roles)
        return names


@dataclass(eq=False, kw_only=True)
class Location(RetireableObject):
    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.LOCATION

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class EncounterType(RetireableObject):
    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.ENCOUNTER_TYPE

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class EncounterRole(RetireableObject):
    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.ENCOUNTER_ROLE

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class VisitType(RetireableObject):
    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.VISIT_TYPE

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class Form(RetireableObject):
    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.FORM

    name: str
    description: str | None = None
    version: str | None = None
    encounter_type: EncounterType | None = None


@dataclass(eq=False, kw_only=True)
class FormResource(DeployableObject):
    """Named value attached to a form; purged rather than retired."""

    OBJECT_TYPE: ClassVar[ObjectType] = ObjectType.FORM_RESOURCE

    form: Form
    name: str
    datatype_classname: str | None = None
    datatype_config: str | None = None
    value: str | None = None
