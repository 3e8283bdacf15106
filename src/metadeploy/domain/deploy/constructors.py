"""Shorthand constructors for building incoming metadata inside bundles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from metadeploy.domain.model import (
    EncounterRole,
    EncounterType,
    Form,
    FormResource,
    Location,
    Privilege,
    Role,
    VisitType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


def privilege(name: str, description: str | None = None) -> Privilege:
    return Privilege(name=name, description=description)


def role(
    name: str,
    description: str | None = None,
    *,
    inherited_roles: Iterable[Role] = (),
    privileges: Iterable[Privilege] = (),
) -> Role:
    return Role(
        name=name,
        description=description,
        inherited_roles=list(inherited_roles),
        privileges=list(privileges),
    )


def location(name: str, description: str | None, uuid: str) -> Location:
    return Location(name=name, description=description, uuid=uuid)


def encounter_type(name: str, description: str | None, uuid: str) -> EncounterType:
    return EncounterType(name=name, description=description, uuid=uuid)


def encounter_role(name: str, description: str | None, uuid: str) -> EncounterRole:
    return EncounterRole(name=name, description=description, uuid=uuid)


def visit_type(name: str, description: str | None, uuid: str) -> VisitType:
    return VisitType(name=name, description=description, uuid=uuid)


def form(
    name: str,
    description: str | None,
    encounter_type: EncounterType | None,
    version: str | None,
    uuid: str,
) -> Form:
    return Form(
        name=name,
        description=description,
        encounter_type=encounter_type,
        version=version,
        uuid=uuid,
    )


def form_resource(
    form: Form,
    name: str,
    value: str | None,
    *,
    datatype_classname: str | None = None,
    datatype_config: str | None = None,
    uuid: str | None = None,
) -> FormResource:
    resource = FormResource(
        form=form,
        name=name,
        value=value,
        datatype_classname=datatype_classname,
        datatype_config=datatype_config,
    )
    if uuid is not None:
        resource.uuid = uuid
    return resource
