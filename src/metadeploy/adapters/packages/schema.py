"""Pydantic models describing the package archive payloads."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class PackageBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PackageHeader(PackageBaseModel):
    """Contents of ``header.json``."""

    group_uuid: str = Field(alias="groupUuid")
    version: int
    name: str | None = None
    description: str | None = None


class _NamedPayload(PackageBaseModel):
    uuid: str | None = None
    name: str
    description: str | None = None

    _normalize_description = field_validator("description", mode="before")(_blank_to_none)


class _RetireablePayload(_NamedPayload):
    retired: bool = False
    retire_reason: str | None = Field(default=None, alias="retireReason")


class PrivilegePayload(_NamedPayload):
    type: Literal["privilege"]


class RolePayload(_NamedPayload):
    type: Literal["role"]
    privileges: list[str] = Field(default_factory=list)
    inherited_roles: list[str] = Field(default_factory=list, alias="inheritedRoles")


class LocationPayload(_RetireablePayload):
    type: Literal["location"]


class EncounterTypePayload(_RetireablePayload):
    type: Literal["encounter_type"]


class EncounterRolePayload(_RetireablePayload):
    type: Literal["encounter_role"]


class VisitTypePayload(_RetireablePayload):
    type: Literal["visit_type"]


class FormPayload(_RetireablePayload):
    """Forms are matched on uuid alone, which is therefore required."""

    type: Literal["form"]
    uuid: str
    version: str | None = None
    encounter_type: str | None = Field(default=None, alias="encounterType")

    _normalize_encounter_type = field_validator("encounter_type", mode="before")(_blank_to_none)


class FormResourcePayload(PackageBaseModel):
    type: Literal["form_resource"]
    uuid: str | None = None
    form: str
    name: str
    datatype_classname: str | None = Field(default=None, alias="datatypeClassname")
    datatype_config: str | None = Field(default=None, alias="datatypeConfig")
    value: str | None = None


ObjectPayload = Annotated[
    PrivilegePayload
    | RolePayload
    | LocationPayload
    | EncounterTypePayload
    | EncounterRolePayload
    | VisitTypePayload
    | FormPayload
    | FormResourcePayload,
    Field(discriminator="type"),
]


class PackageContents(PackageBaseModel):
    """Contents of ``objects.json``; objects may only reference earlier entries."""

    objects: list[ObjectPayload] = Field(default_factory=list)
