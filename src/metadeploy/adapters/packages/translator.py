"""Translate package payloads into domain objects."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from metadeploy.domain.model import (
    DeployableObject,
    EncounterRole,
    EncounterType,
    Form,
    FormResource,
    Location,
    Privilege,
    RetireableObject,
    Role,
    VisitType,
)

from .schema import (
    EncounterRolePayload,
    EncounterTypePayload,
    FormPayload,
    FormResourcePayload,
    LocationPayload,
    PackageContents,
    PrivilegePayload,
    RolePayload,
    VisitTypePayload,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

    from metadeploy.domain.deploy.reconciler import ObjectReconciler

    from .schema import ObjectPayload


log = getLogger(__name__)

_RETIRE_REASON = "retired in package"


def _with_uuid[T: DeployableObject](obj: T, uuid: str | None) -> T:
    if uuid is not None:
        obj.uuid = uuid
    return obj


def _apply_retirement(
    obj: RetireableObject, retired: bool, reason: str | None  # noqa: FBT001
) -> None:
    if retired:
        obj.retire(reason or _RETIRE_REASON)


def to_domain(payload: ObjectPayload, reconciler: ObjectReconciler) -> DeployableObject:
    """Build the domain object for ``payload``.

    References to other objects (privileges, inherited roles, the form's encounter
    type, the resource's form) are resolved against stored state and must exist.
    """

    match payload:
        case PrivilegePayload():
            return _with_uuid(
                Privilege(name=payload.name, description=payload.description), payload.uuid
            )
        case RolePayload():
            return _with_uuid(
                Role(
                    name=payload.name,
                    description=payload.description,
                    privileges=[
                        reconciler.existing(Privilege, name) for name in payload.privileges
                    ],
                    inherited_roles=[
                        reconciler.existing(Role, name) for name in payload.inherited_roles
                    ],
                ),
                payload.uuid,
            )
        case FormPayload():
            encounter_type = (
                None
                if payload.encounter_type is None
                else reconciler.existing(EncounterType, payload.encounter_type)
            )
            form = Form(
                uuid=payload.uuid,
                name=payload.name,
                description=payload.description,
                version=payload.version,
                encounter_type=encounter_type,
            )
            _apply_retirement(form, payload.retired, payload.retire_reason)
            return form
        case FormResourcePayload():
            return _with_uuid(
                FormResource(
                    form=reconciler.existing(Form, payload.form),
                    name=payload.name,
                    datatype_classname=payload.datatype_classname,
                    datatype_config=payload.datatype_config,
                    value=payload.value,
                ),
                payload.uuid,
            )
        case (
            LocationPayload() | EncounterTypePayload() | EncounterRolePayload() | VisitTypePayload()
        ):
            return _named_retireable(payload)


def _named_retireable(
    payload: LocationPayload | EncounterTypePayload | EncounterRolePayload | VisitTypePayload,
) -> RetireableObject:
    cls: type[Location | EncounterType | EncounterRole | VisitType]
    match payload:
        case LocationPayload():
            cls = Location
        case EncounterTypePayload():
            cls = EncounterType
        case EncounterRolePayload():
            cls = EncounterRole
        case VisitTypePayload():
            cls = VisitType
    obj = _with_uuid(cls(name=payload.name, description=payload.description), payload.uuid)
    _apply_retirement(obj, payload.retired, payload.retire_reason)
    return obj


@dataclass(slots=True)
class PayloadSource:
    """Object source building each domain object only when it is reached.

    Building lazily lets later payloads reference objects installed earlier in the
    same pass.
    """

    payloads: Sequence[ObjectPayload]
    reconciler: ObjectReconciler
    origin: str = "package"

    def __iter__(self) -> Iterator[DeployableObject]:
        for payload in self.payloads:
            yield to_domain(payload, self.reconciler)


def json_file_source(path: Path, reconciler: ObjectReconciler) -> PayloadSource:
    """Return a source over the objects listed in a standalone JSON file."""

    contents = PackageContents.model_validate_json(path.read_bytes())
    log.debug("Read %s object payloads from %s", len(contents.objects), path)
    return PayloadSource(contents.objects, reconciler, origin=str(path))
