from __future__ import annotations

import pytest

from metadeploy.domain.deploy import constructors as c
from metadeploy.domain.model import (
    CLASS_BY_OBJECT_TYPE,
    Location,
    ObjectType,
    Privilege,
    Role,
    is_valid_uuid,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("5b8d3ae1-9a4b-4c6f-8d1e-3a7f9c2b0d12", True),
        ("AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA", True),
        ("5b8d3ae1-9a4b-4c6f-8d1e-3a7f9c2b0d1", False),
        ("5b8d3ae1 9a4b-4c6f-8d1e-3a7f9c2b0d12", False),
        (None, False),
    ],
)
def test_is_valid_uuid(value: str | None, *, expected: bool) -> None:
    assert is_valid_uuid(value) is expected


def test_new_objects_get_distinct_uuids() -> None:
    first, second = Location(name="A"), Location(name="B")

    assert is_valid_uuid(first.uuid)
    assert first.uuid != second.uuid
    assert first.id is None


def test_retire_and_unretire() -> None:
    ward = Location(name="Ward")

    ward.retire("closed", retired_by="admin")

    assert ward.retired
    assert ward.retire_reason == "closed"
    assert ward.date_retired is not None

    ward.unretire()

    assert not ward.retired
    assert ward.retire_reason is None
    assert ward.date_retired is None


def test_retire_requires_reason() -> None:
    with pytest.raises(ValueError, match="reason"):
        Location(name="Ward").retire("  ")


def test_role_all_privileges_follows_inheritance() -> None:
    view, edit = Privilege(name="view"), Privilege(name="edit")
    base = Role(name="base", privileges=[view])
    clerk = Role(name="clerk", privileges=[edit], inherited_roles=[base])
    base.inherited_roles.append(clerk)

    assert clerk.all_privileges() == {"view", "edit"}


def test_object_type_lookup_covers_every_type() -> None:
    assert set(CLASS_BY_OBJECT_TYPE) == set(ObjectType)
    for object_type, cls in CLASS_BY_OBJECT_TYPE.items():
        assert cls.OBJECT_TYPE is object_type


def test_constructors_build_incoming_objects() -> None:
    triage = c.encounter_type("Triage", None, "5b8d3ae1-9a4b-4c6f-8d1e-3a7f9c2b0d12")
    intake = c.form("Intake", "desc", triage, "1.0", "6c9e4bf2-0b5c-4d7a-9e2f-4b8a0d3c1e23")
    resource = c.form_resource(intake, "layout", "{}", uuid="7d0f5c03-1c6d-4e8b-8f3a-5c9b1e4d2f34")
    nurse = c.role("Nurse", privileges=[c.privilege("App: triage")])

    assert intake.encounter_type is triage
    assert resource.form is intake
    assert resource.uuid == "7d0f5c03-1c6d-4e8b-8f3a-5c9b1e4d2f34"
    assert [p.name for p in nurse.privileges] == ["App: triage"]
    assert nurse.inherited_roles == []
