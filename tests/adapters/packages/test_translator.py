from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from metadeploy.adapters.packages import json_file_source
from metadeploy.adapters.packages.schema import LocationPayload, RolePayload
from metadeploy.adapters.packages.translator import to_domain
from metadeploy.domain.errors import MissingMetadataError
from metadeploy.domain.model import Location, Role
from tests.helpers.packages import WARD_UUID, sample_objects

if TYPE_CHECKING:
    from pathlib import Path

    from metadeploy.adapters.sqlalchemy.unit_of_work import SqlAlchemyDeployUnitOfWork
    from metadeploy.domain.deploy import DeployService


def test_retired_payload_builds_retired_object(deploy_service: DeployService) -> None:
    payload = LocationPayload.model_validate(
        {"type": "location", "uuid": WARD_UUID, "name": "Ward A", "retired": True}
    )

    ward = to_domain(payload, deploy_service.reconciler)

    assert isinstance(ward, Location)
    assert ward.uuid == WARD_UUID
    assert ward.retired
    assert ward.retire_reason


def test_role_payload_requires_known_privileges(deploy_service: DeployService) -> None:
    payload = RolePayload.model_validate({"type": "role", "name": "Clerk", "privileges": ["x"]})

    with pytest.raises(MissingMetadataError):
        to_domain(payload, deploy_service.reconciler)


def test_json_file_source_installs_in_file_order(
    tmp_path: Path,
    deploy_service: DeployService,
    deploy_uow: SqlAlchemyDeployUnitOfWork,
) -> None:
    path = tmp_path / "objects.json"
    path.write_text(json.dumps({"objects": sample_objects()}))

    source = json_file_source(path, deploy_service.reconciler)
    installed = deploy_service.install_from_source(source)
    deploy_uow.flush()

    assert source.origin == str(path)
    assert [obj.object_type.value for obj in installed] == [
        "privilege",
        "role",
        "location",
        "encounter_type",
        "form",
        "form_resource",
    ]
    assert isinstance(deploy_service.existing(Role, "Triage nurse"), Role)
