from __future__ import annotations

import io
import zipfile
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from metadeploy.adapters.packages import (
    PackageContents,
    PackageHeader,
    PackageMismatchError,
    PackageNotLoadedError,
    ZipPackageImporter,
)
from metadeploy.domain.errors import MissingMetadataError, ObjectSourceError
from metadeploy.domain.model import (
    EncounterType,
    Form,
    FormResource,
    ImportMode,
    Location,
    Role,
)
from tests.helpers.packages import (
    GROUP_UUID,
    INTAKE_FORM_UUID,
    TRIAGE_UUID,
    WARD_UUID,
    write_package,
)

if TYPE_CHECKING:
    from pathlib import Path

    from metadeploy.adapters.sqlalchemy.unit_of_work import SqlAlchemyDeployUnitOfWork
    from metadeploy.domain.deploy import DeployService


def _importer(
    service: DeployService, uow: SqlAlchemyDeployUnitOfWork, mode: ImportMode
) -> ZipPackageImporter:
    importer = ZipPackageImporter(service.reconciler, uow.repositories.imported_packages)
    importer.configure(mode)
    return importer


def test_header_accepts_camel_case() -> None:
    header = PackageHeader.model_validate({"groupUuid": GROUP_UUID, "version": "4"})

    assert header.group_uuid == GROUP_UUID
    assert header.version == 4


def test_contents_reject_unknown_type() -> None:
    with pytest.raises(ValidationError):
        PackageContents.model_validate({"objects": [{"type": "concept", "name": "Weight"}]})


def test_mirror_import_installs_objects_and_records_version(
    tmp_path: Path,
    deploy_service: DeployService,
    deploy_uow: SqlAlchemyDeployUnitOfWork,
) -> None:
    archive = write_package(tmp_path / "clinic-1.zip", version=1)
    importer = _importer(deploy_service, deploy_uow, ImportMode.MIRROR)

    with archive.open("rb") as stream:
        importer.load(stream)
    importer.import_package(GROUP_UUID, 1)
    deploy_uow.flush()

    nurse = deploy_service.existing(Role, "Triage nurse")
    assert [p.name for p in nurse.privileges] == ["App: triage"]
    intake = deploy_service.existing(Form, INTAKE_FORM_UUID)
    assert intake.encounter_type is deploy_service.existing(EncounterType, TRIAGE_UUID)
    assert deploy_service.existing(Location, WARD_UUID).name == "Ward A"
    assert deploy_uow.session.query(FormResource).one().form is intake

    recorded = deploy_uow.repositories.imported_packages.get_by_group(GROUP_UUID)
    assert recorded is not None
    assert recorded.version == 1
    assert recorded.name == "clinic"


def test_mirror_import_overwrites_stored_objects(
    tmp_path: Path,
    deploy_service: DeployService,
    deploy_uow: SqlAlchemyDeployUnitOfWork,
) -> None:
    stored = deploy_service.install_object(Location(name="Old ward", uuid=WARD_UUID))
    deploy_uow.flush()
    archive = write_package(
        tmp_path / "clinic-2.zip",
        version=2,
        objects=[{"type": "location", "uuid": WARD_UUID, "name": "Ward A"}],
    )
    importer = _importer(deploy_service, deploy_uow, ImportMode.MIRROR)

    with archive.open("rb") as stream:
        importer.load(stream)
    importer.import_package(GROUP_UUID, 2)

    assert stored.name == "Ward A"


def test_prefer_existing_leaves_stored_objects(
    tmp_path: Path,
    deploy_service: DeployService,
    deploy_uow: SqlAlchemyDeployUnitOfWork,
) -> None:
    stored = deploy_service.install_object(Location(name="Local name", uuid=WARD_UUID))
    deploy_uow.flush()
    archive = write_package(tmp_path / "clinic-1.zip")
    importer = _importer(deploy_service, deploy_uow, ImportMode.PREFER_EXISTING)

    with archive.open("rb") as stream:
        importer.load(stream)
    importer.import_package(GROUP_UUID, 1)
    deploy_uow.flush()

    assert stored.name == "Local name"
    assert deploy_service.existing(Form, INTAKE_FORM_UUID).name == "Intake"


def test_missing_reference_fails_with_origin(
    tmp_path: Path,
    deploy_service: DeployService,
    deploy_uow: SqlAlchemyDeployUnitOfWork,
) -> None:
    archive = write_package(
        tmp_path / "broken-1.zip",
        name="broken",
        objects=[{"type": "role", "name": "Clerk", "privileges": ["App: missing"]}],
    )
    importer = _importer(deploy_service, deploy_uow, ImportMode.MIRROR)

    with archive.open("rb") as stream:
        importer.load(stream)
    with pytest.raises(ObjectSourceError) as exc:
        importer.import_package(GROUP_UUID, 1)

    assert exc.value.origin == "broken"
    assert isinstance(exc.value.cause, MissingMetadataError)
    assert deploy_uow.repositories.imported_packages.get_by_group(GROUP_UUID) is None


def test_import_requires_load(
    deploy_service: DeployService, deploy_uow: SqlAlchemyDeployUnitOfWork
) -> None:
    importer = _importer(deploy_service, deploy_uow, ImportMode.MIRROR)

    with pytest.raises(PackageNotLoadedError):
        importer.import_package(GROUP_UUID, 1)
    with pytest.raises(PackageNotLoadedError):
        _ = importer.contents


def test_archive_without_objects_fails_to_load(
    deploy_service: DeployService, deploy_uow: SqlAlchemyDeployUnitOfWork
) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("header.json", '{"groupUuid": "g", "version": 1}')
    buffer.seek(0)

    with pytest.raises(KeyError):
        _importer(deploy_service, deploy_uow, ImportMode.MIRROR).load(buffer)


@pytest.mark.parametrize(
    ("group_uuid", "version"),
    [(TRIAGE_UUID, 3), (GROUP_UUID, 1)],
    ids=["other-group", "other-version"],
)
def test_header_must_match_requested_package(
    tmp_path: Path,
    deploy_service: DeployService,
    deploy_uow: SqlAlchemyDeployUnitOfWork,
    group_uuid: str,
    version: int,
) -> None:
    archive = write_package(tmp_path / "clinic-3.zip", group_uuid=group_uuid, version=version)
    importer = _importer(deploy_service, deploy_uow, ImportMode.MIRROR)

    with archive.open("rb") as stream:
        importer.load(stream)
    with pytest.raises(PackageMismatchError):
        importer.import_package(GROUP_UUID, 3)
    deploy_uow.flush()

    assert deploy_service.possible(Form, INTAKE_FORM_UUID) is None
    assert list(deploy_uow.repositories.imported_packages.list_all()) == []


def test_form_payload_requires_uuid() -> None:
    with pytest.raises(ValidationError):
        PackageContents.model_validate({"objects": [{"type": "form", "name": "Intake"}]})
