from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from metadeploy import app
from metadeploy.adapters.packages import DirectoryResourceLoader, PackageMismatchError
from metadeploy.config import DeployConfig
from metadeploy.domain.deploy import Chore, ContentManager, MetadataBundle, PackageDescriptor
from metadeploy.domain.deploy import constructors as c
from metadeploy.domain.errors import BundleInstallError, ImportFailureError, ResourceNotFoundError
from metadeploy.domain.model import Form, Location, Role
from tests.helpers.packages import GROUP_UUID, INTAKE_FORM_UUID, sample_objects, write_package

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from typing import TextIO

    from metadeploy.adapters.sqlalchemy.unit_of_work import SqlAlchemyDeployUnitOfWork

    UowFactory = Callable[[], SqlAlchemyDeployUnitOfWork]

WARD_UUID = "8e1a6d14-2d7e-4f9c-9a4b-6d0c2f5e3a45"


class SecurityBundle(MetadataBundle):
    def install(self) -> None:
        view = self.install_object(c.privilege("App: registration"))
        self.install_object(c.role("Registration clerk", privileges=[view]))


class LocationsBundle(MetadataBundle):
    requires = (SecurityBundle,)

    def install(self) -> None:
        self.install_object(c.location("Registration desk", None, WARD_UUID))
        self.uninstall(self.possible(Location, "9f2b7e25-3e8f-4a0d-8b5c-7e1d3a6f4b56"), "gone")


class FormsBundle(MetadataBundle):
    def install(self) -> None:
        self.install_package(PackageDescriptor("clinic-1.zip", GROUP_UUID))


class FailingBundle(MetadataBundle):
    def install(self) -> None:
        self.existing(Role, "Nobody")


class AnnounceChore(Chore):
    id = "announce"

    def perform(self, output: TextIO) -> None:
        output.write("deployed\n")


def test_deploy_commits_bundles_packages_and_chores(
    tmp_path: Path,
    sqlite_unit_of_work: UowFactory,
    capsys: pytest.CaptureFixture[str],
) -> None:
    write_package(tmp_path / "clinic-1.zip")
    config = DeployConfig(package_dir=tmp_path)

    result = app.deploy(
        [LocationsBundle(), FormsBundle(), SecurityBundle()],
        [AnnounceChore()],
        unit_of_work_factory=sqlite_unit_of_work,
        config=config,
    )

    assert result.bundles.installed == ("SecurityBundle", "LocationsBundle", "FormsBundle")
    assert result.chores == ("announce",)
    assert "deployed" in capsys.readouterr().out

    with sqlite_unit_of_work() as uow:
        service = app.build_deploy_service(uow, config=config)
        assert service.existing(Role, "Registration clerk").all_privileges() == {
            "App: registration"
        }
        assert service.existing(Location, WARD_UUID).name == "Registration desk"
        assert service.existing(Form, INTAKE_FORM_UUID).name == "Intake"
        assert uow.repositories.settings.get_value("announce.done") == "true"


def test_second_deploy_skips_done_work(
    tmp_path: Path,
    sqlite_unit_of_work: UowFactory,
) -> None:
    write_package(tmp_path / "clinic-1.zip")
    config = DeployConfig(package_dir=tmp_path)
    bundles = [SecurityBundle(), FormsBundle()]

    app.deploy(bundles, [AnnounceChore()], unit_of_work_factory=sqlite_unit_of_work, config=config)
    second = app.deploy(
        bundles, [AnnounceChore()], unit_of_work_factory=sqlite_unit_of_work, config=config
    )

    assert second.chores == ()
    packages = app.list_imported_packages(unit_of_work_factory=sqlite_unit_of_work)
    assert [package.version for package in packages] == [1]


def test_failed_deploy_rolls_back(sqlite_unit_of_work: UowFactory) -> None:
    class _Needs(MetadataBundle):
        requires = (SecurityBundle, FailingBundle)

        def install(self) -> None:
            pass

    with pytest.raises(BundleInstallError):
        app.deploy(
            [_Needs(), FailingBundle(), SecurityBundle()],
            unit_of_work_factory=sqlite_unit_of_work,
            config=DeployConfig(),
        )

    with sqlite_unit_of_work() as uow:
        service = app.build_deploy_service(uow, config=DeployConfig())
        assert service.possible(Role, "Registration clerk") is None


def test_package_descriptor_without_loader(sqlite_unit_of_work: UowFactory) -> None:
    with pytest.raises(BundleInstallError) as exc:
        app.deploy([FormsBundle()], unit_of_work_factory=sqlite_unit_of_work, config=DeployConfig())

    assert isinstance(exc.value.cause, ValueError)


def test_install_package_gate(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    write_package(tmp_path / "clinic-2.zip", version=2)
    loader = DirectoryResourceLoader(tmp_path)

    assert app.install_package(
        "clinic-2.zip", GROUP_UUID, loader=loader, unit_of_work_factory=sqlite_unit_of_work
    )
    assert not app.install_package(
        "clinic-2.zip", GROUP_UUID, loader=loader, unit_of_work_factory=sqlite_unit_of_work
    )
    assert not app.install_package(
        "clinic-1.zip", GROUP_UUID, loader=loader, unit_of_work_factory=sqlite_unit_of_work
    )
    with pytest.raises(ResourceNotFoundError):
        app.install_package(
            "clinic-3.zip", GROUP_UUID, loader=loader, unit_of_work_factory=sqlite_unit_of_work
        )

    write_package(tmp_path / "clinic-3.zip", version=3)

    assert app.install_package(
        "clinic-3.zip", GROUP_UUID, loader=loader, unit_of_work_factory=sqlite_unit_of_work
    )
    packages = app.list_imported_packages(unit_of_work_factory=sqlite_unit_of_work)
    assert [(package.group_uuid, package.version) for package in packages] == [(GROUP_UUID, 3)]


@pytest.mark.parametrize(
    ("header_group", "header_version"),
    [(INTAKE_FORM_UUID, 2), (GROUP_UUID, 1)],
    ids=["other-group", "other-version"],
)
def test_install_package_rejects_mismatched_header(
    tmp_path: Path,
    sqlite_unit_of_work: UowFactory,
    header_group: str,
    header_version: int,
) -> None:
    write_package(tmp_path / "clinic-2.zip", group_uuid=header_group, version=header_version)
    loader = DirectoryResourceLoader(tmp_path)

    for _ in range(2):
        with pytest.raises(ImportFailureError) as exc:
            app.install_package(
                "clinic-2.zip", GROUP_UUID, loader=loader, unit_of_work_factory=sqlite_unit_of_work
            )
        assert isinstance(exc.value.cause, PackageMismatchError)

    assert app.list_imported_packages(unit_of_work_factory=sqlite_unit_of_work) == []


def test_install_objects_file_twice_keeps_one_form(
    tmp_path: Path, sqlite_unit_of_work: UowFactory
) -> None:
    path = tmp_path / "objects.json"
    path.write_text(json.dumps({"objects": sample_objects()}))

    assert app.install_objects_file(path, unit_of_work_factory=sqlite_unit_of_work) == 6
    assert app.install_objects_file(path, unit_of_work_factory=sqlite_unit_of_work) == 6

    with sqlite_unit_of_work() as uow:
        assert [form.uuid for form in uow.session.query(Form).all()] == [INTAKE_FORM_UUID]


def test_refresh_content_in_priority_order(sqlite_unit_of_work: UowFactory) -> None:
    order: list[str] = []

    class _Manager(ContentManager):
        def __init__(self, label: str, priority: int) -> None:
            self.label = label
            self.priority = priority

        def refresh(self) -> None:
            order.append(self.label)

    result = app.refresh_content(
        [_Manager("c", 30), _Manager("a", 10), _Manager("b", 20)],
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert order == ["a", "b", "c"]
    assert result.count == 3


def test_settings_round_trip(sqlite_unit_of_work: UowFactory) -> None:
    app.set_setting("feature.flag", "on", unit_of_work_factory=sqlite_unit_of_work)

    assert app.get_setting("feature.flag", unit_of_work_factory=sqlite_unit_of_work) == "on"
    assert app.get_setting("unset", unit_of_work_factory=sqlite_unit_of_work) is None
