"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select

from metadeploy.adapters.sqlalchemy.mappings import imported_package_table
from metadeploy.domain.model import GlobalProperty, ImportedPackage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session


class SqlAlchemySettingsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, name: str) -> GlobalProperty | None:
        return self.session.get(GlobalProperty, name)

    def get_value(self, name: str) -> str | None:
        setting = self.get(name)
        return None if setting is None else setting.value

    def set_value(self, name: str, value: str) -> None:
        setting = self.get(name)
        if setting is None:
            self.session.add(GlobalProperty(name=name, value=value))
            return
        setting.value = value


class SqlAlchemyImportedPackageRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_group(self, group_uuid: str) -> ImportedPackage | None:
        stmt = select(ImportedPackage).where(imported_package_table.c.group_uuid == group_uuid)
        return self.session.execute(stmt).scalar_one_or_none()

    def record(self, group_uuid: str, version: int, *, name: str | None = None) -> None:
        now = datetime.now(UTC)
        package = self.get_by_group(group_uuid)
        if package is None:
            self.session.add(
                ImportedPackage(
                    group_uuid=group_uuid, version=version, name=name, date_imported=now
                )
            )
            return
        package.version = version
        package.date_imported = now
        if name is not None:
            package.name = name

    def list_all(self) -> Sequence[ImportedPackage]:
        stmt = select(ImportedPackage).order_by(imported_package_table.c.group_uuid)
        return self.session.execute(stmt).scalars().all()
