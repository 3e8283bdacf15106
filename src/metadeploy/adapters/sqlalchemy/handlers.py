"""Deploy handlers persisting metadata through a SQLAlchemy session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import select

from metadeploy.adapters.sqlalchemy.mappings import (
    TABLE_BY_CLASS,
    form_resource_table,
    role_privilege_table,
    role_role_table,
    role_table,
)
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

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from metadeploy.domain.model import ObjectType

log = logging.getLogger(__name__)


class SqlAlchemyObjectHandler[T: DeployableObject]:
    """Uuid-keyed handler; subclasses declare the model and the fields to overwrite.

    Retireable objects are retired on uninstall and un-retired by a re-install since
    retirement state is copied from the incoming object. Everything else is deleted.
    """

    model: ClassVar[type[DeployableObject]]
    overwrite_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, session: Session) -> None:
        self.session = session

    @property
    def object_type(self) -> ObjectType:
        return self.model.OBJECT_TYPE

    @property
    def table(self) -> Table:
        return TABLE_BY_CLASS[self.model]

    def get_identifier(self, obj: T) -> str | None:
        return obj.uuid

    def fetch(self, identifier: str) -> T | None:
        stmt = select(self.model).where(self.table.c.uuid == identifier)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_alternate_match(self, incoming: T) -> T | None:
        _ = incoming
        return None

    def overwrite(self, source: T, target: T) -> None:
        for name in self.overwrite_fields:
            value = getattr(source, name)
            if isinstance(value, list):
                value = list(value)  # pyright: ignore[reportUnknownArgumentType]
            setattr(target, name, value)
        if isinstance(source, RetireableObject) and isinstance(target, RetireableObject):
            target.copy_retirement_from(source)

    def save(self, obj: T) -> T:
        self.session.add(obj)
        return obj

    def uninstall(self, obj: T, reason: str) -> None:
        if isinstance(obj, RetireableObject):
            obj.retire(reason)
            self.session.add(obj)
            log.debug("Retired %s %s: %s", self.object_type, obj.uuid, reason)
            return
        self._purge(obj)

    def _purge(self, obj: T) -> None:
        if obj in self.session.new:
            self.session.expunge(obj)
            return
        if obj.id is None:
            return
        self.session.delete(obj)
        log.debug("Purged %s %s", self.object_type, obj.uuid)

    def _first(self, stmt: Any) -> T | None:
        return self.session.execute(stmt.limit(1)).scalars().first()


class _NamedRetireableHandler[T: RetireableObject](SqlAlchemyObjectHandler[T]):
    """Matches an incoming object without a stored uuid by its name."""

    overwrite_fields = ("name", "description")

    def find_alternate_match(self, incoming: T) -> T | None:
        name = getattr(incoming, "name", None)
        if not name:
            return None
        stmt = select(self.model).where(self.table.c.name == name).order_by(self.table.c.id)
        return self._first(stmt)


class PrivilegeHandler(SqlAlchemyObjectHandler[Privilege]):
    """Privileges are keyed by name and removed outright."""

    model = Privilege
    overwrite_fields = ("name", "description")

    def get_identifier(self, obj: Privilege) -> str | None:
        return obj.name

    def fetch(self, identifier: str) -> Privilege | None:
        stmt = select(Privilege).where(self.table.c.name == identifier)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_alternate_match(self, incoming: Privilege) -> Privilege | None:
        if not incoming.uuid:
            return None
        return super().fetch(incoming.uuid)

    def uninstall(self, obj: Privilege, reason: str) -> None:
        _ = reason
        if obj.id is not None:
            stmt = (
                select(Role)
                .join(role_privilege_table, role_privilege_table.c.role_id == role_table.c.id)
                .where(role_privilege_table.c.privilege_id == obj.id)
            )
            for role in self.session.execute(stmt).scalars().unique():
                role.privileges = [p for p in role.privileges if p is not obj]
        self._purge(obj)


class RoleHandler(SqlAlchemyObjectHandler[Role]):
    """Roles are keyed by name and removed outright."""

    model = Role
    overwrite_fields = ("name", "description", "privileges", "inherited_roles")

    def get_identifier(self, obj: Role) -> str | None:
        return obj.name

    def fetch(self, identifier: str) -> Role | None:
        stmt = select(Role).where(self.table.c.name == identifier)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_alternate_match(self, incoming: Role) -> Role | None:
        if not incoming.uuid:
            return None
        return super().fetch(incoming.uuid)

    def uninstall(self, obj: Role, reason: str) -> None:
        _ = reason
        if obj.id is not None:
            stmt = (
                select(Role)
                .join(role_role_table, role_role_table.c.role_id == role_table.c.id)
                .where(role_role_table.c.inherited_role_id == obj.id)
            )
            for dependent in self.session.execute(stmt).scalars().unique():
                dependent.inherited_roles = [r for r in dependent.inherited_roles if r is not obj]
        self._purge(obj)


class LocationHandler(_NamedRetireableHandler[Location]):
    model = Location


class EncounterTypeHandler(_NamedRetireableHandler[EncounterType]):
    model = EncounterType


class EncounterRoleHandler(_NamedRetireableHandler[EncounterRole]):
    model = EncounterRole


class VisitTypeHandler(_NamedRetireableHandler[VisitType]):
    model = VisitType


class FormHandler(SqlAlchemyObjectHandler[Form]):
    """Forms are only ever matched by uuid."""

    model = Form
    overwrite_fields = ("name", "description", "version", "encounter_type")


class FormResourceHandler(SqlAlchemyObjectHandler[FormResource]):
    """Form resources match on (form, name) and are purged on uninstall."""

    model = FormResource
    overwrite_fields = ("form", "name", "datatype_classname", "datatype_config", "value")

    def find_alternate_match(self, incoming: FormResource) -> FormResource | None:
        form = incoming.form
        if form.id is None:
            # the form may be pending in this session
            self.session.flush()
        if form.id is None:
            return None
        stmt = (
            select(FormResource)
            .where(form_resource_table.c.form_id == form.id)
            .where(form_resource_table.c.name == incoming.name)
        )
        return self._first(stmt)


HANDLER_CLASSES: tuple[type[SqlAlchemyObjectHandler[Any]], ...] = (
    PrivilegeHandler,
    RoleHandler,
    LocationHandler,
    EncounterTypeHandler,
    EncounterRoleHandler,
    VisitTypeHandler,
    FormHandler,
    FormResourceHandler,
)


def default_handlers(session: Session) -> list[SqlAlchemyObjectHandler[Any]]:
    """Instantiate one handler per supported object type over ``session``."""

    return [handler_cls(session) for handler_cls in HANDLER_CLASSES]

