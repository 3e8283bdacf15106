"""Initial metadata schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 00:00:00

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _identity() -> list[sa.Column[object]]:
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("uuid", sa.String(length=38), nullable=False),
    ]


def _retire() -> list[sa.Column[object]]:
    return [
        sa.Column("retired", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("retired_by", sa.String(), nullable=True),
        sa.Column("date_retired", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retire_reason", sa.String(), nullable=True),
    ]


def _named_retireable(table_name: str) -> None:
    op.create_table(
        table_name,
        *_identity(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_retire(),
        sa.PrimaryKeyConstraint("id", name=f"pk_{table_name}"),
        sa.UniqueConstraint("uuid", name=f"uq_{table_name}_uuid"),
    )


def upgrade() -> None:
    for table_name in ("privilege", "role"):
        op.create_table(
            table_name,
            *_identity(),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table_name}"),
            sa.UniqueConstraint("uuid", name=f"uq_{table_name}_uuid"),
            sa.UniqueConstraint("name", name=f"uq_{table_name}_name"),
        )

    op.create_table(
        "role_privilege",
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("privilege_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["role_id"], ["role.id"], name="fk_role_privilege_role_id_role", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["privilege_id"],
            ["privilege.id"],
            name="fk_role_privilege_privilege_id_privilege",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("role_id", "privilege_id", name="pk_role_privilege"),
    )

    op.create_table(
        "role_role",
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("inherited_role_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["role_id"], ["role.id"], name="fk_role_role_role_id_role", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["inherited_role_id"],
            ["role.id"],
            name="fk_role_role_inherited_role_id_role",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("role_id", "inherited_role_id", name="pk_role_role"),
    )

    for table_name in ("location", "encounter_type", "encounter_role", "visit_type"):
        _named_retireable(table_name)

    op.create_table(
        "form",
        *_identity(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("version", sa.String(), nullable=True),
        sa.Column("encounter_type_id", sa.Integer(), nullable=True),
        *_retire(),
        sa.ForeignKeyConstraint(
            ["encounter_type_id"],
            ["encounter_type.id"],
            name="fk_form_encounter_type_id_encounter_type",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_form"),
        sa.UniqueConstraint("uuid", name="uq_form_uuid"),
    )

    op.create_table(
        "form_resource",
        *_identity(),
        sa.Column("form_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("datatype_classname", sa.String(), nullable=True),
        sa.Column("datatype_config", sa.Text(), nullable=True),
        sa.Column("value", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["form_id"], ["form.id"], name="fk_form_resource_form_id_form", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_form_resource"),
        sa.UniqueConstraint("uuid", name="uq_form_resource_uuid"),
        sa.UniqueConstraint("form_id", "name", name="uq_form_resource_form_id"),
    )

    op.create_table(
        "global_property",
        sa.Column("property", sa.String(), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("property", name="pk_global_property"),
    )

    op.create_table(
        "imported_package",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("group_uuid", sa.String(length=38), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("date_imported", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_imported_package"),
        sa.UniqueConstraint("group_uuid", name="uq_imported_package_group_uuid"),
    )


def downgrade() -> None:
    for table_name in (
        "imported_package",
        "global_property",
        "form_resource",
        "form",
        "visit_type",
        "encounter_role",
        "encounter_type",
        "location",
        "role_role",
        "role_privilege",
        "role",
        "privilege",
    ):
        op.drop_table(table_name)
