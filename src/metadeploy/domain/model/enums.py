"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ObjectType(StrEnum):
    """Type tag used to select the deploy handler for an object."""

    PRIVILEGE = "privilege"
    ROLE = "role"
    LOCATION = "location"
    ENCOUNTER_TYPE = "encounter_type"
    ENCOUNTER_ROLE = "encounter_role"
    VISIT_TYPE = "visit_type"
    FORM = "form"
    FORM_RESOURCE = "form_resource"


class ImportMode(StrEnum):
    """How a package import treats objects that already exist."""

    MIRROR = "mirror"
    PREFER_EXISTING = "prefer_existing"
