"""Bookkeeping records owned by the persistence layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(eq=False, kw_only=True)
class GlobalProperty:
    """Key-value setting, used for chore completion markers."""

    name: str
    value: str | None = None
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class ImportedPackage:
    """Latest version of a package group imported into this installation."""

    group_uuid: str
    version: int
    name: str | None = None
    date_imported: datetime | None = None
