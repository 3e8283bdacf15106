"""Resource loaders locating package archives by name."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import BinaryIO

log = logging.getLogger(__name__)


class DirectoryResourceLoader:
    """Locate packages below a directory on disk."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def locate(self, filename: str) -> BinaryIO | None:
        path = self.root / filename
        if not path.is_file():
            log.debug("No package %s below %s", filename, self.root)
            return None
        return path.open("rb")


class PackageResourceLoader:
    """Locate packages shipped as data inside an importable Python package."""

    def __init__(self, package: str) -> None:
        self.package = package

    def locate(self, filename: str) -> BinaryIO | None:
        try:
            resource = resources.files(self.package).joinpath(filename)
        except ModuleNotFoundError:
            log.warning("Package %s cannot be imported", self.package)
            return None
        if not resource.is_file():
            return None
        return resource.open("rb")
