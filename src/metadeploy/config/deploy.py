"""Deployment defaults for bundles, packages and chores."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from metadeploy.domain.model import ImportMode

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_CHORE_MARKER_SUFFIX: Final[str] = ".done"


@dataclass(frozen=True, slots=True)
class DeployConfig:
    package_dir: Path | None = None
    import_mode: ImportMode = ImportMode.MIRROR
    chore_marker_suffix: str = DEFAULT_CHORE_MARKER_SUFFIX


def get_deploy_config() -> DeployConfig:
    package_dir = optional_env_var("METADEPLOY_PACKAGE_DIR")
    raw_mode = optional_env_var("METADEPLOY_IMPORT_MODE")
    import_mode = ImportMode.MIRROR
    if raw_mode is not None:
        try:
            import_mode = ImportMode(raw_mode.lower())
        except ValueError as exc:
            allowed = ", ".join(mode.value for mode in ImportMode)
            raise ConfigurationError(
                f"Invalid METADEPLOY_IMPORT_MODE {raw_mode!r} (expected one of: {allowed})"
            ) from exc
    return DeployConfig(
        package_dir=Path(package_dir).expanduser() if package_dir else None,
        import_mode=import_mode,
    )
