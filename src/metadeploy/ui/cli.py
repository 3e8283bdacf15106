from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from metadeploy.adapters.packages import DirectoryResourceLoader
from metadeploy.app import (
    get_setting,
    init_database,
    install_objects_file,
    install_package,
    list_imported_packages,
    set_setting,
)
from metadeploy.config import configure_logging
from metadeploy.domain.model import ImportMode, is_valid_uuid

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deploy declarative metadata")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the data directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create or upgrade the database schema")

    package = subparsers.add_parser("install-package", help="Install a metadata package")
    package.add_argument("filename", type=str, help="Archive name, e.g. clinic-3.zip")
    package.add_argument(
        "--group",
        type=str,
        required=True,
        help="Package group uuid the version is tracked against",
    )
    package.add_argument(
        "--dir",
        type=Path,
        help="Directory holding the archive (defaults to METADEPLOY_PACKAGE_DIR)",
    )
    package.add_argument(
        "--mode",
        type=str,
        choices=[mode.value for mode in ImportMode],
        help="Import mode (defaults to config)",
    )

    objects = subparsers.add_parser("install-objects", help="Install objects from a JSON file")
    objects.add_argument("path", type=Path, help="JSON file with an 'objects' list")

    subparsers.add_parser("packages", help="List imported packages")

    setting = subparsers.add_parser("setting", help="Read or write a global setting")
    setting_sub = setting.add_subparsers(dest="setting_command", required=True)
    setting_get = setting_sub.add_parser("get", help="Show a setting value")
    setting_get.add_argument("name", type=str)
    setting_set = setting_sub.add_parser("set", help="Store a setting value")
    setting_set.add_argument("name", type=str)
    setting_set.add_argument("value", type=str)

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "install-package" and not is_valid_uuid(args.group):
        raise ValueError(f"Invalid package group uuid: {args.group}")
    if args.command == "install-objects" and not args.path.is_file():
        raise ValueError(f"No such file: {args.path}")


def _run(args: argparse.Namespace) -> None:
    if args.database_uri or args.command == "init-db":
        init_database(database_uri=args.database_uri)

    if args.command == "init-db":
        return
    if args.command == "install-package":
        install_package(
            args.filename,
            args.group,
            loader=DirectoryResourceLoader(args.dir) if args.dir else None,
            mode=ImportMode(args.mode) if args.mode else None,
        )
    elif args.command == "install-objects":
        install_objects_file(args.path)
    elif args.command == "packages":
        packages = list_imported_packages()
        if not packages:
            log.info("No packages imported")
        for package in packages:
            log.info(
                "%s version=%s name=%s imported=%s",
                package.group_uuid,
                package.version,
                package.name or "-",
                package.date_imported,
            )
    elif args.command == "setting" and args.setting_command == "get":
        log.info("%s = %s", args.name, get_setting(args.name))
    elif args.command == "setting" and args.setting_command == "set":
        set_setting(args.name, args.value)
        log.info("Stored %s", args.name)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else None)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error during deploy")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
