"""Command line arguments for aptwrap."""

import argparse
from pathlib import Path
from typing import List

from aptwrap.core.privilege import AUTO, BACKENDS, NONE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aptwrap",
        description="Query and manage Debian packages through dpkg and apt-get.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        help="Configuration file (default: ~/.config/aptwrap/aptwrap.toml)",
    )
    parser.add_argument(
        "--backend",
        choices=[AUTO, NONE, *BACKENDS],
        help="Privilege escalation backend (overrides the configuration)",
    )
    parser.add_argument("--dpkg", metavar="PATH", help="dpkg executable to use")
    parser.add_argument("--apt-get", dest="apt_get", metavar="PATH", help="apt-get executable to use")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")

    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Show an installed package (dpkg -s)")
    show.add_argument("name")

    sub.add_parser("update", help="Refresh package lists")

    install = sub.add_parser("install", help="Install a package")
    install.add_argument("name")
    install.add_argument("--version", dest="pkg_version", metavar="VERSION")
    _add_confnew(install)

    remove = sub.add_parser("remove", help="Remove a package")
    remove.add_argument("name")

    sub.add_parser("autoremove", help="Remove unneeded dependencies")

    upgrade = sub.add_parser("upgrade", help="Upgrade all packages")
    _add_confnew(upgrade)

    return parser


def _add_confnew(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--confnew",
        dest="confnew",
        action="store_true",
        default=None,
        help="Replace modified configuration files with the packaged version",
    )
    group.add_argument(
        "--confold",
        dest="confnew",
        action="store_false",
        help="Keep modified configuration files",
    )


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
