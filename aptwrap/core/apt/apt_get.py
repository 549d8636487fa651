"""Utilities for managing packages with apt-get."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from aptwrap.core.config import Configuration
from aptwrap.core.dpkg.dpkg import show
from aptwrap.core.paths import APT_GET, PathResolver, default_resolver
from aptwrap.core.privilege import elevate
from aptwrap.core.process import Operation, ProcessResult, run_tool

DPKG_OPTION = "Dpkg::Options::={}"


@dataclass(frozen=True)
class OperationOptions:
    """
    Options for install and upgrade.

    Attributes:
        confnew: Replace configuration files modified locally with the
            packaged version (--force-confnew). Default keeps the local
            version (--force-confold).
    """
    confnew: bool = False


def build_specifier(name: str, version: str | None = None) -> str:
    """Return "name=version", or just "name" when no version is given."""
    if version is None or version == "":
        return name
    if not isinstance(version, str):
        raise TypeError(f"version must be a string, not {type(version).__name__}")
    return f"{name}={version}"


def force_conf_flag(options: OperationOptions | None = None) -> str:
    """Return "--force-confnew" or "--force-confold" for the given options."""
    options = options or OperationOptions()
    return "--force-confnew" if options.confnew else "--force-confold"


def _apt_get(
    args: List[str],
    resolver: PathResolver | None,
    backend: str | None,
    config: Configuration | None,
) -> List[str]:
    resolver = resolver or default_resolver
    return elevate([resolver.resolve(APT_GET)] + args, backend=backend, config=config)


def update(
    *,
    resolver: PathResolver | None = None,
    backend: str | None = None,
    config: Configuration | None = None,
) -> Operation[None]:
    """
    Refresh the package lists.

    Wraps: apt-get update

    Returns:
        Operation streaming apt-get output, resolving to None
    """
    return run_tool(_apt_get(["update"], resolver, backend, config))


def install(
    name: str,
    version: str | None = None,
    options: OperationOptions | None = None,
    *,
    resolver: PathResolver | None = None,
    backend: str | None = None,
    config: Configuration | None = None,
) -> Operation[dict[str, str]]:
    """
    Install a package, optionally pinned to a version.

    Wraps: apt-get install -y -o Dpkg::Options::=--force-conf{old,new} <name>[=<version>]

    Args:
        name: Package name (e.g., "redis-server")
        version: Exact version to install
        options: Install options, see OperationOptions
        resolver: Alias table for apt-get and dpkg
        backend: Privilege backend, None for the configured one
        config: Configuration, None for the global one

    Returns:
        Operation streaming apt-get output, resolving to the dpkg status
        fields of the installed package
    """
    specifier = build_specifier(name, version)
    args = ["install", "-y", "-o", DPKG_OPTION.format(force_conf_flag(options)), specifier]

    async def _show_installed(result: ProcessResult) -> dict[str, str]:
        return await show(name, resolver=resolver)

    return run_tool(_apt_get(args, resolver, backend, config), _show_installed)


def uninstall(
    name: str,
    *,
    resolver: PathResolver | None = None,
    backend: str | None = None,
    config: Configuration | None = None,
) -> Operation[None]:
    """
    Remove a package, keeping its configuration files.

    Wraps: apt-get remove -y <name>
    """
    return run_tool(_apt_get(["remove", "-y", name], resolver, backend, config))


def autoremove(
    *,
    resolver: PathResolver | None = None,
    backend: str | None = None,
    config: Configuration | None = None,
) -> Operation[None]:
    """
    Remove packages that were installed as dependencies and are no longer needed.

    Wraps: apt-get autoremove -y
    """
    return run_tool(_apt_get(["autoremove", "-y"], resolver, backend, config))


def upgrade(
    options: OperationOptions | None = None,
    *,
    resolver: PathResolver | None = None,
    backend: str | None = None,
    config: Configuration | None = None,
) -> Operation[None]:
    """
    Upgrade all installed packages.

    Wraps: apt-get upgrade -y -o Dpkg::Options::=--force-confdef
           -o Dpkg::Options::=--force-conf{old,new}

    --force-confdef lets dpkg take the default action for modified
    configuration files where one exists; the confnew option decides the rest.
    """
    args = [
        "upgrade",
        "-y",
        "-o",
        DPKG_OPTION.format("--force-confdef"),
        "-o",
        DPKG_OPTION.format(force_conf_flag(options)),
    ]
    return run_tool(_apt_get(args, resolver, backend, config))
