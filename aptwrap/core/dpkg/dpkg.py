"""
Queries against the dpkg package database.
"""

from __future__ import annotations

import logging

from aptwrap.core.dpkg.stanza import parse_stanza
from aptwrap.core.paths import DPKG, PathResolver, default_resolver
from aptwrap.core.process import run_and_capture

logger = logging.getLogger(__name__)


def show_command(name: str, resolver: PathResolver | None = None) -> list[str]:
    """
    Build the argv for a status query.

    Wraps: dpkg -s <name>
    """
    resolver = resolver or default_resolver
    return [resolver.resolve(DPKG), "-s", name]


async def show(name: str, *, resolver: PathResolver | None = None) -> dict[str, str]:
    """
    Show the installed package's status fields.

    Wraps: dpkg -s <name>

    Args:
        name: Package name (e.g., "redis-server")
        resolver: Alias table to find dpkg with. Defaults to the process-wide one.

    Returns:
        Mapping of field name to value, e.g. {"Package": "redis-server", ...}

    Raises:
        ToolExecutionError: dpkg failed, e.g. the package is not installed
    """
    result = await run_and_capture(show_command(name, resolver))
    fields = parse_stanza(result.stdout)
    logger.debug("dpkg -s %s: %d fields", name, len(fields))
    return fields
