"""
Tool alias table.

Maps a logical tool name ("dpkg", "apt-get") to the executable that is
actually run. Unset aliases resolve to themselves.
"""

from __future__ import annotations

import logging
import threading

from aptwrap.core.config import Configuration

logger = logging.getLogger(__name__)

DPKG = "dpkg"
APT_GET = "apt-get"


class PathResolver:
    """Thread-safe alias -> path mapping."""

    def __init__(self, aliases: dict[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._aliases: dict[str, str] = dict(aliases or {})

    @classmethod
    def from_config(cls, config: Configuration) -> PathResolver:
        """Build a resolver seeded with the [paths] table of a configuration."""
        resolver = cls()
        for alias, path in config.paths.items():
            if path and path != alias:
                resolver.set_alias(alias, str(path))
        return resolver

    def set_alias(self, alias: str, path: str) -> None:
        with self._lock:
            self._aliases[alias] = path
        logger.debug("Alias %s -> %s", alias, path)

    def resolve(self, alias: str) -> str:
        with self._lock:
            return self._aliases.get(alias) or alias

    def aliases(self) -> dict[str, str]:
        with self._lock:
            return dict(self._aliases)

    def __repr__(self) -> str:
        return f"PathResolver({self.aliases()!r})"


default_resolver = PathResolver()


def set_alias(alias: str, path: str) -> None:
    """Record a process-wide override for a tool alias."""
    default_resolver.set_alias(alias, path)


def resolve(alias: str) -> str:
    """Resolve a tool alias against the process-wide table."""
    return default_resolver.resolve(alias)
