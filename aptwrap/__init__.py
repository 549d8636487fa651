"""
Thin asyncio facade over dpkg and apt-get.

    import aptwrap

    fields = await aptwrap.show("redis-server")

    op = aptwrap.install("redis-server", options=aptwrap.OperationOptions(confnew=True))
    async for chunk in op:
        print(chunk.text, end="")
    fields = await op
"""

from aptwrap.core.apt import (
    OperationOptions,
    autoremove,
    build_specifier,
    force_conf_flag,
    install,
    uninstall,
    update,
    upgrade,
)
from aptwrap.core.dpkg import parse_stanza, show
from aptwrap.core.errors import AptwrapError, ToolExecutionError
from aptwrap.core.paths import PathResolver, default_resolver, resolve, set_alias
from aptwrap.core.process import Operation, OutputChunk

__version__ = "0.1.0"

__all__ = [
    "AptwrapError",
    "Operation",
    "OperationOptions",
    "OutputChunk",
    "PathResolver",
    "ToolExecutionError",
    "autoremove",
    "build_specifier",
    "default_resolver",
    "force_conf_flag",
    "install",
    "parse_stanza",
    "resolve",
    "set_alias",
    "show",
    "uninstall",
    "update",
    "upgrade",
]
