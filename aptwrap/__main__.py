"""Command line entry point: python -m aptwrap."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import List

from aptwrap.core.apt import OperationOptions, apt_get
from aptwrap.core.args import parse_args
from aptwrap.core.config import Configuration, get_config, set_config_path
from aptwrap.core.dpkg import show
from aptwrap.core.errors import ToolExecutionError
from aptwrap.core.log import setup_logging
from aptwrap.core.paths import APT_GET, DPKG, PathResolver
from aptwrap.core.process import STDERR, Operation

logger = logging.getLogger(__name__)


def exit_status(returncode: int | None) -> int:
    """Map a tool's return code to ours; killed by signal N gives 128 + N."""
    if returncode is None or returncode == 0:
        return 1
    if returncode < 0:
        return 128 - returncode
    return returncode


def format_fields(fields: dict[str, str]) -> str:
    return "".join(f"{key}: {value}\n" for key, value in fields.items())


async def _stream(op: Operation) -> object:
    async for chunk in op:
        out = sys.stderr if chunk.source == STDERR else sys.stdout
        out.write(chunk.text)
        out.flush()
    return await op


def _options(confnew: bool | None, config: Configuration) -> OperationOptions:
    return OperationOptions(confnew=config.confnew if confnew is None else confnew)


async def run_command(args, config: Configuration, resolver: PathResolver) -> int:
    common = {"resolver": resolver, "backend": args.backend, "config": config}

    if args.command == "show":
        sys.stdout.write(format_fields(await show(args.name, resolver=resolver)))
        return 0

    if args.command == "update":
        await _stream(apt_get.update(**common))
    elif args.command == "install":
        fields = await _stream(
            apt_get.install(
                args.name,
                args.pkg_version,
                _options(args.confnew, config),
                **common,
            )
        )
        sys.stdout.write(format_fields(fields))  # type: ignore[arg-type]
    elif args.command == "remove":
        await _stream(apt_get.uninstall(args.name, **common))
    elif args.command == "autoremove":
        await _stream(apt_get.autoremove(**common))
    elif args.command == "upgrade":
        await _stream(apt_get.upgrade(_options(args.confnew, config), **common))
    return 0


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)

    set_config_path(args.config_path)
    config = get_config(create=True)
    setup_logging("DEBUG" if args.verbose else config.log_level)

    resolver = PathResolver.from_config(config)
    if args.dpkg:
        resolver.set_alias(DPKG, args.dpkg)
    if args.apt_get:
        resolver.set_alias(APT_GET, args.apt_get)

    try:
        return asyncio.run(run_command(args, config, resolver))
    except ToolExecutionError as e:
        logger.error("%s", e)
        print(f"aptwrap: {e}", file=sys.stderr)
        return exit_status(e.returncode)


if __name__ == "__main__":
    sys.exit(main())
