"""
Shared test fixtures and configuration.
"""

import logging
import stat
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from aptwrap.core import config as config_module
from aptwrap.core import log as log_module
from aptwrap.core import paths
from aptwrap.core.config import Configuration
from aptwrap.core.paths import APT_GET, DPKG, PathResolver


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch) -> Path:
    """Point the global configuration and log file into tmp_path."""
    config_path = tmp_path / "config" / "aptwrap.toml"
    config_module.set_config_path(config_path)
    monkeypatch.setattr(log_module, "LOG_FILE", tmp_path / "cache" / "aptwrap.log")
    monkeypatch.setattr(paths.default_resolver, "_aliases", {})
    yield config_path
    config_module.set_config_path(None)
    logger = logging.getLogger("aptwrap")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def config(isolated_config: Path) -> Configuration:
    """A configuration that never escalates privileges."""
    cfg = Configuration(isolated_config)
    cfg.privilege_backend = "none"
    return cfg


@pytest.fixture
def make_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory writing executable /bin/sh scripts into tmp_path/bin."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text("#!/bin/sh\n" + textwrap.dedent(body))
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def args_file(tmp_path: Path) -> Path:
    """File the fake apt-get writes its arguments to, one per line."""
    return tmp_path / "apt-get.args"


@pytest.fixture
def fake_apt_get(make_tool, args_file: Path) -> Path:
    """apt-get double that records its arguments and succeeds."""
    return make_tool(
        "apt-get",
        f"""\
        printf '%s\\n' "$@" > '{args_file}'
        echo "Reading package lists..."
        echo "W: simulated warning" >&2
        exit 0
        """,
    )


@pytest.fixture
def fake_dpkg(make_tool, tmp_path: Path) -> Path:
    """dpkg double that reports redis-server 1.0 and records the queried name."""
    return make_tool(
        "dpkg",
        f"""\
        printf '%s' "$2" > '{tmp_path / "dpkg.name"}'
        printf 'Package: redis-server\\nVersion: 1.0\\n'
        """,
    )


@pytest.fixture
def resolver(fake_apt_get: Path, fake_dpkg: Path) -> PathResolver:
    """Isolated alias table pointing at the tool doubles."""
    return PathResolver({APT_GET: str(fake_apt_get), DPKG: str(fake_dpkg)})
