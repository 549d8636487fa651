"""Privilege escalation utilities."""

import logging
import os
import shutil
from typing import List

from aptwrap.core.config import Configuration, get_config

log = logging.getLogger(__name__)

# -------------------------
# Privilege backends
# -------------------------

BACKENDS: dict[str, str] = {
    "sudo": "sudo",
    "doas": "doas",
    "pkexec": "pkexec",
}

NONE = "none"
AUTO = "auto"


def detect_backend() -> str | None:
    for backend, cmd in BACKENDS.items():
        if shutil.which(cmd):
            log.debug("Detected backend: %s", backend)
            return backend
    log.warning("No privilege backend detected")
    return None


def get_configured_backend(config: Configuration | None = None) -> str | None:
    """
    Resolve the privilege backend named in the configuration.

    Returns a key of BACKENDS, or None when commands should run unprefixed.
    """
    if config is None:
        config = get_config()

    backend_raw = config.privilege_backend
    if not backend_raw:
        log.debug("No backend configured, auto-detecting")
        return detect_backend()

    return normalize_backend(backend_raw)


def normalize_backend(backend_raw: str) -> str | None:
    backend = backend_raw.strip().lower()
    log.debug("Requested backend: %s", backend)

    if backend == AUTO:
        return detect_backend()

    if backend == NONE:
        return None

    if backend in BACKENDS:
        return backend

    log.warning("Invalid backend '%s', falling back to auto", backend)
    return detect_backend()


def is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def privilege_prefix(
    backend: str | None,
    non_interactive: bool = False,
) -> List[str]:
    """
    Build the argv prefix that runs a command with elevated privileges.

    Args:
        backend: A key of BACKENDS, or None for no escalation
        non_interactive: Ask the backend to fail rather than prompt

    Returns:
        Prefix to put in front of the command, empty when running as root
    """
    if backend is None or backend not in BACKENDS:
        return []

    if is_root():
        log.debug("Already root, skipping %s", backend)
        return []

    prefix = [BACKENDS[backend]]
    if non_interactive and backend in ("sudo", "doas"):
        prefix.append("-n")
    return prefix


def elevate(
    cmd: List[str],
    backend: str | None = None,
    config: Configuration | None = None,
) -> List[str]:
    """
    Prefix cmd with the privilege escalation command.

    Args:
        cmd: Command to run
        backend: Backend name ("auto", "sudo", "doas", "pkexec", "none").
            None uses the configured backend.
        config: Configuration to read defaults from. When omitted it is
            only loaded if backend is None; otherwise non_interactive
            defaults to True.

    Returns:
        The full argv
    """
    if backend is None:
        if config is None:
            config = get_config()
        resolved = get_configured_backend(config)
    else:
        resolved = normalize_backend(backend)

    non_interactive = config.non_interactive if config is not None else True
    full_cmd = privilege_prefix(resolved, non_interactive) + list(cmd)
    log.debug("Backend=%s", resolved)
    return full_cmd
