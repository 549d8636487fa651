from aptwrap.core.apt.apt_get import (
    OperationOptions,
    autoremove,
    build_specifier,
    force_conf_flag,
    install,
    uninstall,
    update,
    upgrade,
)

__all__ = [
    "OperationOptions",
    "autoremove",
    "build_specifier",
    "force_conf_flag",
    "install",
    "uninstall",
    "update",
    "upgrade",
]
