"""Configuration management for aptwrap using TOML."""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import tomlkit
from tomlkit import TOMLDocument
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Table

log = logging.getLogger(__name__)


class Configuration:
    """Manages aptwrap configuration with TOML files."""

    def __init__(self, config_path: Path | None = None, create: bool = False):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. Defaults to ~/.config/aptwrap/aptwrap.toml
            create: Write the file (and fill in missing options) when needed.
                Without it the file is only read, and a missing or unreadable
                file means the built-in defaults.
        """
        if config_path is None:
            config_path = Path.home() / ".config" / "aptwrap" / "aptwrap.toml"

        self.config_path = Path(config_path)
        self.create = create
        self._config: Dict[str, Any] = {}
        self._toml_doc: TOMLDocument | None = None
        self._load_config()

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get the default configuration."""
        return {
            "global": {
                "privilege_backend": "sudo",
                "non_interactive": True,
                "log_level": "INFO",
            },
            "paths": {
                "dpkg": "dpkg",
                "apt-get": "apt-get",
            },
            "install": {
                "confnew": False,
            },
        }

    def _backup_config(self) -> None:
        """Backup current config file with .old suffix and timestamp."""
        if not self.config_path.exists():
            return

        timestamp: str = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path: Path = self.config_path.parent / f"{self.config_path.name}.{timestamp}.old"
        shutil.copy2(self.config_path, backup_path)

    def _migrate_config(self) -> None:
        """Backup broken config and create new default."""
        self._backup_config()
        self._create_default_config()

    def _validate_config_structure(self) -> None:
        """
        Add missing sections and options from defaults.

        Only writes the file back when something was added and create is set.
        """
        default_config = self._get_default_config()
        changed = False

        for section, options in default_config.items():
            if section not in self._config:
                self._config[section] = options.copy()
                if self._toml_doc is not None:
                    self._toml_doc[section] = options.copy()
                changed = True
                continue

            for option, default_value in options.items():
                if option not in self._config[section]:
                    self._config[section][option] = default_value
                    if self._toml_doc is not None:
                        self._toml_doc[section][option] = default_value  # type: ignore
                    changed = True

        if changed and self.create:
            try:
                self._save_config()
            except OSError as e:
                log.warning("Could not update %s: %s", self.config_path, e)

    @staticmethod
    def _default_document() -> TOMLDocument:
        """Build the default configuration document with comments."""
        doc: TOMLDocument = tomlkit.document()

        doc.add(tomlkit.comment("aptwrap configuration file"))
        doc.add(tomlkit.comment("This file was automatically generated"))
        doc.add(tomlkit.nl())

        global_section: Table = tomlkit.table()
        global_section.add(tomlkit.comment("Privilege escalation backend for apt-get commands"))
        global_section.add(tomlkit.comment("Options: auto, sudo, doas, pkexec, none"))
        global_section.add("privilege_backend", "sudo")
        global_section.add(tomlkit.nl())
        global_section.add(tomlkit.comment("Fail instead of prompting for a password (sudo -n)"))
        global_section.add("non_interactive", True)
        global_section.add(tomlkit.nl())
        global_section.add(tomlkit.comment("Log level for ~/.cache/aptwrap/aptwrap.log"))
        global_section.add("log_level", "INFO")
        doc.add("global", global_section)

        paths_section: Table = tomlkit.table()
        paths_section.add(tomlkit.comment("Executables used for each tool alias"))
        paths_section.add(tomlkit.comment("Point these at wrappers or test doubles if needed"))
        paths_section.add("dpkg", "dpkg")
        paths_section.add("apt-get", "apt-get")
        doc.add("paths", paths_section)

        install_section: Table = tomlkit.table()
        install_section.add(tomlkit.comment("Overwrite modified configuration files on install and upgrade"))
        install_section.add(tomlkit.comment("false keeps the local version (--force-confold)"))
        install_section.add("confnew", False)
        doc.add("install", install_section)

        return doc

    def _use_defaults(self) -> None:
        self._toml_doc = self._default_document()
        self._config = self._toml_doc.unwrap()

    def _create_default_config(self) -> None:
        """Create default configuration file with comments."""
        self._use_defaults()
        self._save_config()

    def _load_config(self) -> None:
        """Load configuration from file, falling back to defaults."""
        try:
            if not self.config_path.exists():
                if self.create:
                    self._create_default_config()
                else:
                    self._use_defaults()
                return

            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    self._toml_doc = tomlkit.parse(f.read())
                    self._config = self._toml_doc.unwrap()

                self._validate_config_structure()

            except (TOMLKitError, AttributeError, TypeError):
                if not self.create:
                    log.warning("Ignoring invalid config %s", self.config_path)
                    self._use_defaults()
                    return
                log.warning("Replacing invalid config %s", self.config_path)
                self._migrate_config()

        except OSError as e:
            log.warning("Using default configuration, %s is unusable: %s", self.config_path, e)
            self._use_defaults()

    def _save_config(self) -> None:
        """Save current configuration to file preserving comments."""
        if self._toml_doc is None:
            self._toml_doc = tomlkit.document()
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(tomlkit.dumps(self._toml_doc))

    def _get_nested_value(self, keys: List[str], default: Any = None) -> Any:
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    def _set_nested_value(self, keys: List[str], value: Any) -> None:
        current = self._config
        for key in keys[:-1]:
            if key not in current or not isinstance(current[key], dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = value

    # Global settings
    @property
    def privilege_backend(self) -> str:
        return self._get_nested_value(["global", "privilege_backend"], "sudo")

    @privilege_backend.setter
    def privilege_backend(self, value: str) -> None:
        self._set_nested_value(["global", "privilege_backend"], value)
        if self._toml_doc:
            self._toml_doc["global"]["privilege_backend"] = value  # type: ignore
        self._save_config()

    @property
    def non_interactive(self) -> bool:
        return self._get_nested_value(["global", "non_interactive"], True)

    @property
    def log_level(self) -> str:
        return self._get_nested_value(["global", "log_level"], "INFO")

    @property
    def paths(self) -> Dict[str, str]:
        return dict(self._get_nested_value(["paths"], {}))

    @property
    def confnew(self) -> bool:
        return self._get_nested_value(["install", "confnew"], False)

    def get(self, key: str, default: Any = None) -> Any:
        keys: list[str] = key.split(".")
        return self._get_nested_value(keys, default)


# Global configuration instance
_config_instance: Configuration | None = None
_config_path: Path | None = None


def set_config_path(config_path: Path | None) -> None:
    """Select the file used by get_config() and drop any loaded instance."""
    global _config_instance, _config_path
    _config_path = config_path
    _config_instance = None


def get_config(config_path: Path | None = None, create: bool = False) -> Configuration:
    global _config_instance
    if _config_instance is None:
        _config_instance = Configuration(_config_path or config_path, create=create)
    return _config_instance
