# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and filesystem resolution for nadm.

Handles:
- Data root resolution (NADM_DATA_HOME, ~/.local/share)
- Package-relative paths (launcher module, companion core.sh)
- Packaged YAML defaults loading (nadm_cli.defaults/system.yaml)
- ANSI coloring constants for console tags
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

try:
    # Py3.9+
    from importlib import resources as importlib_resources
except Exception:  # pragma: no cover
    import importlib_resources  # type: ignore


# -----------------------
# Console constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "cyan": "\033[38;5;69;1m",
    "magenta": "\033[38;5;126;1m",
    "yellow": "\033[38;5;226;1m",
    "reset": "\033[0m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "red": "\033[31m",
}

# Fallback tag colors when system.yaml does not list a tag
TAG_COLORS: dict[str, str] = {
    "BUILD": "green",
    "ERR": "red",
    "CRASH": "magenta",
}

# Set to "1" to print tags without ANSI color
PLAIN_OUTPUT_ENV = "NADM_PLAIN_OUTPUT"


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Thin wrapper over the parsed system.yaml mapping."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def launcher(self) -> dict[str, Any]:
        section = self._config.get("launcher", {})
        return section if isinstance(section, dict) else {}

    @property
    def embed(self) -> dict[str, Any]:
        section = self._config.get("embed", {})
        return section if isinstance(section, dict) else {}

    @property
    def ui(self) -> dict[str, Any]:
        ui_cfg = self._config.get("ui", {})
        return ui_cfg if isinstance(ui_cfg, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("launcher.shell", "bash") -> "bash"
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


@dataclass(frozen=True)
class LauncherSettings:
    """Resolved launcher parameters."""

    shell: str = "bash"
    entry_point: str = "main"
    args_env: str = "NADM_ARGS"
    script_name: str = "core.sh"
    placeholder: str = "'{{CORE_SH}}'"

    @property
    def fallback_path(self) -> Path:
        return package_dir() / self.script_name


def launcher_settings(cfg: YAMLConfig | None = None) -> LauncherSettings:
    """Build LauncherSettings from config, keeping defaults for missing keys."""
    if cfg is None:
        cfg = load_system_config()
    defaults = LauncherSettings()
    launcher = cfg.launcher
    embed = cfg.embed
    return LauncherSettings(
        shell=str(launcher.get("shell", defaults.shell)),
        entry_point=str(launcher.get("entry_point", defaults.entry_point)),
        args_env=str(launcher.get("args_env", defaults.args_env)),
        script_name=str(launcher.get("script_name", defaults.script_name)),
        placeholder=str(embed.get("placeholder", defaults.placeholder)),
    )


# -----------------------
# Data root + package paths
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for nadm.

    Resolution order:
    1. NADM_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    nadm_data_home = os.getenv("NADM_DATA_HOME")
    if nadm_data_home:
        root = Path(nadm_data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def crash_log_path(data_root: Path) -> Path:
    """<data_root>/nadm/logs/crash.log"""
    return data_root / "nadm" / "logs" / "crash.log"


def package_dir() -> Path:
    """Directory holding the launcher module and core.sh."""
    return Path(__file__).resolve().parent


def launcher_module_path() -> Path:
    """Default embedding target: the launcher module itself."""
    return package_dir() / "launcher.py"


def plain_output() -> bool:
    return os.environ.get(PLAIN_OUTPUT_ENV) == "1"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to the packaged defaults directory."""
    return Path(
        importlib_resources.files("nadm_cli.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from nadm_cli/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))
