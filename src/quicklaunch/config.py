"""Configuration loading, defaults and write-back.

The config file is ``<app dir>/config.json``. Values in the file are
merged over per-platform defaults and the merged result is written back,
so a freshly created file lists every option.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

import typer

logger = logging.getLogger(__name__)

APP_NAME = "quicklaunch"
CONFIG_DIR_ENV = "QUICKLAUNCH_CONFIG_DIR"
CONFIG_FILENAME = "config.json"
SCRIPTS_DIRNAME = "scripts"


class ConfigError(Exception):
    """The config file exists but cannot be read or parsed."""


def _default_shortcut_paths() -> list[str]:
    if sys.platform == "win32":
        return [
            "${AppData}\\Microsoft\\Windows\\Start Menu",
            "${ProgramData}\\Microsoft\\Windows\\Start Menu",
        ]
    if sys.platform == "darwin":
        return ["/Applications", "/System/Applications", "${HOME}/Applications"]
    return [
        "/usr/share/applications",
        "/usr/local/share/applications",
        "${HOME}/.local/share/applications",
    ]


def _default_ignore_paths() -> list[str]:
    if sys.platform == "win32":
        return ["${AppData}\\Microsoft\\Windows\\Start Menu\\Programs\\Startup"]
    return []


@dataclass
class WindowConfig:
    """Overlay geometry hints."""

    width: int = 640
    height: int = 320
    x: int = 640
    y: int = 380


@dataclass
class SearchConfig:
    """Where shortcuts come from, and query aliases."""

    shortcut_paths: list[str] = field(default_factory=_default_shortcut_paths)
    ignore_paths: list[str] = field(default_factory=_default_ignore_paths)
    aliases: dict[str, str] = field(default_factory=dict)

    def expanded_shortcut_paths(self) -> list[Path]:
        """Shortcut paths with ``${VAR}`` references resolved."""
        return [expand_path(p) for p in self.shortcut_paths]

    def expanded_ignore_paths(self) -> list[Path]:
        """Ignore paths with ``${VAR}`` references resolved."""
        return [expand_path(p) for p in self.ignore_paths]


@dataclass
class GeneralConfig:
    """Hotkey combo and polling cadence."""

    hotkey: list[str] = field(default_factory=lambda: ["ctrl", "alt", "backspace"])
    poll_interval: float = 0.05


@dataclass
class StyleConfig:
    """Optional colour and font overrides (CSS colour strings)."""

    font: str | None = None
    bg_color: str | None = None
    input_bg_color: str | None = None
    hovered_bg_color: str | None = None
    selected_bg_color: str | None = None
    text_color: str | None = None
    stroke_color: str | None = None


@dataclass
class LauncherConfig:
    """Complete launcher configuration."""

    window: WindowConfig = field(default_factory=WindowConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    general: GeneralConfig = field(default_factory=GeneralConfig)
    style: StyleConfig = field(default_factory=StyleConfig)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


_SECTIONS = {
    "window": WindowConfig,
    "search": SearchConfig,
    "general": GeneralConfig,
    "style": StyleConfig,
}


def expand_path(path: str) -> Path:
    """Resolve ``${VAR}`` / ``$VAR`` and ``~`` in a configured path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def get_config_dir() -> Path:
    """Config directory: ``$QUICKLAUNCH_CONFIG_DIR`` or the platform app dir."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path(typer.get_app_dir(APP_NAME))


def get_scripts_dir(config_dir: Path | None = None) -> Path:
    """Directory of user scripts, created if absent."""
    scripts_dir = (config_dir or get_config_dir()) / SCRIPTS_DIRNAME
    scripts_dir.mkdir(parents=True, exist_ok=True)
    return scripts_dir


def list_scripts(config_dir: Path | None = None) -> list[Path]:
    """User script files in registration order (sorted by filename)."""
    return sorted(get_scripts_dir(config_dir).glob("*.py"))


def config_from_dict(data: dict) -> LauncherConfig:
    """Build a LauncherConfig from parsed JSON, defaulting anything missing.

    Unknown sections and keys are ignored.
    """
    kwargs: dict[str, object] = {}
    for section, cls in _SECTIONS.items():
        raw = data.get(section)
        if not isinstance(raw, dict):
            if raw is not None:
                logger.warning("config section %r is not an object; using defaults", section)
            continue
        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            logger.warning("ignoring unknown %s keys: %s", section, sorted(unknown))
        kwargs[section] = cls(**{k: v for k, v in raw.items() if k in known})
    return LauncherConfig(**kwargs)


def load_config(config_dir: Path | None = None) -> LauncherConfig:
    """Load config.json (creating it if absent) and write the merged result back.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    config_dir = config_dir or get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / CONFIG_FILENAME

    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                text = f.read()
            if text.strip():
                data = json.loads(text)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"couldn't load config {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config {config_path} must contain a JSON object")

    config = config_from_dict(data)

    try:
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
    except OSError as exc:
        logger.warning("couldn't save config %s: %s", config_path, exc)

    return config
