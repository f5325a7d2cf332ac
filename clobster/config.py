"""Configuration settings, loaded from and saved to TOML."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import platformdirs
import tomli_w

from clobster.errors import ConfigError

_APP_NAME = "clobster"
_CONFIG_FILE = "config.toml"


def config_dir() -> Path:
    """Directory that holds the configuration file."""
    return platformdirs.user_config_path(_APP_NAME, appauthor=False)


def data_dir() -> Path:
    """Directory that holds application data."""
    return platformdirs.user_data_path(_APP_NAME, appauthor=False)


def log_dir() -> Path:
    """Directory that holds log files."""
    return data_dir() / "logs"


@dataclass
class ApiConfig:
    """API endpoints and request behaviour."""

    base_url: str = "https://clob.polymarket.com"
    ws_url: str = "wss://ws-subscriptions-clob.polymarket.com/ws"
    timeout_secs: int = 30
    max_retries: int = 3
    rate_limit: int = 10
    credentials_path: Path | None = None


@dataclass
class UiConfig:
    """User interface behaviour."""

    tick_rate_ms: int = 250
    mouse_support: bool = True
    unicode_symbols: bool = True
    markets_per_page: int = 20
    orders_per_page: int = 15
    show_status_bar: bool = True
    show_help_bar: bool = True
    auto_refresh_secs: int = 30


@dataclass
class KeyBindings:
    """Key binding strings such as "q", "Ctrl+q" or "Enter"."""

    quit: str = "q"
    help: str = "?"
    up: str = "k"
    down: str = "j"
    left: str = "h"
    right: str = "l"
    select: str = "Enter"
    back: str = "Esc"
    refresh: str = "r"
    markets: str = "1"
    orders: str = "2"
    positions: str = "3"
    portfolio: str = "4"
    search: str = "/"
    place_order: str = "o"
    cancel_order: str = "x"


@dataclass
class ThemeConfig:
    """Theme colours as hex strings."""

    primary: str = "#5c6bc0"
    secondary: str = "#7986cb"
    accent: str = "#ff7043"
    success: str = "#66bb6a"
    warning: str = "#ffa726"
    error: str = "#ef5350"
    background: str = "#1e1e2e"
    foreground: str = "#cdd6f4"
    border: str = "#45475a"
    selection: str = "#585b70"


def _coerce(section: str, name: str, value: Any, default: Any) -> Any:
    where = f"{section}.{name}"
    if default is None:
        if not isinstance(value, str):
            raise ConfigError(f"{where}: expected a path string")
        return Path(value)
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{where}: expected a boolean")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{where}: expected an integer")
        if value < 0:
            raise ConfigError(f"{where}: expected a non-negative integer")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"{where}: expected a string")
    return value


def _section_from_dict(cls: type, section: str, data: Any) -> Any:
    if not isinstance(data, dict):
        raise ConfigError(f"{section}: expected a table")
    defaults = cls()
    kwargs = {
        f.name: _coerce(section, f.name, data[f.name], getattr(defaults, f.name))
        for f in fields(cls)
        if f.name in data
    }
    return cls(**kwargs)


def _section_to_dict(obj: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        result[f.name] = str(value) if isinstance(value, Path) else value
    return result


def _resolve_path(path: Path | str | None) -> Path:
    if path is not None:
        return Path(path)
    try:
        return config_dir() / _CONFIG_FILE
    except Exception:
        return Path(_CONFIG_FILE)


_SECTIONS = {
    "api": ApiConfig,
    "ui": UiConfig,
    "keybindings": KeyBindings,
    "theme": ThemeConfig,
}


@dataclass
class Config:
    """Top-level configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    keybindings: KeyBindings = field(default_factory=KeyBindings)
    theme: ThemeConfig = field(default_factory=ThemeConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a config from a mapping; missing keys take their defaults."""
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a table")
        sections = {
            name: _section_from_dict(section_cls, name, data[name])
            for name, section_cls in _SECTIONS.items()
            if name in data
        }
        return cls(**sections)

    def to_dict(self) -> dict[str, Any]:
        """Mapping suitable for TOML serialisation."""
        return {name: _section_to_dict(getattr(self, name)) for name in _SECTIONS}

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load from ``path`` (or the default location); defaults if it is absent."""
        config_path = _resolve_path(path)
        if not config_path.exists():
            return cls()
        content = config_path.read_text(encoding="utf-8")
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(str(exc)) from exc
        return cls.from_dict(data)

    @classmethod
    def load_or_default(cls) -> Config:
        """Load from the default location, or return defaults."""
        return cls.load(None)

    def save(self, path: Path | str | None = None) -> None:
        """Write the configuration as TOML, creating parent directories."""
        config_path = _resolve_path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(tomli_w.dumps(self.to_dict()), encoding="utf-8")