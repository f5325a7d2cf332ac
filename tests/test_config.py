from pathlib import Path

import pytest

from clobster.config import (
    ApiConfig,
    Config,
    KeyBindings,
    ThemeConfig,
    UiConfig,
    config_dir,
    data_dir,
    log_dir,
)
from clobster.errors import ConfigError


def test_api_defaults():
    api = ApiConfig()
    assert api.base_url == "https://clob.polymarket.com"
    assert api.ws_url == "wss://ws-subscriptions-clob.polymarket.com/ws"
    assert api.timeout_secs == 30
    assert api.max_retries == 3
    assert api.rate_limit == 10
    assert api.credentials_path is None


def test_ui_and_keybinding_defaults():
    ui = UiConfig()
    assert ui.tick_rate_ms == 250
    assert ui.markets_per_page == 20
    assert ui.orders_per_page == 15
    keys = KeyBindings()
    assert keys.quit == "q"
    assert keys.select == "Enter"
    assert keys.cancel_order == "x"
    assert ThemeConfig().primary == "#5c6bc0"


def test_save_and_load_round_trip(tmp_path):
    config = Config()
    config.api.timeout_secs = 60
    config.api.credentials_path = tmp_path / "creds.json"
    config.ui.mouse_support = False
    config.keybindings.quit = "Ctrl+q"
    target = tmp_path / "nested" / "config.toml"
    config.save(target)
    assert target.exists()
    assert Config.load(target) == config


def test_load_missing_file_gives_defaults(tmp_path):
    assert Config.load(tmp_path / "absent.toml") == Config()


def test_partial_file_fills_defaults(tmp_path):
    target = tmp_path / "config.toml"
    target.write_text('[ui]\ntick_rate_ms = 100\n[theme]\nprimary = "#000000"\n')
    loaded = Config.load(target)
    assert loaded.ui.tick_rate_ms == 100
    assert loaded.ui.show_help_bar is True
    assert loaded.theme.primary == "#000000"
    assert loaded.api == ApiConfig()


def test_invalid_toml_raises(tmp_path):
    target = tmp_path / "config.toml"
    target.write_text("api = [\n")
    with pytest.raises(ConfigError):
        Config.load(target)


@pytest.mark.parametrize(
    "data",
    [
        {"api": {"timeout_secs": "thirty"}},
        {"api": {"timeout_secs": -1}},
        {"ui": {"mouse_support": 1}},
        {"keybindings": {"quit": 5}},
        {"theme": "dark"},
    ],
)
def test_bad_values_raise(data):
    with pytest.raises(ConfigError):
        Config.from_dict(data)


def test_unknown_keys_are_ignored():
    loaded = Config.from_dict({"extra": 1, "api": {"unknown": True}})
    assert loaded == Config()


def test_to_dict_omits_missing_path():
    as_dict = Config().to_dict()
    assert "credentials_path" not in as_dict["api"]
    assert Config.from_dict(as_dict) == Config()


def test_load_or_default_matches_load(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert Config.load_or_default() == Config.load(None)


def test_directories():
    assert log_dir() == data_dir() / "logs"
    assert "clobster" in str(config_dir())
    assert isinstance(config_dir(), Path) and config_dir().is_absolute()