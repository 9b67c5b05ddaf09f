# tests/test_config.py
from __future__ import annotations

from pathlib import Path

import pytest

from gw2_market.config import (
    BASE_ENV_VAR,
    TOKEN_ENV_VAR,
    ConfigurationError,
    DumpConfig,
    PriceConfig,
    load_api_config,
)


def test_reads_settings_from_mapping():
    cfg = load_api_config(environ={BASE_ENV_VAR: "https://api.guildwars2.com/v2/", TOKEN_ENV_VAR: " abc "})
    assert cfg.base_url == "https://api.guildwars2.com/v2"
    assert cfg.token == "abc"
    assert "abc" not in repr(cfg)


@pytest.mark.parametrize(
    "environ, needle",
    [
        ({}, BASE_ENV_VAR),
        ({BASE_ENV_VAR: "https://x"}, TOKEN_ENV_VAR),
        ({BASE_ENV_VAR: "   ", TOKEN_ENV_VAR: "t"}, BASE_ENV_VAR),
        ({BASE_ENV_VAR: "api.guildwars2.com", TOKEN_ENV_VAR: "t"}, "absolute"),
        ({BASE_ENV_VAR: "ftp://host", TOKEN_ENV_VAR: "t"}, "absolute"),
    ],
)
def test_missing_or_invalid_settings_fail_fast(environ, needle):
    with pytest.raises(ConfigurationError, match=needle):
        load_api_config(environ=environ)


def test_reads_dotenv_file_without_overriding_environment(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"{BASE_ENV_VAR}=https://from-file.example/v2\n{TOKEN_ENV_VAR}=file-token\n",
        encoding="utf-8",
    )
    monkeypatch.delenv(BASE_ENV_VAR, raising=False)
    monkeypatch.setenv(TOKEN_ENV_VAR, "env-token")

    cfg = load_api_config(env_file)

    assert cfg.base_url == "https://from-file.example/v2"
    assert cfg.token == "env-token"
    monkeypatch.delenv(BASE_ENV_VAR, raising=False)


def test_missing_env_file_is_a_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_api_config(tmp_path / "nope.env")


def test_dump_config_defaults_and_paths(tmp_path):
    cfg = DumpConfig(output_dir=tmp_path)
    assert cfg.chunk_size == 200
    assert cfg.max_workers == 16
    assert cfg.poll_interval_s == pytest.approx(0.01)
    assert cfg.items_path == tmp_path / "items.json"
    assert cfg.items_map_path == Path(tmp_path) / "items.map.json"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"chunk_size": 0},
        {"chunk_size": 201},
        {"max_workers": 0},
        {"poll_interval_s": 0},
        {"backoff_s": -1},
        {"request_timeout_s": 0},
        {"request_timeout_s": -5.0},
        {"join_timeout_s": 0},
    ],
)
def test_dump_config_validation(kwargs):
    with pytest.raises(ValueError):
        DumpConfig(**kwargs)


def test_price_config_validation():
    with pytest.raises(ValueError):
        PriceConfig(sort_key="name")
    with pytest.raises(ValueError):
        PriceConfig(set_multipliers=(1, 0))
    with pytest.raises(ValueError):
        PriceConfig(request_timeout_s=0)
