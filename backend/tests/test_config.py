"""Tests for settings loading."""

import pytest

from coinprice.config import load_edge_settings, load_ticker_settings
from coinprice.errors import ConfigError

PROVIDER_URL = "https://pro-api.coingecko.com/api/v3/coins/"


@pytest.fixture
def edge_env(monkeypatch):
    defaults = {
        "COINGECKO_API_URL": PROVIDER_URL,
        "COINGECKO_API_KEY": "key",
        "UPSTREAM_TIMEOUT": "10",
        "PRICE_CACHE_TTL": "60",
        "PORT": "3000",
    }

    def apply(**overrides):
        for name, value in {**defaults, **overrides}.items():
            monkeypatch.setattr(f"coinprice.config.{name}", value)

    return apply


@pytest.fixture
def ticker_env(monkeypatch):
    monkeypatch.setenv("TICKER_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setattr("coinprice.config.TICKER_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    def apply(**overrides):
        for name, value in overrides.items():
            monkeypatch.setattr(f"coinprice.config.{name}", value)

    return apply


def test_edge_settings(edge_env):
    edge_env()
    settings = load_edge_settings()
    assert settings.api_url == PROVIDER_URL
    assert settings.api_key == "key"
    assert settings.timeout == 10
    assert settings.cache_ttl == 60
    assert settings.port == 3000


@pytest.mark.parametrize("missing", ["COINGECKO_API_URL", "COINGECKO_API_KEY"])
@pytest.mark.parametrize("value", [None, ""])
def test_edge_requires_provider_settings(edge_env, missing, value):
    edge_env(**{missing: value})
    with pytest.raises(ConfigError, match=missing):
        load_edge_settings()


@pytest.mark.parametrize("name", ["UPSTREAM_TIMEOUT", "PRICE_CACHE_TTL"])
@pytest.mark.parametrize("value", ["0", "-5", "soon"])
def test_edge_rejects_bad_numbers(edge_env, name, value):
    edge_env(**{name: value})
    with pytest.raises(ConfigError, match=name):
        load_edge_settings()


def test_ticker_settings(ticker_env):
    ticker_env(TICKER_COIN_ID="ethereum", TICKER_REFRESH_INTERVAL="15", TICKER_CACHE_TTL="120")
    settings = load_ticker_settings()
    assert settings.coin_id == "ethereum"
    assert settings.refresh_interval == 15
    assert settings.cache_ttl == 120
    assert settings.database_url == "sqlite+aiosqlite:///:memory:"


def test_ticker_rejects_blank_coin(ticker_env):
    ticker_env(TICKER_COIN_ID="  ")
    with pytest.raises(ConfigError):
        load_ticker_settings()
