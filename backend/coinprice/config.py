"""Application configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from coinprice.errors import ConfigError

BASE_DIR = Path(__file__).resolve().parent.parent
TICKER_DB_PATH = BASE_DIR / "data" / "ticker.db"

# Edge service (upstream pricing provider proxy)
COINGECKO_API_URL = os.getenv("COINGECKO_API_URL")
COINGECKO_API_KEY = os.getenv("COINGECKO_API_KEY")
UPSTREAM_TIMEOUT = os.getenv("UPSTREAM_TIMEOUT", "10")  # seconds
PRICE_CACHE_TTL = os.getenv("PRICE_CACHE_TTL", "60")  # seconds
PORT = os.getenv("PORT", "3000")

# Ticker service (consumer tier)
EDGE_BASE_URL = os.getenv("EDGE_BASE_URL", "http://localhost:3000")
EDGE_TIMEOUT = os.getenv("EDGE_TIMEOUT", "10")  # seconds
TICKER_COIN_ID = os.getenv("TICKER_COIN_ID", "bitcoin")
TICKER_CACHE_TTL = os.getenv("TICKER_CACHE_TTL", "60")  # seconds
TICKER_REFRESH_INTERVAL = os.getenv("TICKER_REFRESH_INTERVAL", "60")  # seconds
TICKER_DATABASE_URL = os.getenv("TICKER_DATABASE_URL") or f"sqlite+aiosqlite:///{TICKER_DB_PATH}"
TICKER_PORT = os.getenv("TICKER_PORT", "8080")


def _positive(name: str, raw: str | float | int) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class EdgeSettings:
    api_url: str
    api_key: str
    timeout: float
    cache_ttl: float
    port: int


@dataclass(frozen=True)
class TickerSettings:
    edge_base_url: str
    edge_timeout: float
    coin_id: str
    cache_ttl: float
    refresh_interval: float
    database_url: str


def load_edge_settings() -> EdgeSettings:
    """Build the edge service settings, failing fast on missing credentials."""
    if not COINGECKO_API_KEY:
        raise ConfigError("COINGECKO_API_KEY is not defined.")
    if not COINGECKO_API_URL:
        raise ConfigError("COINGECKO_API_URL is not defined.")
    return EdgeSettings(
        api_url=COINGECKO_API_URL,
        api_key=COINGECKO_API_KEY,
        timeout=_positive("UPSTREAM_TIMEOUT", UPSTREAM_TIMEOUT),
        cache_ttl=_positive("PRICE_CACHE_TTL", PRICE_CACHE_TTL),
        port=int(_positive("PORT", PORT)),
    )


def load_ticker_settings() -> TickerSettings:
    if not TICKER_COIN_ID.strip():
        raise ConfigError("TICKER_COIN_ID must not be empty.")
    # Only needed for local SQLite, skip if TICKER_DATABASE_URL is overridden
    if not os.getenv("TICKER_DATABASE_URL"):
        TICKER_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    return TickerSettings(
        edge_base_url=EDGE_BASE_URL,
        edge_timeout=_positive("EDGE_TIMEOUT", EDGE_TIMEOUT),
        coin_id=TICKER_COIN_ID,
        cache_ttl=_positive("TICKER_CACHE_TTL", TICKER_CACHE_TTL),
        refresh_interval=_positive("TICKER_REFRESH_INTERVAL", TICKER_REFRESH_INTERVAL),
        database_url=TICKER_DATABASE_URL,
    )
