"""Ticker (consumer) FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI

from coinprice.api.ticker import router as ticker_router
from coinprice.config import TICKER_PORT, load_ticker_settings
from coinprice.models.database import init_db, make_engine, make_session_factory
from coinprice.services.relay import ConsumerRelay, EdgeClient
from coinprice.services.transient_store import TransientStore
from coinprice.tasks.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_ticker_settings()
    engine = make_engine(settings.database_url)
    await init_db(engine)
    store = TransientStore(make_session_factory(engine), default_ttl=settings.cache_ttl)
    edge = EdgeClient(settings.edge_base_url, timeout=settings.edge_timeout, http=httpx.AsyncClient())
    relay = ConsumerRelay(edge, store, coin_id=settings.coin_id, ttl=settings.cache_ttl)
    app.state.relay = relay
    start_scheduler(relay, settings.refresh_interval)
    yield
    stop_scheduler()
    await edge.aclose()
    await engine.dispose()


app = FastAPI(title="Coin Price Ticker", version="0.1.0", lifespan=lifespan)

app.include_router(ticker_router)


def run():
    uvicorn.run(app, host="0.0.0.0", port=int(TICKER_PORT))


if __name__ == "__main__":
    run()
