"""Edge service FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coinprice.api.price import router as price_router
from coinprice.config import load_edge_settings
from coinprice.errors import CoinNotFoundError, PriceUnavailableError
from coinprice.services.cache import CacheService
from coinprice.services.price_proxy import PriceProxyService
from coinprice.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises ConfigError before serving anything if credentials are missing
    settings = load_edge_settings()
    upstream = UpstreamClient(
        settings.api_url,
        settings.api_key,
        timeout=settings.timeout,
        http=httpx.AsyncClient(),
    )
    cache = CacheService(default_ttl=settings.cache_ttl)
    app.state.price_service = PriceProxyService(upstream, cache, ttl=settings.cache_ttl)
    logger.info(f"Price proxy ready, cache TTL {settings.cache_ttl}s")
    yield
    await upstream.aclose()


app = FastAPI(title="Coin Price Edge", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(price_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}


@app.exception_handler(CoinNotFoundError)
async def coin_not_found_handler(request: Request, exc: CoinNotFoundError):
    return JSONResponse(status_code=404, content={"error": f"Crypto id '{exc.coin_id}' not found."})


@app.exception_handler(PriceUnavailableError)
async def price_unavailable_handler(request: Request, exc: PriceUnavailableError):
    return JSONResponse(status_code=500, content={"error": "Failed to fetch data from the provider."})


def _original_url(request: Request) -> str:
    """Path and query as the client sent them, without percent-decoding."""
    raw_path = request.scope.get("raw_path")
    # Some servers include the query string in raw_path
    path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown routes and unsupported methods on known paths are both "not found"
    if exc.status_code in (404, 405):
        target = _original_url(request)
        return JSONResponse(status_code=404, content={"error": f"Not Found: {request.method} {target}"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


def run():
    settings = load_edge_settings()
    logger.info(f"Crypto Price API server running on http://localhost:{settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
