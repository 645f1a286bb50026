"""Ticker widget routes: render context and the price action."""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse

from coinprice.api.schemas import ActionResponse, TickerContext, TickerData
from coinprice.errors import PriceLookupError
from coinprice.services.relay import ConsumerRelay

logger = logging.getLogger(__name__)

ACTION_NAME = "get_crypto_price"
ACTION_PATH = "/admin-ajax.php"

router = APIRouter(tags=["ticker"])


def get_relay(request: Request) -> ConsumerRelay:
    """Dependency for routes; the relay is built in the app lifespan."""
    return request.app.state.relay


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@router.get("/ticker", response_model=TickerContext, response_model_exclude_none=True)
async def render_ticker(coin_id: str | None = None, relay: ConsumerRelay = Depends(get_relay)):
    """Initial widget state, rendered through the passive cached path."""
    coin_id = coin_id or relay.coin_id
    record = await relay.display(coin_id)
    return TickerContext(
        cryptoPriceTicker=TickerData(**record.display_data()),
        coinId=coin_id,
        ajaxUrl=f"{ACTION_PATH}?action={ACTION_NAME}",
    )


@router.post(ACTION_PATH, response_model=ActionResponse, response_model_exclude_none=True)
async def price_action(
    action: str | None = Form(None),
    coinId: str | None = Form(None),
    force: str | None = Form(None),
    relay: ConsumerRelay = Depends(get_relay),
):
    """Timer ticks post without ``force``; the Update button posts ``force=1``."""
    if action != ACTION_NAME:
        return JSONResponse(status_code=400, content={"success": False, "data": "0"})

    coin_id = (coinId or "").strip()
    if not coin_id:
        return ActionResponse(success=False, data="Coin ID is missing.")

    try:
        if _truthy(force):
            record = await relay.force_refresh(coin_id)
        else:
            record = await relay.get_price(coin_id)
    except PriceLookupError as e:
        logger.warning(f"Price action failed for {coin_id}: {e}")
        return ActionResponse(success=False, data=str(e))
    return ActionResponse(success=True, data=TickerData(**record.display_data()))
