"""Edge price API routes."""

from fastapi import APIRouter, Depends, Request

from coinprice.api.schemas import ErrorResponse, PriceResponse
from coinprice.services.price_proxy import PriceProxyService

router = APIRouter(tags=["price"])


def get_price_service(request: Request) -> PriceProxyService:
    """Dependency for routes; the service is built in the app lifespan."""
    return request.app.state.price_service


@router.get(
    "/price/{coin_id}",
    response_model=PriceResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_price(coin_id: str, service: PriceProxyService = Depends(get_price_service)):
    record = await service.get_price(coin_id)
    return PriceResponse(name=record.name, symbol=record.symbol, price=record.price)
