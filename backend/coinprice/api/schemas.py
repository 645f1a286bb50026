"""Pydantic schemas for API request/response."""

from pydantic import BaseModel


class PriceResponse(BaseModel):
    name: str
    symbol: str
    price: float


class ErrorResponse(BaseModel):
    error: str


class TickerData(BaseModel):
    name: str
    symbol: str
    price: str
    error: bool
    error_message: str | None = None


class ActionResponse(BaseModel):
    success: bool
    data: TickerData | str


class TickerContext(BaseModel):
    cryptoPriceTicker: TickerData
    coinId: str
    ajaxUrl: str
