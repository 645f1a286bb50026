"""Price records served by the edge service and shown by the ticker."""

import math
from typing import Any

from pydantic import BaseModel, Field

from coinprice.errors import InvalidPayloadError

ERROR_PRICE = "N/A"
ERROR_SYMBOL = "ERR"


class PriceRecord(BaseModel):
    """A validated quote for one coin, priced in USD."""

    name: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    price: float = Field(gt=0, allow_inf_nan=False)

    @classmethod
    def from_provider(cls, payload: Any) -> "PriceRecord":
        """Build a record from a provider coin payload.

        Expects {name, symbol, market_data: {current_price: {usd}}}.
        Raises InvalidPayloadError for anything else.
        """
        if not isinstance(payload, dict):
            raise InvalidPayloadError("Invalid data from provider: not an object")
        try:
            price = payload["market_data"]["current_price"]["usd"]
        except (KeyError, TypeError):
            raise InvalidPayloadError("Invalid data from provider: missing market_data.current_price.usd")
        usd = usable_price(price)
        if usd is None:
            raise InvalidPayloadError(f"Invalid data from provider: price {price!r} is not a positive number")

        name = payload.get("name")
        symbol = payload.get("symbol")
        if not isinstance(name, str) or not name.strip():
            raise InvalidPayloadError("Invalid data from provider: missing name")
        if not isinstance(symbol, str) or not symbol.strip():
            raise InvalidPayloadError("Invalid data from provider: missing symbol")
        return cls(name=name, symbol=symbol, price=usd)


class TickerRecord(BaseModel):
    """What the ticker widget displays. Price is already formatted."""

    name: str
    symbol: str
    price: str
    error: bool = False
    error_message: str | None = None

    @classmethod
    def from_edge(cls, data: dict[str, Any]) -> "TickerRecord":
        """Expects a payload already checked by the edge client."""
        return cls(
            name=data["name"].strip(),
            symbol=data["symbol"].strip(),
            price=format_price(usable_price(data["price"])),
        )

    def display_data(self) -> dict[str, Any]:
        """Fields sent to the widget; error_message only on error records."""
        return self.model_dump(exclude_none=True)


def usable_price(value: Any) -> float | None:
    """A finite, positive float from a JSON number, or None."""
    # bool is an int subclass; reject it along with numeric strings
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        price = float(value)
    except OverflowError:
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def format_price(price: float) -> str:
    """65000 -> '65,000.00'"""
    return f"{price:,.2f}"


def error_record(coin_id: str, error: Exception) -> TickerRecord:
    """The single place a failed lookup becomes a displayable placeholder."""
    return TickerRecord(
        name=f"{coin_id}: Error",
        symbol=ERROR_SYMBOL,
        price=ERROR_PRICE,
        error=True,
        error_message=str(error),
    )
