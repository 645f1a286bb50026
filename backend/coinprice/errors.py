"""Error hierarchy for the price lookup services."""


class ConfigError(Exception):
    """Raised at startup when required configuration is missing or invalid."""


class PriceLookupError(Exception):
    """Base error for anything that prevents a price from being served."""


class CoinNotFoundError(PriceLookupError):
    """The provider does not know the requested coin identifier."""

    def __init__(self, coin_id: str):
        super().__init__(f"Crypto id '{coin_id}' not found.")
        self.coin_id = coin_id


class UpstreamError(PriceLookupError):
    """Transport or non-2xx failure talking to the pricing provider."""


class InvalidPayloadError(UpstreamError):
    """The provider answered but without a usable price."""


class PriceUnavailableError(PriceLookupError):
    """The edge service could not produce a price for an availability reason."""

    def __init__(self, coin_id: str):
        super().__init__("Failed to fetch data from the provider.")
        self.coin_id = coin_id


class EdgeUnreachableError(PriceLookupError):
    """The edge service could not be reached or returned unreadable data."""


class EdgeResponseError(PriceLookupError):
    """The edge service answered with an error payload."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
