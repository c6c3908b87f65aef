"""
Domain errors for rate resolution and feed ingestion.
"""


class RateResolutionError(Exception):
    """Base class for errors raised while resolving or loading rates."""


class CurrencyConversionError(RateResolutionError):
    """
    Raised when a derived (triangulated) rate cannot be built because one of
    its legs is missing for the requested day.
    """

    def __init__(self, base_currency: str, target_currency: str, day_key: int | None = None):
        self.base_currency = base_currency
        self.target_currency = target_currency
        self.day_key = day_key
        message = f"Cannot convert {base_currency} to {target_currency}"
        if day_key is not None:
            message += f" for day key {day_key}"
        super().__init__(message)


class FeedParseError(RateResolutionError):
    """Raised by feed parsers when the input document is malformed."""
