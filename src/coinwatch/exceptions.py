"""Custom exceptions for the coinwatch dashboard.

Everything that can go wrong at the market-data boundary is a FetchError,
so callers (monitor, chart pipeline, detail page) need a single except clause
to turn failures into a UI state.
"""


class CoinwatchError(Exception):
    """Base exception for all coinwatch errors."""


class ValidationError(CoinwatchError):
    """Raised when an input (e.g. a coin identifier) is empty or malformed."""


class FetchError(CoinwatchError):
    """Raised when data could not be retrieved from the market-data API.

    Attributes:
        message: Human-readable cause, safe to show in the UI.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(FetchError):
    """Raised when a request could not be sent or timed out."""


class HttpStatusError(FetchError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status: int, url: str, reason: str = "") -> None:
        detail = f" {reason}" if reason else ""
        super().__init__(f"HTTP {status}{detail} from {url}")
        self.status = status
        self.url = url


class ParseError(FetchError):
    """Raised when a response body is not valid JSON or lacks expected fields."""


class InvalidCoinIdError(FetchError, ValidationError):
    """Raised when a fetch is attempted with an empty coin identifier."""
