__all__ = [
    "CratesError",
    "ClientConfigError",
    "QueryError",
    "QueryParseError",
    "TransportError",
    "HttpStatusError",
    "NotFoundError",
    "DeserializationError",
]


class CratesError(Exception):
    """Base exception for all crates.io API errors."""


class ClientConfigError(CratesError, ValueError):
    """Raised when a client is created with an unusable configuration."""


class QueryError(CratesError, ValueError):
    """Raised when a query holds a value the registry can never accept."""


class QueryParseError(QueryError):
    """Raised when a composite query string cannot be parsed."""

    def __init__(self, token: str, reason: str):
        super().__init__(f"Invalid query token {token!r}: {reason}")
        self.token = token
        self.reason = reason


class TransportError(CratesError):
    """Raised when a request could not be sent or the connection failed."""


class HttpStatusError(CratesError):
    """Raised for non-2xx responses other than a single-resource 404."""

    def __init__(self, status_code: int, url: str):
        super().__init__(f"HTTP {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class NotFoundError(CratesError):
    """Raised when a single-resource lookup returns 404."""

    def __init__(self, url: str):
        super().__init__(f"Resource not found: {url}")
        self.status_code = 404
        self.url = url


class DeserializationError(CratesError):
    """Raised when a response body does not match the expected shape."""
