"""Adapter-specific exceptions.

Every exception an adapter raises during ``search()`` derives from
``AdapterError``; the engine contains them and moves on to the next provider.
"""


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConnectionError(AdapterError):
    """Raised when the adapter cannot reach the search backend (network error or timeout)."""


class QueryError(AdapterError):
    """Raised when the backend rejects a query (non-2xx status)."""


class ResponseFormatError(AdapterError):
    """Raised when the backend answers with something that is not the expected JSON shape."""


class ConfigurationError(AdapterError):
    """Raised when an adapter's base URL or API key is not configured."""
