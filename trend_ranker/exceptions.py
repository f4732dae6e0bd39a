"""Trend Ranker exception classes."""


class TrendRankerError(Exception):
    """Base exception for all ranking build errors."""


class ConfigurationError(TrendRankerError):
    """Raised when configuration needed to run is missing or unreadable."""


class PersistenceError(TrendRankerError):
    """Raised when the translation cache or ranking payload cannot be written."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class TranslationError(TrendRankerError):
    """Raised by a single failed completion request."""


class ModelUnavailableError(TranslationError):
    """Raised on bad request / unknown model responses (HTTP 400, 404)."""

    def __init__(self, model: str, message: str) -> None:
        self.model = model
        super().__init__(f"model {model!r} rejected the request: {message}")
