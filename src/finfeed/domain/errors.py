# src/finfeed/domain/errors.py
"""
Domain Errors - Hard-Fail Exceptions

Only the signed exchange client raises these; the public sources degrade
to None or an empty list instead. The subclasses let callers tell a
misconfiguration apart from a rejected request or a network problem.
"""
from typing import Iterable, Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class ExchangeError(DomainError):
    """Base exception for signed exchange requests."""
    pass


class ConfigurationError(ExchangeError):
    """Raised when API credentials are missing."""
    pass


class InvalidParameterError(ExchangeError):
    """Raised when a symbol or order id has an invalid shape."""
    pass


class TransportError(ExchangeError):
    """Raised when the exchange cannot be reached."""
    pass


class UpstreamRejectedError(ExchangeError):
    """Raised when the exchange answers with an error (auth failure, unknown order, ...)."""

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[object] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class PayloadShapeError(ExchangeError):
    """Raised when a payload matches none of the known shapes."""

    def __init__(self, message: str, keys: Iterable[str] = ()):
        self.keys = sorted(str(k) for k in keys)
        if self.keys:
            message = f"{message} (keys present: {', '.join(self.keys)})"
        else:
            message = f"{message} (no keys present)"
        super().__init__(message)
