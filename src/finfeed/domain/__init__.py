"""
Domain Layer - Normalized Types

This package contains the value records produced by the adapters and the
errors raised by the signed exchange client.
No dependencies on infrastructure or external systems.
"""

from finfeed.domain.models import (
    NO_DATA,
    ORDER_STATUSES,
    UNKNOWN_STATUS,
    CryptoRate,
    CurrencyRate,
    FinancialSummary,
    Hashrate,
    KeyRate,
    MiningRevenue,
    MiningStats,
    SpotOrder,
)
from finfeed.domain.errors import (
    ConfigurationError,
    DomainError,
    ExchangeError,
    InvalidParameterError,
    PayloadShapeError,
    TransportError,
    UpstreamRejectedError,
)

__all__ = [
    "NO_DATA",
    "ORDER_STATUSES",
    "UNKNOWN_STATUS",
    "CurrencyRate",
    "CryptoRate",
    "KeyRate",
    "MiningRevenue",
    "Hashrate",
    "MiningStats",
    "SpotOrder",
    "FinancialSummary",
    "DomainError",
    "ExchangeError",
    "ConfigurationError",
    "InvalidParameterError",
    "TransportError",
    "UpstreamRejectedError",
    "PayloadShapeError",
]
