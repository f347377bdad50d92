"""
Provider Adapters - External API Clients

Best-effort sources (return None or [] on failure):
- CBRProvider: Bank of Russia rates and key rate
- MexcMarketProvider: MEXC public market data
- HashVaultProvider: HashVault mining statistics

Signed source (raises finfeed.domain.errors.ExchangeError subclasses):
- MexcTradeClient: MEXC private order endpoints
"""

from finfeed.adapters.providers.base import HttpProvider
from finfeed.adapters.providers.cbr import CBRProvider
from finfeed.adapters.providers.hashvault import HashVaultProvider
from finfeed.adapters.providers.mexc import MexcMarketProvider
from finfeed.adapters.providers.mexc_trade import MexcTradeClient

__all__ = [
    "HttpProvider",
    "CBRProvider",
    "MexcMarketProvider",
    "MexcTradeClient",
    "HashVaultProvider",
]
