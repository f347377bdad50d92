"""
finfeed - Financial Data Adapters

Fetches and normalizes fiat rates and the key rate from the Bank of Russia,
XMR market data and spot orders from MEXC, and mining statistics from
HashVault, with a small Telegram bot on top.
"""

__version__ = "1.0.0"
