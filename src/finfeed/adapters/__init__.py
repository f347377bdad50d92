"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (central bank, exchange, mining pool)
- Telegram (bot interface)
- Formatting (output)
"""

__all__ = []
