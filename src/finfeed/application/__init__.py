"""
Application Layer - Use Cases and Services

This package contains application services that compose the adapters.
"""

from finfeed.application.summary_service import SummaryService

__all__ = ["SummaryService"]
