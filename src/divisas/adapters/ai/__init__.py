"""
AI Adapters - AI Service Integrations

This package contains the web-search grounded rate lookup.
"""

from divisas.adapters.ai.rate_fetcher import RateFetcher

__all__ = ["RateFetcher"]
