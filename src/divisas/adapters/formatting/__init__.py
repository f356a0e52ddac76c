"""
Formatting Adapters - Message Formatting

This package contains message formatting adapters for Telegram output.
"""

from divisas.adapters.formatting.formatter import (
    format_brecha,
    format_form,
    format_results,
    format_sources,
    format_ves,
)

__all__ = [
    "format_brecha",
    "format_form",
    "format_results",
    "format_sources",
    "format_ves",
]
