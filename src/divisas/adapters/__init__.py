"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- AI (web-search grounded rate lookup)
- Telegram (bot interface)
- Formatting (output)
"""

__all__ = []
