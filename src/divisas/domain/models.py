"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Raw form inputs (price in USD, day rate, BCV rate)
- Derived calculation results
- Grounding sources returned by the AI rate lookup
- Fetch state of the rate lookup

Files that USE this module:
- divisas.application.* (calculator and form controller)
- divisas.adapters.* (AI fetcher and formatter build and read these models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorators for creating data classes
from enum import Enum  # Enumeration for fetch status values
from typing import Optional, Tuple  # Type hints for optional values and tuples


FIELDS = ("precio_usd", "tasa_dia", "tasa_bcv")


@dataclass(frozen=True)
class RawInputs:
    """
    User-editable form fields, kept exactly as typed.

    Attributes:
        precio_usd: Price in US dollars
        tasa_dia: Day (parallel market) rate in Bs per USD
        tasa_bcv: Official BCV rate in Bs per USD
    """
    precio_usd: str = ""
    tasa_dia: str = ""
    tasa_bcv: str = ""


@dataclass(frozen=True)
class CalculationResults:
    """
    Values derived from RawInputs.

    Attributes:
        monto_bolivares: Price converted to bolívares at the day rate
        monto_bcv_usd: Bolívar amount expressed in dollars at the BCV rate
        brecha: Percentage gap of the day rate over the BCV rate
    """
    monto_bolivares: float
    monto_bcv_usd: float
    brecha: float = 0.0


@dataclass(frozen=True)
class GroundingSource:
    """A web citation used by the AI service to answer."""
    title: str
    uri: str


@dataclass(frozen=True)
class FetchedRates:
    """
    Result of one AI rate lookup.

    Attributes:
        tasa_dia: Parallel market rate (0 when missing)
        tasa_bcv: Official BCV rate (0 when missing)
        sources: Citations attached to the response
    """
    tasa_dia: float
    tasa_bcv: float
    sources: Tuple[GroundingSource, ...] = ()


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass
class FetchState:
    """Status of the rate lookup (non-frozen, owned by the form controller)."""
    status: FetchStatus = FetchStatus.IDLE
    error_message: Optional[str] = field(default=None)
