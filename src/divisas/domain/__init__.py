"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from divisas.domain.models import (
    FIELDS,
    CalculationResults,
    FetchedRates,
    FetchState,
    FetchStatus,
    GroundingSource,
    RawInputs,
)
from divisas.domain.errors import (
    DomainError,
    RateFetchError,
)

__all__ = [
    "FIELDS",
    "RawInputs",
    "CalculationResults",
    "GroundingSource",
    "FetchedRates",
    "FetchState",
    "FetchStatus",
    "DomainError",
    "RateFetchError",
]
