"""
Form Controller - State of One Calculator Form

This module owns the editable form of the calculator: the three raw fields,
the web sources of the last successful lookup and the lookup status
(idle / loading / error). Results are always recomputed from the current
fields, so they can never drift from what the user typed.

Files that USE this module:
- divisas.adapters.telegram.handlers (one FormController per chat)
- tests.test_form_controller (unit tests)

Files that this module USES:
- divisas.application.calculator (calculate_inputs for derived results)
- divisas.domain (RawInputs, FetchState, GroundingSource, RateFetchError)
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Protocol, Tuple

from divisas.application.calculator import calculate_inputs
from divisas.domain.errors import RateFetchError
from divisas.domain.models import (
    FIELDS,
    CalculationResults,
    FetchedRates,
    FetchState,
    FetchStatus,
    GroundingSource,
    RawInputs,
)

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = (
    "No se pudieron obtener las tasas automáticamente. Por favor, ingrésalas manualmente."
)


class RatesSource(Protocol):
    """Anything that can look up current rates (RateFetcher in production)."""
    async def fetch_latest_rates(self) -> FetchedRates:
        ...


def format_rate_value(value: float) -> str:
    """
    Render a fetched rate the way it is written back into a field.

    Integral values below 1e21 lose the trailing ".0" (55.0 -> "55");
    others keep the shortest round-trip representation (63.1 -> "63.1",
    1e21 -> "1e+21").
    """
    value = float(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


class FormController:
    """Holds the raw inputs, sources and fetch state of a single form."""

    def __init__(self, fetcher: Optional[RatesSource] = None):
        """
        Args:
            fetcher: Rate lookup collaborator; without one, fetching always fails
        """
        self.fetcher = fetcher
        self.inputs = RawInputs()
        self.sources: Tuple[GroundingSource, ...] = ()
        self.state = FetchState()

    @property
    def results(self) -> CalculationResults:
        """Results derived from the current inputs."""
        return calculate_inputs(self.inputs)

    @property
    def is_loading(self) -> bool:
        return self.state.status is FetchStatus.LOADING

    @property
    def can_fetch(self) -> bool:
        return not self.is_loading

    @property
    def error_message(self) -> Optional[str]:
        return self.state.error_message

    def update_field(self, field: str, value: str) -> CalculationResults:
        """
        Replace one raw field and return the recomputed results.

        Editing is allowed in every state, including while a lookup runs.

        Raises:
            ValueError: If field is not one of precio_usd, tasa_dia, tasa_bcv
        """
        if field not in FIELDS:
            raise ValueError(f"Unknown field: {field}")
        self.inputs = replace(self.inputs, **{field: value if value is not None else ""})
        return self.results

    def reset(self) -> None:
        """Clear every field, the sources and any error; back to idle."""
        self.inputs = RawInputs()
        self.sources = ()
        self.state = FetchState()

    async def fetch_rates(self) -> bool:
        """
        Fill tasa_dia and tasa_bcv from the rate lookup.

        On failure the fields and sources are left untouched and the state
        becomes Error with an advisory message.

        Returns:
            True if the fields were updated, False if refused or failed
        """
        if self.is_loading:
            logger.info("Rate lookup already in progress, ignoring new request")
            return False

        self.state = FetchState(status=FetchStatus.LOADING)
        try:
            if self.fetcher is None:
                raise RateFetchError("No rate fetcher configured")
            rates = await self.fetcher.fetch_latest_rates()
        except RateFetchError as e:
            logger.warning("Rate lookup failed, keeping manual values: %s", e)
            self.state = FetchState(status=FetchStatus.ERROR, error_message=FETCH_ERROR_MESSAGE)
            return False
        except BaseException:
            # Never leave the form stuck in Loading
            self.state = FetchState()
            raise

        self.inputs = replace(
            self.inputs,
            tasa_dia=format_rate_value(rates.tasa_dia),
            tasa_bcv=format_rate_value(rates.tasa_bcv),
        )
        self.sources = tuple(rates.sources)
        self.state = FetchState()
        return True
