"""
Rate Calculator - Conversion Arithmetic

This module contains the pure computation behind the form: a USD price and
two exchange rates (day rate and official BCV rate) become the bolívar
amount, its BCV-rate dollar equivalent and the gap between both rates.

Files that USE this module:
- divisas.application.form_controller (recomputes results on every edit)
- divisas.adapters.formatting.formatter (gap_level for the gap marker)
- divisas.adapters.telegram.handlers (is_exact_amount for input warnings)
- tests.test_calculator (unit tests)

Files that this module USES:
- divisas.domain.models (RawInputs, CalculationResults)
"""
from __future__ import annotations

import math
import re
from typing import Optional

from divisas.domain.models import CalculationResults, RawInputs

# Gap above this percentage is highlighted as high
HIGH_GAP_THRESHOLD_PCT = 15.0

_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _normalize(text: Optional[str]) -> str:
    s = str(text or "").strip()
    if "." not in s:
        s = s.replace(",", ".")
    return s


def parse_amount(text: Optional[str]) -> float:
    """
    Parse a free-form numeric field, falling back to 0.

    The longest leading number is used, so "12abc" is 12 and "abc" is 0.
    A comma is read as the decimal separator when the text has no dot.

    Args:
        text: Raw field text (may be None, empty or non-numeric)

    Returns:
        Finite float value, or 0.0 if the text holds no finite number
    """
    match = _NUMBER_PREFIX.match(_normalize(text))
    if not match:
        return 0.0
    try:
        value = float(match.group(0))
    except (ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def is_exact_amount(text: Optional[str]) -> bool:
    """
    True when parse_amount reads the whole text as one finite number.

    "60,5" and "1e3" are exact; "12abc", "1_000" and "1e400" are not,
    even though parse_amount still reads a value (or 0) from them.
    """
    s = _normalize(text)
    if not _NUMBER_PREFIX.fullmatch(s):
        return False
    return math.isfinite(float(s))


def calculate(precio_usd: str, tasa_dia: str, tasa_bcv: str) -> CalculationResults:
    """
    Compute derived values from the three raw fields.

    Formulas:
        monto_bolivares = usd * tasa_dia
        monto_bcv_usd   = monto_bolivares / tasa_bcv   (0 if tasa_bcv <= 0)
        brecha          = (tasa_dia - tasa_bcv) / tasa_bcv * 100   (0 if tasa_bcv <= 0)

    No rounding is applied here; rounding happens only when displaying.
    """
    usd = parse_amount(precio_usd)
    t_dia = parse_amount(tasa_dia)
    t_bcv = parse_amount(tasa_bcv)

    monto_bs = usd * t_dia
    monto_bcv_usd = monto_bs / t_bcv if t_bcv > 0 else 0.0
    brecha = (t_dia - t_bcv) / t_bcv * 100.0 if t_bcv > 0 else 0.0

    return CalculationResults(
        monto_bolivares=monto_bs,
        monto_bcv_usd=monto_bcv_usd,
        brecha=brecha,
    )


def calculate_inputs(inputs: RawInputs) -> CalculationResults:
    """Compute results for a RawInputs instance."""
    return calculate(inputs.precio_usd, inputs.tasa_dia, inputs.tasa_bcv)


def gap_level(brecha: float) -> str:
    """
    Classify a gap percentage.

    Returns:
        "alta" above HIGH_GAP_THRESHOLD_PCT, "nula" when exactly 0,
        "moderada" otherwise (negative gaps included)
    """
    if brecha > HIGH_GAP_THRESHOLD_PCT:
        return "alta"
    if brecha == 0:
        return "nula"
    return "moderada"
