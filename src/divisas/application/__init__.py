"""
Application Layer - Use Cases and Services

This package contains the calculator arithmetic and the form controller
that ties user edits and rate lookups together.
"""

from divisas.application.calculator import (
    HIGH_GAP_THRESHOLD_PCT,
    calculate,
    calculate_inputs,
    gap_level,
    is_exact_amount,
    parse_amount,
)
from divisas.application.form_controller import FormController

__all__ = [
    "HIGH_GAP_THRESHOLD_PCT",
    "calculate",
    "calculate_inputs",
    "gap_level",
    "is_exact_amount",
    "parse_amount",
    "FormController",
]
