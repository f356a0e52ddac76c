"""
Formatter Tests - Unit Tests for Message Formatting Functions

This module contains unit tests for the formatting functions: es-VE number
formatting, the exchange gap line, the result cards, the sources list and
the complete form message.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- divisas.adapters.formatting.formatter (all formatter functions for testing)
- divisas.application.calculator (calculate for realistic results)
- divisas.domain.models (RawInputs, GroundingSource for test data)
- divisas.shared.language (English language code)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from divisas.adapters.formatting.formatter import (
    format_brecha,  # Gap percentage with arrow
    format_form,  # Whole form message
    format_inputs,  # Raw field lines
    format_results,  # Gap line and result cards
    format_sources,  # Numbered sources list
    format_ves,  # es-VE number formatting
)
from divisas.application.calculator import calculate  # Realistic results for formatting
from divisas.domain.models import CalculationResults, GroundingSource, RawInputs  # Test data
from divisas.shared.language import LANG_ENGLISH  # Language code


class TestFormatVes:
    def test_two_decimals(self):
        assert format_ves(605) == "605,00"
        assert format_ves(11.1623) == "11,16"

    def test_thousands_separator(self):
        assert format_ves(1234567.891) == "1.234.567,89"

    def test_negative(self):
        assert format_ves(-1234.5) == "-1.234,50"

    def test_zero_and_none(self):
        assert format_ves(0) == "0,00"
        assert format_ves(None) == "0,00"

    def test_custom_decimals(self):
        assert format_ves(1234.4, decimals=0) == "1.234"
        assert format_ves(0, decimals=0) == "0"
        assert format_ves(36.71254, decimals=4) == "36,7125"


class TestFormatBrecha:
    def test_day_rate_above_official(self):
        assert format_brecha(calculate("10", "60.5", "54.2").brecha) == "11,62% 📈"

    def test_day_rate_below_official(self):
        assert format_brecha(-100.0) == "-100,00% 📉"

    def test_no_gap(self):
        assert format_brecha(0.0) == "0,00% ⏸"


class TestFormatResults:
    def test_reference_scenario(self):
        result = format_results(calculate("10", "60.5", "54.2"))

        assert "Brecha Cambiaria: 11,62% 📈" in result
        assert "💵 Monto en Bolívares: 605,00 Bs." in result
        assert "Cálculo: Precio en $ × Tasa del Día" in result
        assert "🏛 Equivalente Dólar BCV: 11,16 USD (BCV)" in result
        assert "Cálculo: (Monto en Bs) ÷ Tasa BCV" in result
        assert "brecha alta" not in result

    def test_high_gap_marker(self):
        result = format_results(CalculationResults(monto_bolivares=1.0, monto_bcv_usd=1.0, brecha=20.0))
        assert "20,00% 📈  ⚠️ brecha alta" in result

    def test_english(self):
        result = format_results(calculate("10", "60.5", "54.2"), LANG_ENGLISH)
        assert "Amount in Bolívares: 605,00 Bs." in result
        assert "Exchange Gap: 11,62% 📈" in result


class TestFormatSources:
    def test_no_sources(self):
        assert format_sources([]) == ""

    def test_numbered_list(self):
        sources = [
            GroundingSource(title="BCV", uri="https://www.bcv.org.ve/"),
            GroundingSource(title="Fuente", uri="https://monitor.test"),
        ]
        assert format_sources(sources) == (
            "Fuentes consultadas:\n"
            "1. BCV: https://www.bcv.org.ve/\n"
            "2. Fuente: https://monitor.test"
        )


class TestFormatForm:
    def test_empty_form(self):
        text = format_form(RawInputs(), calculate("", "", ""))

        assert text.startswith("🧮 Calculadora de Divisas")
        assert "Precio en Dólares: — USD" in text
        assert "Tasa del Día: — Bs/$" in text
        assert "Tasa BCV: — Bs/$" in text
        assert "Monto en Bolívares: 0,00 Bs." in text
        assert "Fuentes consultadas" not in text

    def test_raw_text_is_shown_as_typed(self):
        inputs = RawInputs(precio_usd="10", tasa_dia="60,5", tasa_bcv="abc")
        assert "Tasa del Día: 60,5 Bs/$" in format_inputs(inputs)
        assert "Tasa BCV: abc Bs/$" in format_inputs(inputs)

    def test_sources_and_error(self):
        inputs = RawInputs(precio_usd="10", tasa_dia="63.1", tasa_bcv="55")
        text = format_form(
            inputs,
            calculate(inputs.precio_usd, inputs.tasa_dia, inputs.tasa_bcv),
            [GroundingSource(title="BCV", uri="https://www.bcv.org.ve/")],
            error_message="No se pudieron obtener las tasas automáticamente.",
        )

        assert "Monto en Bolívares: 631,00 Bs." in text
        assert "1. BCV: https://www.bcv.org.ve/" in text
        assert text.endswith("⚠️ No se pudieron obtener las tasas automáticamente.")

    def test_english_form(self):
        text = format_form(RawInputs(), calculate("", "", ""), lang=LANG_ENGLISH)

        assert text.startswith("🧮 Currency Calculator")
        assert "Price in Dollars: — USD" in text
