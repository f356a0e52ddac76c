"""
Message Formatter - Text Formatting and Presentation

This module renders the calculator form as Telegram text: amounts with
Venezuelan separators, the exchange gap with its direction arrow, the two
result cards and the list of web sources.

Files that USE this module:
- divisas.adapters.telegram.handlers (renders the form after every change)
- tests.test_formatter (unit tests)

Files that this module USES:
- divisas.application.calculator (gap_level for the high-gap marker)
- divisas.domain.models (RawInputs, CalculationResults, GroundingSource)
- divisas.shared.language (translate for multi-language support)
"""
from __future__ import annotations

from typing import Optional, Sequence

from divisas.application.calculator import gap_level
from divisas.domain.models import CalculationResults, GroundingSource, RawInputs
from divisas.shared.language import translate

_FIELD_SUFFIXES = {
    "precio_usd": "USD",
    "tasa_dia": "Bs/$",
    "tasa_bcv": "Bs/$",
}


def format_ves(amount: Optional[float], decimals: int = 2) -> str:
    """
    Format a number with es-VE separators: dot for thousands, comma for decimals.

    Args:
        amount: Value to format (None is shown as zero)
        decimals: Number of decimal places (default: 2)

    Returns:
        Formatted string like '1.234,56'
    """
    if not amount:
        return "0," + "0" * decimals if decimals > 0 else "0"
    return f"{amount:,.{decimals}f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_brecha(brecha: float) -> str:
    """
    Format the exchange gap with a direction arrow.

    - Day rate above BCV = 📈
    - Day rate below BCV = 📉

    Returns:
        Formatted string like '11,62% 📈', '-100,00% 📉' or '0,00% ⏸'
    """
    arrow = "📈" if brecha > 0 else ("📉" if brecha < 0 else "⏸")
    return f"{format_ves(brecha)}% {arrow}"


def format_inputs(inputs: RawInputs, lang: Optional[str] = None) -> str:
    """One line per field, showing the raw text exactly as typed."""
    lines = []
    for name, suffix in _FIELD_SUFFIXES.items():
        value = getattr(inputs, name).strip() or "—"
        label = translate(f"field_{name}", lang)
        lines.append(translate("input_line", lang, label=label, value=value, suffix=suffix))
    return "\n".join(lines)


def format_results(results: CalculationResults, lang: Optional[str] = None) -> str:
    """
    Format the gap line and both result cards.

    Result cards:
        💵 Monto en Bolívares: 605,00 Bs.
        Cálculo: Precio en $ × Tasa del Día

        🏛 Equivalente Dólar BCV: 11,16 USD (BCV)
        Cálculo: (Monto en Bs) ÷ Tasa BCV
    """
    brecha_line = translate("brecha_line", lang, value=format_brecha(results.brecha))
    if gap_level(results.brecha) == "alta":
        brecha_line = f"{brecha_line}  {translate('brecha_high', lang)}"

    lines = [
        brecha_line,
        "",
        translate("monto_bolivares_line", lang, value=format_ves(results.monto_bolivares)),
        translate("monto_bolivares_desc", lang),
        "",
        translate("monto_bcv_line", lang, value=format_ves(results.monto_bcv_usd)),
        translate("monto_bcv_desc", lang),
    ]
    return "\n".join(lines)


def format_sources(sources: Sequence[GroundingSource], lang: Optional[str] = None) -> str:
    """
    Numbered list of web sources, or an empty string when there are none.
    """
    if not sources:
        return ""
    lines = [translate("sources_header", lang)]
    for index, source in enumerate(sources, start=1):
        lines.append(translate("source_line", lang, index=index, title=source.title, uri=source.uri))
    return "\n".join(lines)


def format_form(
    inputs: RawInputs,
    results: CalculationResults,
    sources: Sequence[GroundingSource] = (),
    error_message: Optional[str] = None,
    lang: Optional[str] = None,
) -> str:
    """
    Render the whole form: title, fields, results, sources and any error.

    Args:
        inputs: Current raw inputs
        results: Results derived from inputs
        sources: Web sources of the last lookup
        error_message: Advisory message of a failed lookup, if any
        lang: Language code of the chat (default language when None)

    Returns:
        Multi-line message text
    """
    blocks = [
        f"{translate('title', lang)}\n{translate('subtitle', lang)}",
        format_inputs(inputs, lang),
        format_results(results, lang),
    ]
    sources_text = format_sources(sources, lang)
    if sources_text:
        blocks.append(sources_text)
    if error_message:
        blocks.append(f"⚠️ {error_message}")
    return "\n\n".join(blocks)
