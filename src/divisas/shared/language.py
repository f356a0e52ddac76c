"""
Language Management - Multi-language Support

This module holds every user-facing string of the bot in Spanish (default,
Venezuelan usage) and English. The language of each chat lives in the chat
data; this module only knows the configured default.

Files that USE this module:
- divisas.adapters.telegram.handlers (uses get_language, is_supported, translate)
- divisas.adapters.formatting.formatter (uses translate for message formatting)

Files that this module USES:
- divisas.config (default language)
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Language constants
LANG_SPANISH = "es"
LANG_ENGLISH = "en"

# Translation dictionaries
TRANSLATIONS: Dict[str, Dict[str, str]] = {
    LANG_SPANISH: {
        "title": "🧮 Calculadora de Divisas",
        "subtitle": "Conversión precisa y rápida",
        "field_precio_usd": "Precio en Dólares",
        "field_tasa_dia": "Tasa del Día",
        "field_tasa_bcv": "Tasa BCV",
        "input_line": "{label}: {value} {suffix}",
        "monto_bolivares_line": "💵 Monto en Bolívares: {value} Bs.",
        "monto_bolivares_desc": "Cálculo: Precio en $ × Tasa del Día",
        "monto_bcv_line": "🏛 Equivalente Dólar BCV: {value} USD (BCV)",
        "monto_bcv_desc": "Cálculo: (Monto en Bs) ÷ Tasa BCV",
        "brecha_line": "Brecha Cambiaria: {value}",
        "brecha_high": "⚠️ brecha alta",
        "sources_header": "Fuentes consultadas:",
        "source_line": "{index}. {title}: {uri}",
        "fetch_loading": "⏳ Buscando tasas actualizadas…",
        "fetch_busy": "⏳ Ya hay una búsqueda en curso, espera el resultado.",
        "fetch_disabled": "La búsqueda automática de tasas no está configurada. Ingresa las tasas manualmente.",
        "fetch_done": "✅ Tasas actualizadas.",
        "fetch_error": "No se pudieron obtener las tasas automáticamente. Por favor, ingrésalas manualmente.",
        "reset_done": "🧹 Campos limpiados.",
        "rate_limited": "⏰ Demasiadas solicitudes. Intenta de nuevo en {seconds} s.",
        "not_numeric": "⚠️ \"{value}\" no es un número completo; se tomará como {used}.",
        "usage_field": "Uso: /{command} <valor>   (ej. /{command} {example})",
        "btn_fetch": "🔎 Buscar tasas",
        "btn_reset": "🧹 Limpiar",
        "help": (
            "Esta herramienta permite estimar cuánto debes cobrar o pagar basándote en la "
            "diferencia entre el mercado paralelo y el oficial.\n\n"
            "/precio <monto> — precio en dólares\n"
            "/tasadia <tasa> — tasa del día (Bs/$)\n"
            "/tasabcv <tasa> — tasa oficial BCV (Bs/$)\n"
            "/tasas — buscar las tasas actuales automáticamente\n"
            "/limpiar — limpiar todos los campos\n"
            "/idioma — cambiar idioma"
        ),
        "language_prompt": "Selecciona el idioma / Select language\n\nIdioma actual: {current}",
        "language_changed": "✅ Idioma cambiado a español",
        "language_invalid": "Selección de idioma no válida",
    },
    LANG_ENGLISH: {
        "title": "🧮 Currency Calculator",
        "subtitle": "Fast and accurate conversion",
        "field_precio_usd": "Price in Dollars",
        "field_tasa_dia": "Day Rate",
        "field_tasa_bcv": "BCV Rate",
        "input_line": "{label}: {value} {suffix}",
        "monto_bolivares_line": "💵 Amount in Bolívares: {value} Bs.",
        "monto_bolivares_desc": "Formula: Price in $ × Day Rate",
        "monto_bcv_line": "🏛 BCV Dollar Equivalent: {value} USD (BCV)",
        "monto_bcv_desc": "Formula: (Amount in Bs) ÷ BCV Rate",
        "brecha_line": "Exchange Gap: {value}",
        "brecha_high": "⚠️ high gap",
        "sources_header": "Sources consulted:",
        "source_line": "{index}. {title}: {uri}",
        "fetch_loading": "⏳ Looking up current rates…",
        "fetch_busy": "⏳ A lookup is already running, please wait for it.",
        "fetch_disabled": "Automatic rate lookup is not configured. Please enter the rates manually.",
        "fetch_done": "✅ Rates updated.",
        "fetch_error": "Rates could not be fetched automatically. Please enter them manually.",
        "reset_done": "🧹 Fields cleared.",
        "rate_limited": "⏰ Too many requests. Try again in {seconds} s.",
        "not_numeric": "⚠️ \"{value}\" is not a complete number; it will be taken as {used}.",
        "usage_field": "Usage: /{command} <value>   (e.g. /{command} {example})",
        "btn_fetch": "🔎 Fetch rates",
        "btn_reset": "🧹 Reset",
        "help": (
            "Estimate how much to charge or pay based on the difference between the "
            "parallel and the official market.\n\n"
            "/precio <amount> — price in dollars\n"
            "/tasadia <rate> — day rate (Bs/$)\n"
            "/tasabcv <rate> — official BCV rate (Bs/$)\n"
            "/tasas — look up current rates automatically\n"
            "/limpiar — clear all fields\n"
            "/idioma — change language"
        ),
        "language_prompt": "Selecciona el idioma / Select language\n\nCurrent language: {current}",
        "language_changed": "✅ Language changed to English",
        "language_invalid": "Invalid language selection",
    },
}


class LanguageManager:
    """
    Translates message keys.

    The manager only knows the default language; the language of each chat
    is stored with the chat and passed to translate() explicitly.
    """

    def __init__(self, default_language: str = LANG_SPANISH):
        self._default_language: str = (
            default_language if default_language in TRANSLATIONS else LANG_SPANISH
        )

    def get_language(self) -> str:
        """Default language code ('es' or 'en')."""
        return self._default_language

    def is_supported(self, lang: Optional[str]) -> bool:
        return lang in TRANSLATIONS

    def translate(self, key: str, lang: Optional[str] = None, **kwargs: Any) -> str:
        """
        Translate a message key with optional parameters.

        Args:
            key: Message key in TRANSLATIONS
            lang: Language code; unknown or None means the default language

        Returns:
            Translated and formatted string, or the key if no translation exists
        """
        if lang not in TRANSLATIONS:
            lang = self._default_language
        template = TRANSLATIONS[lang].get(key, key)
        try:
            return template.format(**kwargs)
        except KeyError as e:
            logger.warning("Missing parameter in translation '%s': %s", key, e)
            return template


def _default_language() -> str:
    from divisas.config import settings
    return settings.default_language


# Global language manager instance
language_manager = LanguageManager(_default_language())


def get_language() -> str:
    """Get the default language."""
    return language_manager.get_language()


def is_supported(lang: Optional[str]) -> bool:
    """Whether lang has a translation table."""
    return language_manager.is_supported(lang)


def translate(key: str, lang: Optional[str] = None, **kwargs: Any) -> str:
    """Translate a message key."""
    return language_manager.translate(key, lang, **kwargs)
