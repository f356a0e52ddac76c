"""
Telegram Handlers - The Calculator Form as a Chat

This module exposes the calculator form over Telegram. Each chat owns one
FormController and its own language: commands edit the three fields and
every edit answers with the recomputed results; inline buttons trigger the
automatic rate lookup and the reset.

Commands:
- /start, /ayuda: usage guide and the current form
- /precio, /tasadia, /tasabcv <valor>: edit one field
- /tasas: look up current rates automatically
- /limpiar: clear all fields
- /idioma: choose Spanish or English for this chat
- plain text "10 60.5 54.2": fill the fields in order

Edited messages are handled like new ones, so every reply goes through
update.effective_message.

Files that USE this module:
- divisas.app (build_handlers and error_handler are registered on the application)

Files that this module USES:
- divisas.application.form_controller (FormController per chat)
- divisas.application.calculator (parse_amount, is_exact_amount for input warnings)
- divisas.adapters.ai.rate_fetcher (RateFetcher shared through bot_data)
- divisas.adapters.formatting.formatter (format_form for message text)
- divisas.shared.rate_limiter (rate limiting for edits and lookups)
- divisas.shared.language (translations and the default language)
- divisas.shared.validators (input sanitizing)
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Message, Update
from telegram.error import BadRequest
from telegram.ext import (
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from divisas.adapters.ai.rate_fetcher import RateFetcher
from divisas.adapters.formatting.formatter import format_form, format_ves
from divisas.application.calculator import is_exact_amount, parse_amount
from divisas.application.form_controller import FormController
from divisas.domain.models import FIELDS, FetchStatus
from divisas.shared.language import LANG_ENGLISH, LANG_SPANISH, get_language, is_supported, translate
from divisas.shared.rate_limiter import RATE_LIMITS, rate_limiter
from divisas.shared.validators import sanitize_user_input

logger = logging.getLogger(__name__)

FORM_KEY = "form"
LANGUAGE_KEY = "language"
FETCHER_KEY = "rate_fetcher"

CALLBACK_FETCH = "form_fetch"
CALLBACK_RESET = "form_reset"

# command -> (field, example value)
FIELD_COMMANDS = {
    "precio": ("precio_usd", "10.00"),
    "tasadia": ("tasa_dia", "60.50"),
    "tasabcv": ("tasa_bcv", "54.20"),
}


def get_fetcher(context: ContextTypes.DEFAULT_TYPE) -> RateFetcher:
    """Shared RateFetcher stored in bot_data, created on first use."""
    fetcher = context.bot_data.get(FETCHER_KEY)
    if fetcher is None:
        fetcher = RateFetcher()
        context.bot_data[FETCHER_KEY] = fetcher
    return fetcher


def get_form(context: ContextTypes.DEFAULT_TYPE) -> FormController:
    """The FormController of the current chat, created on first use."""
    form = context.chat_data.get(FORM_KEY)
    if form is None:
        form = FormController(fetcher=get_fetcher(context))
        context.chat_data[FORM_KEY] = form
    return form


def chat_language(context: ContextTypes.DEFAULT_TYPE) -> str:
    """Language chosen in this chat with /idioma, or the configured default."""
    return context.chat_data.get(LANGUAGE_KEY) or get_language()


def build_keyboard(form: FormController, lang: Optional[str] = None) -> InlineKeyboardMarkup:
    """Fetch and reset buttons; the fetch button shows progress while loading."""
    fetch_label = translate("fetch_loading" if form.is_loading else "btn_fetch", lang)
    return InlineKeyboardMarkup([
        [
            InlineKeyboardButton(fetch_label, callback_data=CALLBACK_FETCH),
            InlineKeyboardButton(translate("btn_reset", lang), callback_data=CALLBACK_RESET),
        ]
    ])


def render_form(form: FormController, lang: Optional[str] = None) -> str:
    """Current form as message text, with the translated advisory on lookup failure."""
    error_message = translate("fetch_error", lang) if form.state.status is FetchStatus.ERROR else None
    return format_form(form.inputs, form.results, form.sources, error_message, lang)


def input_warning(value: str, lang: Optional[str] = None) -> Optional[str]:
    """
    Warning for a field value that is not read as a whole number.

    "12abc" is used as 12 and "abc" as 0; the warning names the value that
    actually goes into the calculation. Exact numbers get no warning.
    """
    if not value or is_exact_amount(value):
        return None
    return translate("not_numeric", lang, value=value, used=format_ves(parse_amount(value)))


async def _edit_form_message(message: Message, form: FormController, lang: str) -> None:
    try:
        await message.edit_text(render_form(form, lang), reply_markup=build_keyboard(form, lang))
    except BadRequest as e:
        # Editing to identical content is rejected by Telegram
        if "not modified" not in str(e).lower():
            raise
        logger.debug("Form message unchanged: %s", e)


def _check_rate_limit(update: Update, limit_type: str) -> Optional[int]:
    """
    Check the chat against a configured rate limit.

    Buckets are namespaced per limit type, e.g. "fetch_rates:chat:123".

    Returns:
        None if allowed, otherwise whole seconds to wait
    """
    config = RATE_LIMITS.get(limit_type)
    if not config:
        return None

    chat_id = update.effective_chat.id if update.effective_chat else update.effective_user.id
    identifier = f"{limit_type}:chat:{chat_id}"
    if rate_limiter.is_allowed(identifier, config):
        return None

    retry_after = rate_limiter.get_retry_after(identifier, config) or config.block_duration
    logger.warning("Rate limit exceeded for %s (retry in %.0fs)", identifier, retry_after)
    return max(1, math.ceil(retry_after))


async def _reply_rate_limited(update: Update, seconds: int, lang: str) -> None:
    await update.effective_message.reply_text(translate("rate_limited", lang, seconds=seconds))


# --- /start, /ayuda: usage guide and current form ---
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start and /ayuda - send the usage guide and the form."""
    lang = chat_language(context)
    form = get_form(context)
    message = update.effective_message
    await message.reply_text(translate("help", lang))
    await message.reply_text(render_form(form, lang), reply_markup=build_keyboard(form, lang))


# --- /precio, /tasadia, /tasabcv: edit one field ---
async def set_field(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle a field command - store the argument and answer with new results.

    The command name selects the field. An empty argument list shows usage;
    text that is not a whole number is accepted with a warning naming the
    value used.
    """
    lang = chat_language(context)
    wait = _check_rate_limit(update, "user_command")
    if wait is not None:
        await _reply_rate_limited(update, wait, lang)
        return

    message = update.effective_message
    command = message.text.split()[0].lstrip("/").split("@")[0].lower()
    field, example = FIELD_COMMANDS[command]

    if not context.args:
        await message.reply_text(translate("usage_field", lang, command=command, example=example))
        return

    value = sanitize_user_input(" ".join(context.args))
    form = get_form(context)
    form.update_field(field, value)
    logger.info("Chat %s set %s=%r", update.effective_chat.id, field, value)

    text = render_form(form, lang)
    warning = input_warning(value, lang)
    if warning:
        text = f"{warning}\n\n{text}"
    await message.reply_text(text, reply_markup=build_keyboard(form, lang))


# --- plain text: "precio [tasa_dia [tasa_bcv]]" ---
async def fill_fields(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle a plain text message holding up to three values.

    Values fill precio_usd, tasa_dia and tasa_bcv in that order; fields
    beyond the given values keep their current text.
    """
    lang = chat_language(context)
    wait = _check_rate_limit(update, "user_command")
    if wait is not None:
        await _reply_rate_limited(update, wait, lang)
        return

    message = update.effective_message
    values = sanitize_user_input(message.text or "").split()
    # Chatter such as "hola" is answered with the guide instead of filling fields
    if not values or len(values) > len(FIELDS) or not any(is_exact_amount(v) for v in values):
        await message.reply_text(translate("help", lang))
        return

    form = get_form(context)
    for field, value in zip(FIELDS, values):
        form.update_field(field, value)

    warnings = [w for w in (input_warning(v, lang) for v in values) if w]
    text = render_form(form, lang)
    if warnings:
        text = "\n".join(warnings) + "\n\n" + text
    await message.reply_text(text, reply_markup=build_keyboard(form, lang))


async def _run_fetch(update: Update, context: ContextTypes.DEFAULT_TYPE, message: Message) -> None:
    """
    Run the rate lookup for the chat and update message with the outcome.

    Field edits keep working while the lookup is in flight; a second lookup
    for the same chat is refused until the first one finishes.
    """
    lang = chat_language(context)
    form = get_form(context)
    if form.is_loading:
        await message.reply_text(translate("fetch_busy", lang))
        return

    fetcher = get_fetcher(context)
    if not fetcher.enabled:
        await message.reply_text(translate("fetch_disabled", lang))
        return

    wait = _check_rate_limit(update, "fetch_rates")
    if wait is not None:
        await _reply_rate_limited(update, wait, lang)
        return

    status_message = await message.reply_text(translate("fetch_loading", lang))
    updated = await form.fetch_rates()

    if updated:
        logger.info("Chat %s rates updated from AI lookup", update.effective_chat.id)
        await status_message.edit_text(translate("fetch_done", lang))
    elif form.is_loading:
        # Another lookup for this chat started while the status message was sent
        await status_message.edit_text(translate("fetch_busy", lang))
        return
    else:
        await status_message.edit_text(f"⚠️ {translate('fetch_error', lang)}")
    await message.reply_text(render_form(form, lang), reply_markup=build_keyboard(form, lang))


# --- /tasas: automatic rate lookup ---
async def fetch_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /tasas - fill the rate fields from the AI lookup."""
    await _run_fetch(update, context, update.effective_message)


# --- /limpiar: clear the form ---
async def reset_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /limpiar - clear all fields, sources and errors."""
    lang = chat_language(context)
    form = get_form(context)
    form.reset()
    message = update.effective_message
    await message.reply_text(translate("reset_done", lang))
    await message.reply_text(render_form(form, lang), reply_markup=build_keyboard(form, lang))


# --- inline buttons under the form ---
async def form_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle the fetch and reset buttons of the form message."""
    query = update.callback_query
    lang = chat_language(context)

    if query.data == CALLBACK_RESET:
        await query.answer(translate("reset_done", lang))
        form = get_form(context)
        form.reset()
        await _edit_form_message(query.message, form, lang)
    elif query.data == CALLBACK_FETCH:
        await query.answer()
        await _run_fetch(update, context, query.message)
    else:
        await query.answer()


# --- /idioma: language selection ---
async def language_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /idioma - show language selection buttons."""
    lang = chat_language(context)
    keyboard = [
        [
            InlineKeyboardButton("Español", callback_data="lang_es"),
            InlineKeyboardButton("English", callback_data="lang_en"),
        ]
    ]
    current = "Español" if lang == LANG_SPANISH else "English"
    await update.effective_message.reply_text(
        translate("language_prompt", lang, current=current),
        reply_markup=InlineKeyboardMarkup(keyboard),
    )


async def language_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle language selection; the choice applies to this chat only."""
    query = update.callback_query
    await query.answer()

    lang = {"lang_es": LANG_SPANISH, "lang_en": LANG_ENGLISH}.get(query.data)
    if not is_supported(lang):
        logger.warning("Invalid language selection: %s", query.data)
        await query.edit_message_text(translate("language_invalid", chat_language(context)))
        return

    context.chat_data[LANGUAGE_KEY] = lang
    logger.info("Chat %s language set to %s", update.effective_chat.id, lang)
    await query.edit_message_text(translate("language_changed", lang))


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors raised by handlers; the form itself stays usable."""
    logger.error("Unhandled error while processing update %s", update, exc_info=context.error)


def build_handlers() -> List:
    """
    Build and return list of Telegram bot handlers.

    Returns:
        List of handler instances for registration with bot
    """
    return [
        CommandHandler(["start", "ayuda", "help"], start),
        CommandHandler(list(FIELD_COMMANDS), set_field),
        CommandHandler("tasas", fetch_cmd),
        CommandHandler("limpiar", reset_cmd),
        CommandHandler("idioma", language_cmd),
        CallbackQueryHandler(form_callback, pattern="^form_"),
        CallbackQueryHandler(language_callback, pattern="^lang_"),
        MessageHandler(filters.TEXT & ~filters.COMMAND, fill_fields),
    ]
