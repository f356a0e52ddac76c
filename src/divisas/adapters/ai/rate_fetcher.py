"""
AI Rate Fetcher - Current Venezuelan Exchange Rates via Web Search

This module asks an OpenAI-compatible chat-completions API, with web search
enabled, for the current official (BCV) and parallel exchange rates and
decodes the JSON answer together with the web citations it used.

Files that USE this module:
- divisas.application.form_controller (awaits fetch_latest_rates on "fetch rates")
- divisas.adapters.telegram.handlers (builds the shared RateFetcher)
- tests.test_rate_fetcher (unit tests)

Files that this module USES:
- divisas.config (settings for API key, base URL, model and timeout)
- divisas.domain (FetchedRates, GroundingSource, RateFetchError)
- divisas.shared.validators (strict numeric decode of string rates)
"""
import asyncio
import json
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from openai import OpenAI

from divisas.config import settings
from divisas.domain.errors import RateFetchError
from divisas.domain.models import FetchedRates, GroundingSource
from divisas.shared.validators import validate_numeric_input

log = logging.getLogger(__name__)

RATES_PROMPT = (
    "Busca las tasas de cambio actuales en Venezuela: Tasa oficial BCV y Tasa paralela "
    "(promedio). Devuelve solo los números en formato JSON con las llaves 'tasaBcv' y 'tasaDia'."
)
DEFAULT_SOURCE_TITLE = "Fuente"


def _field(obj: Any, name: str) -> Any:
    """Read a field from either an SDK object or a plain mapping."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _to_rate(value: Any) -> float:
    """
    Decode one rate field, falling back to 0.

    Numbers are taken as-is; strings must hold a complete number
    ("63.1" or "63,1", no "1_000"). Anything else, or a non-finite
    value, is 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        rate = float(value)
    elif isinstance(value, str) and validate_numeric_input(value):
        text = value.strip()
        rate = float(text if "." in text else text.replace(",", "."))
    else:
        return 0.0
    return rate if math.isfinite(rate) else 0.0


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def _parse_payload(content: Optional[str]) -> Dict[str, Any]:
    """Parse the response body as a JSON object; anything else becomes {}."""
    text = _strip_code_fence(content or "") or "{}"
    try:
        data = json.loads(text)
    except ValueError:
        log.warning("AI response is not valid JSON, rates default to 0: %.200s", text)
        return {}
    if not isinstance(data, dict):
        log.warning("AI response JSON is not an object (%s), rates default to 0", type(data).__name__)
        return {}
    return data


def _source_from_entry(entry: Any) -> Optional[GroundingSource]:
    """
    Build a GroundingSource from one citation entry.

    Handles chat-completions annotations ({"type": "url_citation",
    "url_citation": {"title", "url"}}) and grounding chunks
    ({"web": {"title", "uri"}}). Entries without a web payload yield None.
    """
    citation = _field(entry, "url_citation")
    if citation is not None:
        uri = _field(citation, "url") or ""
    else:
        citation = _field(entry, "web")
        if citation is None:
            return None
        uri = _field(citation, "uri") or ""
    title = _field(citation, "title") or DEFAULT_SOURCE_TITLE
    return GroundingSource(title=str(title), uri=str(uri))


def extract_sources(entries: Optional[List[Any]]) -> Tuple[GroundingSource, ...]:
    """Keep only entries that carry a web citation."""
    sources = []
    for entry in entries or []:
        source = _source_from_entry(entry)
        if source is not None:
            sources.append(source)
    return tuple(sources)


def decode_response(completion: Any) -> FetchedRates:
    """
    Turn a chat-completions response into FetchedRates.

    Never raises for malformed content: missing or invalid rates are 0 and
    a missing citation list means no sources.
    """
    choices = _field(completion, "choices") or []
    message = _field(choices[0], "message") if choices else None

    data = _parse_payload(_field(message, "content"))
    sources = extract_sources(_field(message, "annotations"))

    return FetchedRates(
        tasa_dia=_to_rate(data.get("tasaDia")),
        tasa_bcv=_to_rate(data.get("tasaBcv")),
        sources=sources,
    )


class RateFetcher:
    """
    Looks up current BCV and parallel rates through a web-search enabled model.

    Without an API key the fetcher is disabled and every lookup fails with
    RateFetchError, so the form falls back to manual entry.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize the rate fetcher.

        Args:
            api_key: API key (defaults to settings.ai_api_key)
            base_url: API base URL (defaults to settings.ai_base_url)
            model: Model name (defaults to settings.ai_model)
            timeout: Request timeout in seconds (defaults to settings.http_timeout_seconds)
            client: Pre-built OpenAI-compatible client (used by tests)
        """
        self.api_key = api_key or settings.ai_api_key
        self.base_url = base_url or settings.ai_base_url
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.http_timeout_seconds

        if client is not None:
            self.client = client
        elif not self.api_key:
            log.warning("AI API key not configured - automatic rate lookup is disabled")
            self.client = None
        else:
            self.client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
            log.info("Rate fetcher initialized with base_url=%s, model=%s", self.base_url, self.model)

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _request(self) -> Any:
        return self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": RATES_PROMPT}],
            web_search_options={},
            response_format={"type": "json_object"},
        )

    async def fetch_latest_rates(self) -> FetchedRates:
        """
        Ask the AI service for the current day and BCV rates.

        Returns:
            FetchedRates with the decoded rates and citation sources

        Raises:
            RateFetchError: If the fetcher is disabled or the request fails
        """
        if not self.enabled:
            raise RateFetchError("AI API key not configured")

        log.info("Requesting current rates from AI API (base_url=%s, model=%s)", self.base_url, self.model)
        loop = asyncio.get_running_loop()
        try:
            # Blocking client call runs in the default executor
            completion = await loop.run_in_executor(None, self._request)
        except Exception as e:
            log.error("Failed to fetch rates from AI API: %s", e, exc_info=True)
            raise RateFetchError(f"AI rate request failed: {e}") from e

        rates = decode_response(completion)
        log.info(
            "Received rates from AI API: tasa_dia=%s, tasa_bcv=%s, sources=%d",
            rates.tasa_dia, rates.tasa_bcv, len(rates.sources),
        )
        return rates
