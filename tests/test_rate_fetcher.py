"""
Rate Fetcher Tests - Unit Tests for the AI Rate Lookup

This module contains unit tests for RateFetcher and its response decoding:
request parameters, strict optional-field decode of the JSON rates,
citation extraction and failure handling.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- divisas.adapters.ai.rate_fetcher (RateFetcher, decode_response, extract_sources)
- divisas.domain (GroundingSource, RateFetchError)
- unittest.mock (Mock for the OpenAI client)
- pytest (testing framework)
"""
import asyncio  # Drive the async lookup from synchronous tests
from types import SimpleNamespace  # Lightweight stand-ins for SDK response objects

import pytest  # Testing framework for writing and running tests
from unittest.mock import Mock, patch  # Mock objects and patching for testing without real API calls

from divisas.adapters.ai.rate_fetcher import (
    DEFAULT_SOURCE_TITLE,  # Title used when a citation has none
    RATES_PROMPT,  # Fixed Spanish prompt
    RateFetcher,  # Fetcher to test
    decode_response,  # Response -> FetchedRates
    extract_sources,  # Citation entries -> GroundingSource tuple
)
from divisas.domain.errors import RateFetchError  # Raised on request failure
from divisas.domain.models import GroundingSource  # Expected source objects


def _completion(content, annotations=None):
    message = SimpleNamespace(content=content, annotations=annotations)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _citation(title, url):
    return SimpleNamespace(type="url_citation", url_citation=SimpleNamespace(title=title, url=url))


def _fetcher_returning(completion):
    client = Mock()
    client.chat.completions.create.return_value = completion
    return RateFetcher(api_key="test-api-key-123", client=client), client


class TestFetchLatestRates:
    def test_success_with_citation(self):
        completion = _completion(
            '{"tasaDia": 63.1, "tasaBcv": 55.0}',
            [_citation("Banco Central de Venezuela", "https://www.bcv.org.ve/")],
        )
        fetcher, _ = _fetcher_returning(completion)

        rates = asyncio.run(fetcher.fetch_latest_rates())

        assert rates.tasa_dia == 63.1
        assert rates.tasa_bcv == 55.0
        assert rates.sources == (
            GroundingSource(title="Banco Central de Venezuela", uri="https://www.bcv.org.ve/"),
        )

    def test_request_parameters(self):
        fetcher, client = _fetcher_returning(_completion("{}"))
        fetcher.model = "search-model"

        asyncio.run(fetcher.fetch_latest_rates())

        client.chat.completions.create.assert_called_once()
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "search-model"
        assert kwargs["messages"] == [{"role": "user", "content": RATES_PROMPT}]
        assert kwargs["web_search_options"] == {}
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_request_failure_raises_rate_fetch_error(self):
        client = Mock()
        client.chat.completions.create.side_effect = TimeoutError("Request timed out")
        fetcher = RateFetcher(api_key="test-api-key-123", client=client)

        with pytest.raises(RateFetchError, match="AI rate request failed") as exc_info:
            asyncio.run(fetcher.fetch_latest_rates())
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    def test_malformed_json_is_not_an_error(self):
        fetcher, _ = _fetcher_returning(_completion("las tasas son 63 y 55"))

        rates = asyncio.run(fetcher.fetch_latest_rates())

        assert (rates.tasa_dia, rates.tasa_bcv) == (0.0, 0.0)
        assert rates.sources == ()


class TestRateFetcherInit:
    def test_disabled_without_api_key(self):
        fake_settings = Mock(ai_api_key="", ai_base_url="https://example.test/v1",
                             ai_model="m", http_timeout_seconds=5)
        with patch("divisas.adapters.ai.rate_fetcher.settings", fake_settings):
            fetcher = RateFetcher()

        assert fetcher.enabled is False
        with pytest.raises(RateFetchError, match="not configured"):
            asyncio.run(fetcher.fetch_latest_rates())

    @patch("divisas.adapters.ai.rate_fetcher.OpenAI")
    def test_builds_openai_client(self, mock_openai):
        fetcher = RateFetcher(
            api_key="test-api-key-123",
            base_url="https://example.test/v1",
            model="search-model",
            timeout=12,
        )

        assert fetcher.enabled is True
        mock_openai.assert_called_once_with(
            api_key="test-api-key-123",
            base_url="https://example.test/v1",
            timeout=12,
            max_retries=0,
        )


class TestDecodeResponse:
    def test_missing_keys_default_to_zero(self):
        rates = decode_response(_completion('{"tasaDia": 63.1}'))
        assert rates.tasa_dia == 63.1
        assert rates.tasa_bcv == 0.0

    def test_numeric_strings_are_accepted(self):
        rates = decode_response(_completion('{"tasaDia": "63,1", "tasaBcv": "55.25"}'))
        assert rates.tasa_dia == 63.1
        assert rates.tasa_bcv == 55.25

    def test_invalid_values_default_to_zero(self):
        rates = decode_response(_completion('{"tasaDia": "alta", "tasaBcv": true}'))
        assert (rates.tasa_dia, rates.tasa_bcv) == (0.0, 0.0)

        rates = decode_response(_completion('{"tasaDia": null, "tasaBcv": "inf"}'))
        assert (rates.tasa_dia, rates.tasa_bcv) == (0.0, 0.0)

    def test_underscore_grouped_string_is_zero(self):
        rates = decode_response(_completion('{"tasaDia": "1_000", "tasaBcv": 55}'))
        assert (rates.tasa_dia, rates.tasa_bcv) == (0.0, 55.0)

    def test_non_object_json(self):
        rates = decode_response(_completion("[63.1, 55.0]"))
        assert (rates.tasa_dia, rates.tasa_bcv) == (0.0, 0.0)

    def test_empty_content(self):
        rates = decode_response(_completion(None))
        assert (rates.tasa_dia, rates.tasa_bcv) == (0.0, 0.0)

    def test_code_fenced_json(self):
        rates = decode_response(_completion('```json\n{"tasaDia": 63.1, "tasaBcv": 55}\n```'))
        assert rates.tasa_dia == 63.1
        assert rates.tasa_bcv == 55.0

    def test_no_choices(self):
        rates = decode_response(SimpleNamespace(choices=[]))
        assert (rates.tasa_dia, rates.tasa_bcv, rates.sources) == (0.0, 0.0, ())


class TestExtractSources:
    def test_entries_without_web_payload_are_dropped(self):
        entries = [
            SimpleNamespace(type="file_citation"),
            _citation("BCV", "https://www.bcv.org.ve/"),
            {"retrievedContext": {"uri": "x"}},
        ]
        assert extract_sources(entries) == (GroundingSource(title="BCV", uri="https://www.bcv.org.ve/"),)

    def test_missing_title_uses_default(self):
        entries = [SimpleNamespace(type="url_citation", url_citation=SimpleNamespace(title=None, url="https://a.test"))]
        assert extract_sources(entries) == (GroundingSource(title=DEFAULT_SOURCE_TITLE, uri="https://a.test"),)

    def test_grounding_chunk_mappings(self):
        entries = [
            {"web": {"title": "Monitor Dólar", "uri": "https://monitor.test"}},
            {"web": {"uri": "https://otro.test"}},
        ]
        assert extract_sources(entries) == (
            GroundingSource(title="Monitor Dólar", uri="https://monitor.test"),
            GroundingSource(title=DEFAULT_SOURCE_TITLE, uri="https://otro.test"),
        )

    def test_none_means_no_sources(self):
        assert extract_sources(None) == ()
