"""Tests for Google Gemini collector."""

import pytest

from app.collectors.llm_gemini import GeminiCollector
from app.core.exceptions import LlmProviderError

MODULE = "app.collectors.llm_gemini"


@pytest.fixture
def collector():
    return GeminiCollector(api_key="AIza-test-fake-key-000000", model="gemini-2.0-flash")


@pytest.mark.asyncio
async def test_query_llm_success(collector, mock_http, http_response):
    data = {
        "candidates": [
            {
                "content": {"parts": [{"text": "1. Acme\n"}, {"text": "2. Globex"}]},
                "finishReason": "STOP",
            }
        ],
        "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 15},
        "modelVersion": "gemini-2.0-flash-001",
    }
    with mock_http(MODULE, http_response(200, data)) as client:
        result = await collector.query_llm("Best CRM?")

    assert result.text == "1. Acme\n2. Globex"
    assert result.tokens == 25
    assert result.model == "gemini-2.0-flash-001"

    args, kwargs = client.post.call_args
    assert args[0].endswith("/models/gemini-2.0-flash:generateContent")
    assert kwargs["params"] == {"key": "AIza-test-fake-key-000000"}
    assert kwargs["json"]["generationConfig"]["maxOutputTokens"] == 300
    assert kwargs["json"]["contents"] == [{"role": "user", "parts": [{"text": "Best CRM?"}]}]
    assert "systemInstruction" not in kwargs["json"]


@pytest.mark.asyncio
async def test_no_candidates(collector, mock_http, http_response):
    with mock_http(MODULE, http_response(200, {"promptFeedback": {"blockReason": "SAFETY"}})):
        with pytest.raises(LlmProviderError, match="empty response"):
            await collector.query_with_retry("Best CRM?")


@pytest.mark.asyncio
async def test_max_tokens_answer_is_kept(collector, mock_http, http_response):
    data = {"candidates": [{"content": {"parts": [{"text": "Acme and"}]}, "finishReason": "MAX_TOKENS"}]}
    with mock_http(MODULE, http_response(200, data)):
        result = await collector.query_with_retry("Best CRM?")
    assert result.text == "Acme and"
