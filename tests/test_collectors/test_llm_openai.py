"""Tests for OpenAI (ChatGPT) collector."""

import pytest

from app.collectors.llm_openai import OpenAiCollector
from app.core.exceptions import LlmProviderError

MODULE = "app.collectors.llm_openai"


@pytest.fixture
def collector():
    return OpenAiCollector(api_key="sk-test-fake-key", model="gpt-4o-mini")


class TestCalculateCost:
    def test_cost_gpt4o_mini(self, collector):
        cost = collector._calculate_cost(input_tokens=1000, output_tokens=500)
        expected = (1000 * 0.15 + 500 * 0.60) / 1_000_000
        assert cost == round(expected, 6)

    def test_cost_zero_tokens(self, collector):
        assert collector._calculate_cost(0, 0) == 0.0

    def test_unknown_model_uses_default_pricing(self):
        c = OpenAiCollector(api_key="sk-test", model="gpt-future")
        assert c._calculate_cost(1000, 500) == OpenAiCollector(api_key="sk-test")._calculate_cost(1000, 500)


class TestQueryLlm:
    @pytest.mark.asyncio
    async def test_query_llm_success(self, collector, mock_http, http_response):
        data = {
            "choices": [{"message": {"content": "1. Acme\n2. Globex"}, "finish_reason": "stop"}],
            "model": "gpt-4o-mini",
            "usage": {"prompt_tokens": 50, "completion_tokens": 100},
        }
        with mock_http(MODULE, http_response(200, data)) as client:
            result = await collector.query_llm("Best CRM?")

        assert result.text == "1. Acme\n2. Globex"
        assert result.model == "gpt-4o-mini"
        assert result.tokens == 150
        assert result.cost_usd > 0

        kwargs = client.post.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test-fake-key"
        assert kwargs["json"]["max_tokens"] == 300
        assert kwargs["json"]["temperature"] == 0.7
        assert kwargs["json"]["messages"] == [{"role": "user", "content": "Best CRM?"}]

    @pytest.mark.asyncio
    async def test_empty_content_is_an_error(self, collector, mock_http, http_response):
        data = {"choices": [{"message": {"content": ""}}]}
        with mock_http(MODULE, http_response(200, data)):
            with pytest.raises(LlmProviderError, match="empty response"):
                await collector.query_with_retry("Best CRM?")

    @pytest.mark.asyncio
    async def test_unauthorized_is_not_retried(self, collector, mock_http, http_response):
        error = http_response(401, {"error": {"message": "Incorrect API key provided"}})
        with mock_http(MODULE, error) as client:
            with pytest.raises(LlmProviderError) as exc_info:
                await collector.query_with_retry("Best CRM?")

        assert exc_info.value.status_code == 401
        assert "Incorrect API key provided" in str(exc_info.value)
        assert client.post.call_count == 1

    @pytest.mark.asyncio
    async def test_null_message_is_malformed(self, collector, mock_http, http_response):
        with mock_http(MODULE, http_response(200, {"choices": [{"message": None}]})):
            with pytest.raises(LlmProviderError, match="empty response"):
                await collector.query_with_retry("Best CRM?")

    @pytest.mark.asyncio
    async def test_top_level_list_is_malformed(self, collector, mock_http, http_response):
        with mock_http(MODULE, http_response(200, [{"message": "nope"}])):
            with pytest.raises(LlmProviderError, match="malformed response"):
                await collector.query_with_retry("Best CRM?")

    @pytest.mark.asyncio
    async def test_sampling_overrides(self, mock_http, http_response):
        collector = OpenAiCollector(api_key="sk-test", temperature=0.3, max_tokens=1000)
        data = {"choices": [{"message": {"content": "ok"}}]}
        with mock_http(MODULE, http_response(200, data)) as client:
            await collector.query_llm("Best CRM?")

        payload = client.post.call_args.kwargs["json"]
        assert payload["temperature"] == 0.3
        assert payload["max_tokens"] == 1000
