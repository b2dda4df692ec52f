"""Tests for Perplexity collector."""

import pytest

from app.collectors.llm_perplexity import PerplexityCollector

MODULE = "app.collectors.llm_perplexity"


@pytest.fixture
def collector():
    return PerplexityCollector(api_key="pplx-test-fake-key-0000")


@pytest.mark.asyncio
async def test_query_llm_returns_citations(collector, mock_http, http_response):
    data = {
        "model": "sonar",
        "choices": [{"message": {"content": "Acme [1] is popular."}}],
        "citations": ["https://acme.com/about", "https://review.example/crm"],
        "usage": {"prompt_tokens": 5, "completion_tokens": 7},
    }
    with mock_http(MODULE, http_response(200, data)) as client:
        result = await collector.query_llm("Best CRM?")

    assert result.text == "Acme [1] is popular."
    assert result.cited_urls == ["https://acme.com/about", "https://review.example/crm"]
    assert result.tokens == 12
    assert result.cost_usd == round((5 * 1.0 + 7 * 1.0) / 1_000_000, 6)
    assert client.post.call_args.kwargs["headers"]["Authorization"] == "Bearer pplx-test-fake-key-0000"
    assert client.post.call_args.kwargs["json"]["messages"] == [{"role": "user", "content": "Best CRM?"}]


@pytest.mark.asyncio
async def test_no_citations(collector, mock_http, http_response):
    data = {"choices": [{"message": {"content": "Acme"}}]}
    with mock_http(MODULE, http_response(200, data)):
        result = await collector.query_llm("Best CRM?")
    assert result.cited_urls == []
