"""Tests for the platform registry."""

from app.collectors.llm_anthropic import AnthropicCollector
from app.collectors.llm_gemini import GeminiCollector
from app.collectors.llm_openai import OpenAiCollector
from app.collectors.llm_perplexity import PerplexityCollector
from app.collectors.registry import DEFAULT_LOGO, build_collectors, get_display_name, get_logo


def test_build_collectors_only_for_present_keys():
    collectors = build_collectors({"openai": "sk-1", "perplexity": "pplx-2", "google": ""})
    assert [type(c) for c in collectors] == [OpenAiCollector, PerplexityCollector]
    assert collectors[0].api_key == "sk-1"


def test_build_collectors_all_in_display_order():
    keys = {"perplexity": "p", "google": "g", "anthropic": "a", "openai": "o"}
    collectors = build_collectors(keys)
    assert [type(c) for c in collectors] == [OpenAiCollector, AnthropicCollector, GeminiCollector, PerplexityCollector]
    assert [c.display_name for c in collectors] == ["ChatGPT", "Claude", "Gemini", "Perplexity"]


def test_build_collectors_uses_configured_models():
    (collector,) = build_collectors({"google": "g"})
    assert collector.model == "gemini-2.0-flash"


def test_build_collectors_empty():
    assert build_collectors({}) == []


def test_display_name_and_logo():
    assert get_display_name("claude") == "Claude"
    assert get_logo("chatgpt") == "🤖"
    assert get_logo("perplexity") == "🔍"
    assert get_display_name("mistral") == "mistral"
    assert get_logo("mistral") == DEFAULT_LOGO
