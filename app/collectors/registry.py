"""Platform registry: which LLM platforms exist and how to reach them."""

from __future__ import annotations

from dataclasses import dataclass

from app.collectors.llm_anthropic import AnthropicCollector
from app.collectors.llm_base import BaseLlmCollector
from app.collectors.llm_gemini import GeminiCollector
from app.collectors.llm_openai import OpenAiCollector
from app.collectors.llm_perplexity import PerplexityCollector
from app.core.config import settings

DEFAULT_LOGO = "🔧"


@dataclass(frozen=True)
class PlatformInfo:
    platform: str  # platform id used in code: chatgpt | claude | gemini | perplexity
    display_name: str
    logo: str
    credential: str  # provider key name: openai | anthropic | google | perplexity
    collector_cls: type[BaseLlmCollector]
    model_setting: str  # Settings attribute holding the model name


# Display order on the dashboard
PLATFORMS: dict[str, PlatformInfo] = {
    "chatgpt": PlatformInfo("chatgpt", "ChatGPT", "🤖", "openai", OpenAiCollector, "openai_model"),
    "claude": PlatformInfo("claude", "Claude", "🧠", "anthropic", AnthropicCollector, "anthropic_model"),
    "gemini": PlatformInfo("gemini", "Gemini", "✨", "google", GeminiCollector, "gemini_model"),
    "perplexity": PlatformInfo("perplexity", "Perplexity", "🔍", "perplexity", PerplexityCollector, "perplexity_model"),
}


def get_display_name(platform: str) -> str:
    info = PLATFORMS.get(platform)
    return info.display_name if info else platform


def get_logo(platform: str) -> str:
    info = PLATFORMS.get(platform)
    return info.logo if info else DEFAULT_LOGO


def build_collectors(keys: dict[str, str]) -> list[BaseLlmCollector]:
    """Instantiate a collector for every platform whose provider key is present.

    *keys* maps credential names (``openai``, ``anthropic``, ...) to API keys.
    """
    collectors: list[BaseLlmCollector] = []
    for info in PLATFORMS.values():
        api_key = keys.get(info.credential)
        if not api_key:
            continue
        model = getattr(settings, info.model_setting, None)
        collectors.append(info.collector_cls(api_key=api_key, model=model))
    return collectors
