"""Anthropic (Claude) LLM collector via the Messages API."""

import logging

import httpx

from app.collectors.llm_base import BaseLlmCollector, LlmResponse
from app.core.config import settings

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "claude-3-haiku-20240307": {"input": 0.25, "output": 1.25},
    "claude-3-5-haiku-latest": {"input": 0.80, "output": 4.00},
    "claude-3-5-sonnet-latest": {"input": 3.00, "output": 15.00},
    "claude-sonnet-4-0": {"input": 3.00, "output": 15.00},
}

DEFAULT_MODEL = "claude-3-5-haiku-latest"
API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicCollector(BaseLlmCollector):
    """Query Claude via the Anthropic Messages API."""

    provider = "claude"
    display_name = "Claude"
    default_model = DEFAULT_MODEL
    pricing = MODEL_PRICING

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to the Anthropic Messages API."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
            resp = await client.post(
                API_URL,
                json=payload,
                headers={
                    "x-api-key": self.api_key,
                    "anthropic-version": ANTHROPIC_VERSION,
                    "Content-Type": "application/json",
                },
            )
            self._check_response(resp)
            data = resp.json()

        # content is a list of blocks; only text blocks carry the answer
        blocks = data.get("content") or []
        text = "".join(b.get("text", "") for b in blocks if b.get("type", "text") == "text")
        if not text.strip():
            raise self._empty_response()

        usage = data.get("usage", {})
        input_tokens = usage.get("input_tokens", 0)
        output_tokens = usage.get("output_tokens", 0)

        return LlmResponse(
            text=text,
            model=data.get("model", self.model),
            tokens=input_tokens + output_tokens,
            cost_usd=self._calculate_cost(input_tokens, output_tokens),
        )
