"""Perplexity LLM collector (OpenAI-compatible API with native citations)."""

import logging

import httpx

from app.collectors.llm_base import BaseLlmCollector, LlmResponse
from app.core.config import settings

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "sonar": {"input": 1.00, "output": 1.00},
    "sonar-pro": {"input": 3.00, "output": 15.00},
    "sonar-reasoning": {"input": 1.00, "output": 5.00},
    "sonar-reasoning-pro": {"input": 2.00, "output": 8.00},
}

DEFAULT_MODEL = "sonar"
API_URL = "https://api.perplexity.ai/chat/completions"


class PerplexityCollector(BaseLlmCollector):
    """Query Perplexity.

    Perplexity returns native citations in the API response; they are
    passed through as ``cited_urls``.
    """

    provider = "perplexity"
    display_name = "Perplexity"
    default_model = DEFAULT_MODEL
    pricing = MODEL_PRICING

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to Perplexity Chat Completions API."""
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
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
            self._check_response(resp)
            data = resp.json()

        choices = data.get("choices") or []
        message = (choices[0] or {}).get("message") if choices else None
        text = (message or {}).get("content") or ""
        if not text.strip():
            raise self._empty_response()

        usage = data.get("usage", {})
        input_tokens = usage.get("prompt_tokens", 0)
        output_tokens = usage.get("completion_tokens", 0)

        return LlmResponse(
            text=text,
            model=data.get("model", self.model),
            tokens=input_tokens + output_tokens,
            cost_usd=self._calculate_cost(input_tokens, output_tokens),
            cited_urls=data.get("citations", []),
        )
