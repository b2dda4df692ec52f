"""OpenAI (ChatGPT) LLM collector."""

import logging

import httpx

from app.collectors.llm_base import BaseLlmCollector, LlmResponse
from app.core.config import settings

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4.1": {"input": 2.00, "output": 8.00},
    "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
    "gpt-4.1-nano": {"input": 0.10, "output": 0.40},
}

DEFAULT_MODEL = "gpt-4o-mini"
API_URL = "https://api.openai.com/v1/chat/completions"


class OpenAiCollector(BaseLlmCollector):
    """Query OpenAI ChatGPT via the Chat Completions API."""

    provider = "chatgpt"
    display_name = "ChatGPT"
    default_model = DEFAULT_MODEL
    pricing = MODEL_PRICING

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to OpenAI Chat Completions API."""
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
        )
