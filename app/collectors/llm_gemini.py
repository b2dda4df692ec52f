"""Google Gemini LLM collector (native generateContent API)."""

import logging

import httpx

from app.collectors.llm_base import BaseLlmCollector, LlmResponse
from app.core.config import settings

logger = logging.getLogger(__name__)

# Pricing per 1M tokens
MODEL_PRICING = {
    "gemini-2.5-pro": {"input": 1.25, "output": 10.00},
    "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
    "gemini-2.5-flash-lite": {"input": 0.10, "output": 0.40},
    "gemini-2.0-flash": {"input": 0.10, "output": 0.40},
}

DEFAULT_MODEL = "gemini-2.0-flash"
API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class GeminiCollector(BaseLlmCollector):
    """Query Google Gemini via generateContent."""

    provider = "gemini"
    display_name = "Gemini"
    default_model = DEFAULT_MODEL
    pricing = MODEL_PRICING

    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to Gemini; the key travels as the ``key`` query parameter."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self.max_tokens,
                "temperature": self.temperature,
            },
        }

        async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
            resp = await client.post(
                API_URL.format(model=self.model),
                json=payload,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
            )
            self._check_response(resp)
            data = resp.json()

        candidates = data.get("candidates") or []
        if not candidates:
            logger.warning("Gemini: no candidates in response. Keys: %s", list(data.keys()))
            raise self._empty_response()

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason", "")
        if finish_reason and finish_reason not in ("STOP", "MAX_TOKENS"):
            logger.warning("Gemini: finishReason=%s (answer may be incomplete)", finish_reason)

        parts = candidate.get("content", {}).get("parts", [])
        text = "".join(p.get("text", "") for p in parts if "text" in p)
        if not text.strip():
            raise self._empty_response()

        usage = data.get("usageMetadata", {})
        input_tokens = usage.get("promptTokenCount", 0)
        output_tokens = usage.get("candidatesTokenCount", 0)

        return LlmResponse(
            text=text,
            model=data.get("modelVersion", self.model),
            tokens=input_tokens + output_tokens,
            cost_usd=self._calculate_cost(input_tokens, output_tokens),
        )
