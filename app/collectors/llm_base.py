"""Base LLM collector with retry/backoff.

Each vendor subclass implements ``query_llm`` as a single HTTP round trip.
Callers use ``query_with_retry``, which retries transient failures
(HTTP 429, 5xx, connection errors) with exponential backoff and jitter, and
turns every other failure into ``LlmProviderError``.
"""

import asyncio
import logging
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx

from app.core.config import settings
from app.core.exceptions import LlmProviderError
from app.core.metrics import LLM_REQUEST_DURATION, LLM_REQUESTS

logger = logging.getLogger(__name__)

# 529 = Anthropic "overloaded"
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504, 529})


@dataclass
class LlmResponse:
    """Raw response from an LLM API."""

    text: str
    model: str
    tokens: int = 0
    cost_usd: float = 0.0
    cited_urls: list[str] = field(default_factory=list)  # some APIs return citations natively


def _error_message(resp: httpx.Response) -> str:
    """Best-effort human-readable error from a vendor error body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500]
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict):
        return str(err.get("message") or err)[:500]
    if err:
        return str(err)[:500]
    return resp.text[:500]


class BaseLlmCollector(ABC):
    """Base class for all LLM collectors."""

    provider: str = "unknown"
    display_name: str = "Unknown"
    default_model: str = ""
    pricing: dict[str, dict[str, float]] = {}  # per 1M tokens, keyed by model

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self.api_key = api_key
        self.model = model or self.default_model
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.llm_max_tokens

    @abstractmethod
    async def query_llm(self, prompt: str) -> LlmResponse:
        """Send a prompt to the LLM and return the raw response. Implemented by subclasses."""
        ...

    def _check_response(self, resp: httpx.Response) -> None:
        """Log vendor error bodies, then raise httpx.HTTPStatusError for 4xx/5xx."""
        if resp.status_code >= 400:
            logger.error(
                "%s API %d for model=%s: %s",
                self.display_name,
                resp.status_code,
                self.model,
                _error_message(resp),
            )
        resp.raise_for_status()

    def _empty_response(self) -> LlmProviderError:
        return LlmProviderError(self.display_name, f"{self.display_name} returned empty response")

    @staticmethod
    def _backoff_delay(attempt: int, rate_limited: bool) -> float:
        base = settings.llm_rate_limit_delay if rate_limited else settings.llm_retry_base_delay
        delay = min(base * (2**attempt), settings.llm_retry_max_delay)
        return random.uniform(delay * 0.7, delay * 1.3)

    async def query_with_retry(self, prompt: str) -> LlmResponse:
        """``query_llm`` with bounded retries on transient failures.

        Raises:
            LlmProviderError: non-retryable failure, or retries exhausted.
        """
        max_attempts = settings.llm_max_retries + 1
        start = time.perf_counter()

        for attempt in range(max_attempts):
            try:
                resp = await self.query_llm(prompt)
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status not in RETRYABLE_STATUS_CODES or attempt == max_attempts - 1:
                    LLM_REQUESTS.labels(platform=self.provider, outcome="error").inc()
                    raise LlmProviderError(
                        self.display_name,
                        f"{self.display_name} API error {status}: {_error_message(e.response)}",
                        status_code=status,
                    ) from e
                delay = self._backoff_delay(attempt, rate_limited=status == 429)
                logger.warning(
                    "%s: HTTP %d (attempt %d/%d), retrying in %.1fs",
                    self.provider,
                    status,
                    attempt + 1,
                    max_attempts,
                    delay,
                )
            except httpx.TransportError as e:
                if attempt == max_attempts - 1:
                    LLM_REQUESTS.labels(platform=self.provider, outcome="error").inc()
                    raise LlmProviderError(self.display_name, f"connection failed: {e!r}") from e
                delay = self._backoff_delay(attempt, rate_limited=False)
                logger.warning(
                    "%s: transport error (attempt %d/%d), retrying in %.1fs: %r",
                    self.provider,
                    attempt + 1,
                    max_attempts,
                    delay,
                    e,
                )
            except LlmProviderError:
                LLM_REQUESTS.labels(platform=self.provider, outcome="error").inc()
                raise
            except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
                LLM_REQUESTS.labels(platform=self.provider, outcome="error").inc()
                raise LlmProviderError(self.display_name, f"malformed response: {e!r}") from e
            else:
                LLM_REQUESTS.labels(platform=self.provider, outcome="success").inc()
                LLM_REQUEST_DURATION.labels(platform=self.provider).observe(time.perf_counter() - start)
                return resp

            await asyncio.sleep(delay)

        # Loop always returns or raises
        raise LlmProviderError(self.display_name, "max retries exhausted")

    def _calculate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Calculate cost in USD based on model pricing."""
        pricing = self.pricing.get(self.model) or self.pricing.get(self.default_model)
        if not pricing:
            return 0.0
        cost = (input_tokens * pricing["input"] + output_tokens * pricing["output"]) / 1_000_000
        return round(cost, 6)
