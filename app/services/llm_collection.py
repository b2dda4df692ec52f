"""Fan-out of prompts to LLM platforms.

Platforms run in parallel; within a platform, prompts run in parallel
under a semaphore. A failed prompt is logged and counted, never replaced
with made-up data. A platform with no successful prompt is reported as
failed with the first error it hit.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from app.collectors.llm_base import BaseLlmCollector
from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class PlatformResponses:
    """Everything one platform answered for one batch of prompts."""

    platform: str  # platform id
    display_name: str
    responses: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return not self.responses

    @property
    def error_message(self) -> str:
        return self.errors[0] if self.errors else "No responses"


async def collect_platform(collector: BaseLlmCollector, queries: list[str]) -> PlatformResponses:
    """Run *queries* against one platform."""
    result = PlatformResponses(platform=collector.provider, display_name=collector.display_name)
    if not queries:
        result.errors.append("No queries to run")
        return result

    semaphore = asyncio.Semaphore(max(settings.llm_concurrency_per_platform, 1))

    async def _fetch_one(query: str):
        async with semaphore:
            return await collector.query_with_retry(query)

    logger.info("Analyzing with %s (%d queries)...", collector.display_name, len(queries))
    outcomes = await asyncio.gather(*(_fetch_one(q) for q in queries), return_exceptions=True)

    for query, outcome in zip(queries, outcomes):
        if isinstance(outcome, Exception):
            logger.error("%s: query failed (%s): %s", collector.display_name, query[:50], outcome)
            result.errors.append(str(outcome))
        else:
            result.responses.append(outcome.text)

    logger.info(
        "%s: %d/%d responses collected, %d errors",
        collector.display_name,
        len(result.responses),
        len(queries),
        len(result.errors),
    )
    return result


async def collect_all(collectors: list[BaseLlmCollector], queries: list[str]) -> list[PlatformResponses]:
    """Run *queries* against every platform concurrently, preserving collector order."""
    return list(await asyncio.gather(*(collect_platform(c, queries) for c in collectors)))
