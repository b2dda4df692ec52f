"""Competitor discovery: the user's own list, or OpenAI's suggestions.

Manual lists are trusted as given (first five names). Automatic discovery
asks OpenAI for real competitors as a JSON array; a failed or unparseable
answer is an error rather than a guess.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

from app.collectors.llm_openai import OpenAiCollector
from app.core.config import settings
from app.core.exceptions import BadRequestError, CompetitorDiscoveryError, LlmProviderError

logger = logging.getLogger(__name__)

DISCOVERY_TEMPERATURE = 0.3
DISCOVERY_MAX_TOKENS = 1000

_DISCOVERY_PROMPT = """Find 4-5 real, well-known competitor companies for "{brand}" in the {industry} industry{location}.

Return ONLY a JSON array with this exact format:
[
  {{"name": "Company Name", "website": "https://company.com"}},
  {{"name": "Another Company", "website": "https://another.com"}}
]

Focus on:
- Direct competitors (same industry/market)
- Well-established companies with online presence
- Companies that would likely be mentioned in AI search results
- Real companies with actual websites

Do not include {brand} itself in the results."""


@dataclass(frozen=True)
class Competitor:
    name: str
    website: str

    def to_dict(self) -> dict:
        return {"name": self.name, "website": self.website}


def guess_website(name: str) -> str:
    """``Acme Corp.`` → ``https://acmecorp.com``."""
    slug = re.sub(r"\s+", "", name.lower())
    slug = re.sub(r"[^a-z0-9]", "", slug)
    return f"https://{slug}.com"


def _parse_competitors(text: str) -> list[dict]:
    """Pull a JSON array of competitor objects out of an LLM answer.

    Handles markdown code fences and prose around the array.
    """
    cleaned = re.sub(r"```(?:json)?\s*", "", text).strip()
    cleaned = re.sub(r"```\s*$", "", cleaned).strip()

    try:
        data = json.loads(cleaned)
        if isinstance(data, dict) and isinstance(data.get("competitors"), list):
            return data["competitors"]
        if isinstance(data, list):
            return data
    except json.JSONDecodeError:
        pass

    # Fallback: first [...] block in the text
    m = re.search(r"\[.*\]", text, re.DOTALL)
    if m:
        try:
            data = json.loads(m.group(0))
            if isinstance(data, list):
                return data
        except json.JSONDecodeError:
            pass

    return []


def _normalize(items: list, brand_name: str, limit: int) -> list[Competitor]:
    brand_lower = brand_name.strip().lower()
    seen: set[str] = set()
    result: list[Competitor] = []

    for item in items:
        if isinstance(item, dict):
            name = str(item.get("name") or "").strip()
            website = str(item.get("website") or "").strip()
        else:
            name, website = str(item).strip(), ""
        if not name or name.lower() == brand_lower or name.lower() in seen:
            continue
        seen.add(name.lower())
        result.append(Competitor(name=name, website=website or guess_website(name)))
        if len(result) >= limit:
            break

    return result


async def _ask_openai(prompt: str, api_key: str) -> str:
    collector = OpenAiCollector(
        api_key=api_key,
        model=settings.openai_model,
        temperature=DISCOVERY_TEMPERATURE,
        max_tokens=DISCOVERY_MAX_TOKENS,
    )
    response = await collector.query_with_retry(prompt)
    return response.text


async def discover_competitors(
    brand_name: str,
    industry: str,
    location: str | None = None,
    manual: list[str] | None = None,
    choice: str = "auto",
    openai_api_key: str | None = None,
) -> list[Competitor]:
    """Competitors to compare *brand_name* against, at most ``settings.max_competitors``.

    Raises:
        BadRequestError: automatic discovery without an OpenAI key.
        CompetitorDiscoveryError: OpenAI failed or returned nothing usable.
    """
    limit = settings.max_competitors
    manual_names = [m.strip() for m in (manual or []) if m and m.strip()]

    if choice == "manual" and manual_names:
        competitors = [Competitor(name=name, website=guess_website(name)) for name in manual_names[:limit]]
        logger.info("Using %d manual competitors for %s", len(competitors), brand_name)
        return competitors

    if not openai_api_key:
        raise BadRequestError("OpenAI API key required for automatic competitor discovery")

    location_context = f" in {location}" if location else ""
    prompt = _DISCOVERY_PROMPT.format(brand=brand_name, industry=industry, location=location_context)

    try:
        raw = await _ask_openai(prompt, openai_api_key)
    except LlmProviderError as e:
        logger.error("Competitor discovery: %s", e)
        raise CompetitorDiscoveryError(str(e)) from e

    competitors = _normalize(_parse_competitors(raw), brand_name, limit)
    if not competitors:
        logger.warning("Competitor discovery: no competitors parsed from %r", raw[:200])
        raise CompetitorDiscoveryError("no competitors found in OpenAI response")

    logger.info("Discovered %d competitors for %s: %s", len(competitors), brand_name, [c.name for c in competitors])
    return competitors
