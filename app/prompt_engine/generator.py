"""Template-based prompt generation.

Builds the list of questions a prospective customer might put to an AI
assistant about an industry, optionally narrowed by location and
keywords, followed by questions naming the brand directly.

Two query classes come out of this:
  - THEMATIC queries (no brand in query) → measure which brands LLM recalls
  - BRANDED queries (brand in query) → measure LLM's opinion about brand

Output order is stable; measurement takes a prefix of the list, so the
brand-free industry questions are always tried first.
"""

from __future__ import annotations

import logging
import re

from app.prompt_engine.types import GLOBAL_LOCATION, QueryClass

logger = logging.getLogger(__name__)

_BASE_TEMPLATES = (
    "What are the best {industry} companies?",
    "Top {industry} brands to consider",
    "Leading {industry} services",
    "Recommended {industry} providers",
    "Best {industry} solutions",
)

_LOCATION_TEMPLATES = (
    "Best {industry} companies in {location}",
    "Top {industry} services in {location}",
    "{location} {industry} recommendations",
    "Leading {industry} providers in {location}",
)

_KEYWORD_TEMPLATES = (
    "Best companies for {keyword}",
    "Top {keyword} services",
    "{keyword} recommendations",
    "Leading {keyword} providers",
    "Who offers the best {keyword} solutions?",
)

_KEYWORD_LOCATION_TEMPLATES = (
    "Best {keyword} companies in {location}",
    "Top {keyword} services in {location}",
)

_KEYWORD_INDUSTRY_TEMPLATES = (
    "Best {industry} companies for {keyword}",
    "Top {keyword} providers in {industry}",
)

_MULTI_KEYWORD_TEMPLATES = (
    "Best companies for {keywords}",
    "Who provides {keywords} services?",
    "Top providers for {keywords}",
)

_BRAND_TEMPLATES = (
    "Tell me about {brand}",
    "{brand} reviews and recommendations",
    "Is {brand} a good choice for {industry}?",
    "{brand} vs competitors",
    "Why choose {brand} for {industry}?",
)

_BRAND_KEYWORD_TEMPLATES = (
    "Is {brand} good for {keyword}?",
    "{brand} {keyword} services",
    "How does {brand} handle {keyword}?",
)


def _clean_keywords(keywords: list[str] | None) -> list[str]:
    return [k.strip() for k in (keywords or []) if k and k.strip()]


def generate_queries(
    brand_name: str,
    industry: str,
    location: str | None = None,
    keywords: list[str] | None = None,
) -> list[str]:
    """Expand the brand configuration into the ordered list of test prompts."""
    brand = brand_name.strip()
    industry = industry.strip()
    location = (location or "").strip()
    use_location = bool(location) and location != GLOBAL_LOCATION
    kws = _clean_keywords(keywords)

    queries = [t.format(industry=industry) for t in _BASE_TEMPLATES]

    if use_location:
        queries.extend(t.format(industry=industry, location=location) for t in _LOCATION_TEMPLATES)

    for keyword in kws:
        queries.extend(t.format(keyword=keyword) for t in _KEYWORD_TEMPLATES)
        if use_location:
            queries.extend(t.format(keyword=keyword, location=location) for t in _KEYWORD_LOCATION_TEMPLATES)
        queries.extend(t.format(keyword=keyword, industry=industry) for t in _KEYWORD_INDUSTRY_TEMPLATES)

    if len(kws) > 1:
        joined = ", ".join(kws)
        queries.extend(t.format(keywords=joined) for t in _MULTI_KEYWORD_TEMPLATES)

    queries.extend(t.format(brand=brand, industry=industry) for t in _BRAND_TEMPLATES)

    for keyword in kws:
        queries.extend(t.format(brand=brand, keyword=keyword) for t in _BRAND_KEYWORD_TEMPLATES)

    logger.debug(
        "Generated %d queries for brand=%s industry=%s location=%s keywords=%d",
        len(queries),
        brand,
        industry,
        location or "-",
        len(kws),
    )
    return queries


def _mentions(query: str, name: str) -> bool:
    return bool(name) and re.search(re.escape(name.strip()), query, re.IGNORECASE) is not None


def classify_query(query: str, brand_name: str) -> QueryClass:
    """THEMATIC if the brand is absent from the query text, BRANDED otherwise."""
    return QueryClass.BRANDED if _mentions(query, brand_name) else QueryClass.THEMATIC


def thematic_queries(queries: list[str], brand_names: list[str]) -> list[str]:
    """Queries that name none of *brand_names*.

    Used for head-to-head comparisons: every brand is measured on the same
    prompts, and no brand gets a free mention by being in the question.
    """
    return [q for q in queries if not any(_mentions(q, name) for name in brand_names)]
