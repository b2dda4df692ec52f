"""Mention & Ranking Parser.

Reads a free-text LLM answer and reports, for one brand:

  - how many times the brand is named (case-insensitive, whole-word)
  - the rank the answer gives it:
      * "3. Acme ..." / "3) Acme ..."   → list number on the brand's line
      * "Acme comes in 2nd place"       → ordinal on the brand's line
    Only the first line naming the brand with a number counts.
"""

from __future__ import annotations

import logging
import re

from app.analysis.types import ResponseAnalysis

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Rank patterns
# ---------------------------------------------------------------------------

# Numbered list item at line start: "1. ", "1) ", "  12. "
_NUMBERED_PATTERN = re.compile(r"^\s*(\d+)[.)]")

# Ordinal anywhere in the line: "1st", "2nd", "3rd", "4th"
_ORDINAL_PATTERN = re.compile(r"(\d+)(st|nd|rd|th)", re.IGNORECASE)

# Letters/digits that may not touch a brand match (Latin + Cyrillic)
_WORD_CHARS = "а-яА-ЯёЁa-zA-Z0-9"


def _brand_pattern(brand: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?<![{_WORD_CHARS}]){re.escape(brand)}(?![{_WORD_CHARS}])",
        re.IGNORECASE,
    )


def count_mentions(text: str, brand: str) -> int:
    """Count occurrences of *brand* in *text*."""
    brand = (brand or "").strip()
    if not brand or not text:
        return 0
    return len(_brand_pattern(brand).findall(text))


def extract_rank(text: str, brand: str) -> int | None:
    """Return the position the answer assigns to *brand*, or None."""
    brand = (brand or "").strip()
    if not brand or not text:
        return None

    pattern = _brand_pattern(brand)
    for line in text.splitlines():
        if not pattern.search(line):
            continue

        numbered = _NUMBERED_PATTERN.match(line)
        if numbered and int(numbered.group(1)) > 0:
            return int(numbered.group(1))

        ordinal = _ORDINAL_PATTERN.search(line)
        if ordinal and int(ordinal.group(1)) > 0:
            return int(ordinal.group(1))

    return None


def analyze_response(
    text: str,
    brand: str,
    competitors: list[str] | None = None,
) -> ResponseAnalysis:
    """Mentions and rank of *brand*, plus raw mention counts for *competitors*."""
    result = ResponseAnalysis(
        mentions=count_mentions(text, brand),
        rank=extract_rank(text, brand),
    )
    for comp in competitors or []:
        if comp and comp.strip():
            result.competitor_mentions[comp] = count_mentions(text, comp)

    logger.debug(
        "Analyzed response: brand=%s mentions=%d rank=%s competitors=%s",
        brand,
        result.mentions,
        result.rank,
        result.competitor_mentions,
    )
    return result
