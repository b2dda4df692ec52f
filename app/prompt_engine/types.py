"""Types for prompt generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class QueryClass(str, Enum):
    """Top-level query classification for brand visibility tracking."""

    THEMATIC = "thematic"  # No brand in query → measure which brands LLM recalls
    BRANDED = "branded"  # Brand in query → measure LLM's opinion about brand


# Location value meaning "no particular market"
GLOBAL_LOCATION = "Global"


@dataclass
class BrandConfig:
    """What the user asked us to measure."""

    website_url: str
    brand_name: str
    industry: str
    location: str | None = None
    keywords: list[str] = field(default_factory=list)
    competitors: list[str] = field(default_factory=list)
    competitor_choice: str = "auto"  # auto | manual

    @property
    def has_location(self) -> bool:
        return bool(self.location) and self.location != GLOBAL_LOCATION
