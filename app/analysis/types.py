"""Core types and DTOs for response analysis and scoring."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum


class Trend(str, Enum):
    """Direction of a platform score compared with the previous run."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass
class ResponseAnalysis:
    """What one LLM answer says about the target brand."""

    mentions: int = 0
    rank: int | None = None  # list position / ordinal on the first line naming the brand
    competitor_mentions: dict[str, int] = field(default_factory=dict)

    @property
    def is_mentioned(self) -> bool:
        return self.mentions > 0


@dataclass
class PlatformScore:
    """Aggregate of all analysed responses from one platform for one brand."""

    total_mentions: int = 0
    best_rank: int | None = None
    responses_total: int = 0
    responses_mentioning: int = 0
    score: int = 0


@dataclass
class PlatformRanking:
    """Brand visibility on one platform, as shown on the dashboard."""

    platform: str  # display name
    logo: str
    rank: int | None
    score: int
    mentions: int
    trend: str = Trend.STABLE.value
    recommendations: list[str] = field(default_factory=list)
    queries_succeeded: int = 0
    queries_failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BrandPlatformData:
    """Per-platform entry in a head-to-head competitor comparison."""

    platform: str
    logo: str
    rank: int | None
    score: int
    mentions: int
    trend: str = Trend.STABLE.value

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BrandData:
    """One brand (yours or a competitor) across all platforms."""

    name: str
    website: str
    overall_score: int
    platforms: list[BrandPlatformData] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
