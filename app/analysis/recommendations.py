"""Platform-specific visibility advice."""

from __future__ import annotations

_BASE_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "chatgpt": (
        "Optimize your website content for conversational queries",
        "Create FAQ sections that match natural language patterns",
        "Improve your brand's online presence with consistent messaging",
    ),
    "claude": (
        "Focus on technical accuracy in your content",
        "Provide detailed explanations and documentation",
        "Enhance your thought leadership content",
    ),
    "gemini": (
        "Leverage Google's ecosystem for better visibility",
        "Optimize for multimodal content (text + images)",
        "Improve your local SEO presence",
    ),
    "perplexity": (
        "Create more research-backed content",
        "Improve citation and source quality",
        "Focus on factual, data-driven messaging",
    ),
}

LOW_SCORE_ADVICE = "Increase your online presence and brand awareness"
UNRANKED_ADVICE = "Work on getting mentioned in industry discussions"
MID_SCORE_ADVICE = "Develop more authoritative content in your industry"


def generate_recommendations(platform: str, score: int, rank: int | None) -> list[str]:
    """Advice list for one platform; *platform* is the platform id (e.g. ``chatgpt``)."""
    recommendations = list(_BASE_RECOMMENDATIONS.get(platform, ()))

    if score < 50:
        recommendations.insert(0, LOW_SCORE_ADVICE)
    if rank is None:
        recommendations.append(UNRANKED_ADVICE)
    if score < 70:
        recommendations.append(MID_SCORE_ADVICE)

    return recommendations
