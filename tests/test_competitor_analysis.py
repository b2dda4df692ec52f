"""Tests for head-to-head competitor comparison (offline collectors)."""

from unittest.mock import patch

import pytest

from app.core.exceptions import AnalysisFailedError, NoProvidersConfiguredError
from app.prompt_engine.types import BrandConfig
from app.services.competitor_analysis import brand_position, run_competitor_analysis
from app.services.competitor_discovery import Competitor

CONFIG = BrandConfig(website_url="https://acme.com", brand_name="Acme", industry="CRM")
RIVALS = [Competitor("Globex", "https://globex.com"), Competitor("Initech", "https://initech.com")]
ANSWER = "1. Globex\n2. Acme\n3. Initech"


def _patch_collectors(*collectors):
    return patch("app.services.competitor_analysis.build_collectors", return_value=list(collectors))


@pytest.mark.asyncio
async def test_every_brand_scored_on_the_same_answers(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", answer=lambda p: ANSWER)
    gemini = fake_collector("gemini", "Gemini", answer=lambda p: ANSWER)

    with _patch_collectors(chatgpt, gemini):
        result = await run_competitor_analysis(CONFIG, RIVALS, {"openai": "k", "google": "k"})

    # Each platform asked each thematic prompt exactly once
    assert len(chatgpt.prompts) == 3
    assert not any("Acme" in p or "Globex" in p for p in chatgpt.prompts)
    assert result.analyzed_prompts == [
        "What are the best CRM companies?",
        "Top CRM brands to consider",
        "Leading CRM services",
    ]

    assert result.your_brand.name == "Acme"
    assert result.your_brand.overall_score == 80  # 30 + 40 + 10
    assert [p.platform for p in result.your_brand.platforms] == ["ChatGPT", "Gemini"]
    assert [(c.name, c.overall_score) for c in result.competitors] == [("Globex", 90), ("Initech", 70)]
    assert result.competitors[0].platforms[0].rank == 1
    assert result.your_position == 2
    assert result.platform_errors == {}


@pytest.mark.asyncio
async def test_failed_platform_is_excluded(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", answer=lambda p: ANSWER)
    claude = fake_collector("claude", "Claude", error="invalid key")

    with _patch_collectors(chatgpt, claude):
        result = await run_competitor_analysis(CONFIG, RIVALS, {"openai": "k", "anthropic": "k"})

    assert [p.platform for p in result.your_brand.platforms] == ["ChatGPT"]
    assert "Claude" in result.platform_errors


@pytest.mark.asyncio
async def test_trend_uses_previous_competitor_results(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", answer=lambda p: ANSWER)
    previous = {"https://globex.com": [{"platform": "ChatGPT", "score": 99}]}

    with _patch_collectors(chatgpt):
        result = await run_competitor_analysis(CONFIG, RIVALS, {"openai": "k"}, previous=previous)

    assert result.competitors[0].platforms[0].trend == "down"
    assert result.competitors[1].platforms[0].trend == "stable"


@pytest.mark.asyncio
async def test_all_failed(fake_collector):
    with _patch_collectors(fake_collector("chatgpt", "ChatGPT", error="down")):
        with pytest.raises(AnalysisFailedError):
            await run_competitor_analysis(CONFIG, RIVALS, {"openai": "k"})


@pytest.mark.asyncio
async def test_no_keys():
    with pytest.raises(NoProvidersConfiguredError):
        await run_competitor_analysis(CONFIG, RIVALS, {})


def test_brand_position_ties_favour_your_brand():
    assert brand_position(50, [50, 60]) == 2
    assert brand_position(70, [50, 60]) == 1
    assert brand_position(10, [50, 60]) == 3
    assert brand_position(0, []) == 1
