"""Tests for the brand analysis orchestration (offline collectors)."""

from unittest.mock import patch

import pytest

from app.core.exceptions import AnalysisFailedError, LlmProviderError, NoProvidersConfiguredError
from app.prompt_engine.generator import generate_queries
from app.prompt_engine.types import BrandConfig
from app.services.brand_analysis import previous_scores, run_brand_analysis

CONFIG = BrandConfig(website_url="https://acme.com", brand_name="Acme", industry="CRM", keywords=["leads"])


def _patch_collectors(*collectors):
    return patch("app.services.brand_analysis.build_collectors", return_value=list(collectors))


@pytest.mark.asyncio
async def test_scores_successful_platforms_and_reports_failures(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", answer=lambda p: "1. Acme\n2. Globex")
    claude = fake_collector("claude", "Claude", error="invalid x-api-key")

    with _patch_collectors(chatgpt, claude):
        outcome = await run_brand_analysis(CONFIG, {"openai": "k", "anthropic": "k"})

    assert len(outcome.rankings) == 1
    ranking = outcome.rankings[0]
    assert ranking.platform == "ChatGPT"
    assert ranking.logo == "🤖"
    # 3 mentions → 30, rank 1 → 50, every answer mentions → 10
    assert ranking.score == 90
    assert ranking.rank == 1
    assert ranking.mentions == 3
    assert ranking.trend == "stable"
    assert ranking.queries_succeeded == 3
    assert ranking.queries_failed == 0

    assert outcome.overall_score == 90
    assert outcome.platform_errors == {"Claude": "Claude: invalid x-api-key"}
    assert outcome.analyzed_prompts == generate_queries("Acme", "CRM", None, ["leads"])


@pytest.mark.asyncio
async def test_only_first_queries_are_measured(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", answer=lambda p: "Acme")
    with _patch_collectors(chatgpt):
        await run_brand_analysis(CONFIG, {"openai": "k"})
    assert sorted(chatgpt.prompts) == sorted(generate_queries("Acme", "CRM", None, ["leads"])[:3])


@pytest.mark.asyncio
async def test_partial_platform_failure_is_counted(fake_collector):
    def flaky(prompt: str) -> str:
        if prompt.startswith("Top"):
            raise LlmProviderError("Gemini", "quota exceeded")
        return "Acme is fine."

    gemini = fake_collector("gemini", "Gemini", answer=flaky)
    with _patch_collectors(gemini):
        outcome = await run_brand_analysis(CONFIG, {"google": "k"})

    (ranking,) = outcome.rankings
    assert ranking.queries_succeeded == 2
    assert ranking.queries_failed == 1
    # 2 mentions → 20, unranked, 2/2 responses mention → 10
    assert ranking.score == 30
    assert ranking.recommendations[0] == "Increase your online presence and brand awareness"
    assert outcome.platform_errors == {}


@pytest.mark.asyncio
async def test_trend_against_previous_run(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", answer=lambda p: "1. Acme")
    previous = [{"platform": "ChatGPT", "score": 40}]
    with _patch_collectors(chatgpt):
        outcome = await run_brand_analysis(CONFIG, {"openai": "k"}, previous=previous)
    assert outcome.rankings[0].trend == "up"


@pytest.mark.asyncio
async def test_all_platforms_failed(fake_collector):
    chatgpt = fake_collector("chatgpt", "ChatGPT", error="401 Unauthorized")
    perplexity = fake_collector("perplexity", "Perplexity", error="401 Unauthorized")
    with _patch_collectors(chatgpt, perplexity):
        with pytest.raises(AnalysisFailedError) as exc_info:
            await run_brand_analysis(CONFIG, {"openai": "k", "perplexity": "k"})

    assert exc_info.value.status_code == 502
    assert set(exc_info.value.platform_errors) == {"ChatGPT", "Perplexity"}


@pytest.mark.asyncio
async def test_no_keys():
    with pytest.raises(NoProvidersConfiguredError) as exc_info:
        await run_brand_analysis(CONFIG, {})
    assert exc_info.value.status_code == 400


def test_previous_scores_ignores_junk():
    assert previous_scores([{"platform": "Claude", "score": 55}, {"oops": 1}, "x"]) == {"Claude": 55}
    assert previous_scores(None) == {}
