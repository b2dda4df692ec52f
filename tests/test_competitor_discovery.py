"""Tests for competitor discovery."""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.exceptions import BadRequestError, CompetitorDiscoveryError
from app.services.competitor_discovery import Competitor, _parse_competitors, discover_competitors, guess_website

OPENAI_MODULE = "app.collectors.llm_openai"


def _openai_answer(text: str):
    return patch("app.services.competitor_discovery._ask_openai", new=AsyncMock(return_value=text))


class TestGuessWebsite:
    def test_slug(self):
        assert guess_website("Acme Corp.") == "https://acmecorp.com"
        assert guess_website("  Big  Blue-Co ") == "https://bigblueco.com"


class TestManual:
    @pytest.mark.asyncio
    async def test_manual_list_first_five(self):
        names = ["Globex", "Initech", "Umbrella", "Hooli", "Stark Industries", "Wayne"]
        result = await discover_competitors("Acme", "CRM", manual=names, choice="manual")
        assert [c.name for c in result] == names[:5]
        assert result[4] == Competitor("Stark Industries", "https://starkindustries.com")

    @pytest.mark.asyncio
    async def test_manual_choice_without_names_falls_back_to_auto(self):
        answer = '[{"name": "Globex", "website": "https://globex.com"}]'
        with _openai_answer(answer):
            result = await discover_competitors("Acme", "CRM", manual=[], choice="manual", openai_api_key="sk-x")
        assert result == [Competitor("Globex", "https://globex.com")]


class TestAuto:
    @pytest.mark.asyncio
    async def test_fenced_json(self):
        answer = (
            "Here you go:\n```json\n"
            '[{"name": "Globex", "website": "https://globex.com"},'
            ' {"name": "Acme", "website": "https://acme.com"},'
            ' {"name": "Initech"}, {"name": ""}]\n```'
        )
        with _openai_answer(answer) as ask:
            result = await discover_competitors("Acme", "CRM", location="Berlin", openai_api_key="sk-x")

        assert result == [
            Competitor("Globex", "https://globex.com"),
            Competitor("Initech", "https://initech.com"),
        ]
        prompt = ask.await_args.args[0]
        assert '"Acme" in the CRM industry in Berlin' in prompt
        assert "Do not include Acme itself" in prompt

    @pytest.mark.asyncio
    async def test_limit(self):
        items = ",".join(f'{{"name": "Rival {i}", "website": "https://r{i}.com"}}' for i in range(8))
        with _openai_answer(f"[{items}]"):
            result = await discover_competitors("Acme", "CRM", openai_api_key="sk-x")
        assert len(result) == 5

    @pytest.mark.asyncio
    async def test_unparseable_answer(self):
        with _openai_answer("I cannot help with that."):
            with pytest.raises(CompetitorDiscoveryError) as exc_info:
                await discover_competitors("Acme", "CRM", openai_api_key="sk-x")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_rate_limited_then_answered(self, mock_http, http_response):
        ok = {"choices": [{"message": {"content": '[{"name": "Globex", "website": "https://globex.com"}]'}}]}
        with mock_http(OPENAI_MODULE, http_response(429, {"error": {"message": "Rate limit"}}), http_response(200, ok)) as client:
            result = await discover_competitors("Acme", "CRM", openai_api_key="sk-x")

        assert result == [Competitor("Globex", "https://globex.com")]
        assert client.post.call_count == 2
        payload = client.post.call_args.kwargs["json"]
        assert payload["temperature"] == 0.3
        assert payload["max_tokens"] == 1000
        assert payload["messages"][0]["role"] == "user"

    @pytest.mark.asyncio
    async def test_openai_http_error(self, mock_http, http_response):
        with mock_http(OPENAI_MODULE, http_response(401, {"error": {"message": "Incorrect API key"}})) as client:
            with pytest.raises(CompetitorDiscoveryError, match="401") as exc_info:
                await discover_competitors("Acme", "CRM", openai_api_key="sk-x")
        assert exc_info.value.status_code == 502
        assert client.post.call_count == 1

    @pytest.mark.asyncio
    async def test_null_message(self, mock_http, http_response):
        with mock_http(OPENAI_MODULE, http_response(200, {"choices": [{"message": None}]})):
            with pytest.raises(CompetitorDiscoveryError):
                await discover_competitors("Acme", "CRM", openai_api_key="sk-x")

    @pytest.mark.asyncio
    async def test_top_level_list(self, mock_http, http_response):
        with mock_http(OPENAI_MODULE, http_response(200, [{"choices": []}])):
            with pytest.raises(CompetitorDiscoveryError, match="malformed"):
                await discover_competitors("Acme", "CRM", openai_api_key="sk-x")

    @pytest.mark.asyncio
    async def test_no_openai_key(self):
        with pytest.raises(BadRequestError):
            await discover_competitors("Acme", "CRM", choice="auto", openai_api_key=None)


class TestParse:
    def test_object_wrapper(self):
        assert _parse_competitors('{"competitors": [{"name": "A"}]}') == [{"name": "A"}]

    def test_embedded_array(self):
        assert _parse_competitors('Sure! [{"name": "A"}] Hope it helps.') == [{"name": "A"}]

    def test_garbage(self):
        assert _parse_competitors("nope") == []
