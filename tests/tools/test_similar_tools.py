"""Tests for find_similar_exa."""

import json

import pytest

from exa_mcp.tools.similar import NO_SIMILAR_MESSAGE, _handle_find_similar
from tests.conftest import assert_error_envelope
from tests.fixtures.exa_responses import search_response, search_result


class TestFindSimilar:
    @pytest.mark.asyncio
    async def test_body_defaults(self, exa_api, client):
        exa_api.add("POST", "/findSimilar", search_response())

        await _handle_find_similar(client, url="https://blog.example.com/post", exclude_source_domain=True)

        assert exa_api.body() == {
            "url": "https://blog.example.com/post",
            "numResults": 5,
            "excludeSourceDomain": True,
            "contents": {"text": {"maxCharacters": 3000}, "livecrawl": "preferred"},
        }

    @pytest.mark.asyncio
    async def test_domain_analysis(self, exa_api, client):
        exa_api.add(
            "POST",
            "/findSimilar",
            search_response(
                [
                    search_result("https://blog.example.com/other"),
                    search_result("https://news.example.org/a"),
                    search_result("https://news.example.org/b"),
                ]
            ),
        )

        payload = json.loads(
            await _handle_find_similar(client, url="https://blog.example.com/post")
        )

        assert payload["referenceUrl"] == "https://blog.example.com/post"
        assert payload["referenceDomain"] == "blog.example.com"
        assert payload["similarPagesFound"] == 3
        assert [r["sameDomain"] for r in payload["results"]] == [True, False, False]
        assert payload["domainDiversity"] == {
            "uniqueDomains": 2,
            "domains": ["blog.example.com", "news.example.org"],
        }

    @pytest.mark.asyncio
    async def test_missing_results_message(self, exa_api, client):
        exa_api.add("POST", "/findSimilar", {"requestId": "r"})

        assert await _handle_find_similar(client, url="https://a.example") == NO_SIMILAR_MESSAGE

    @pytest.mark.asyncio
    async def test_not_found_envelope(self, exa_api, client):
        exa_api.add("POST", "/findSimilar", (404, {"message": "URL not indexed"}))

        assert_error_envelope(
            await _handle_find_similar(client, url="https://a.example"),
            error_code="NOT_FOUND",
            message_prefix="Find similar error (404): URL not indexed",
        )
