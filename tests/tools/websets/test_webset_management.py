"""Tests for Webset lifecycle handlers."""

import json

import pytest

from exa_mcp.tools.websets.management import (
    _handle_cancel_webset,
    _handle_create_webset,
    _handle_delete_webset,
    _handle_get_webset,
    _handle_list_websets,
    _handle_update_webset,
)
from exa_mcp.tools.websets.models import (
    EnrichmentConfig,
    EnrichmentOption,
    SearchCriterion,
    WebsetEntity,
    WebsetSearchConfig,
)
from tests.conftest import assert_error_envelope
from tests.fixtures.exa_responses import page, webset

WEBSETS = "/websets/v0/websets"


class TestCreateWebset:
    @pytest.mark.asyncio
    async def test_body_from_models(self, exa_api, client):
        exa_api.add("POST", WEBSETS, webset())

        output = await _handle_create_webset(
            client,
            search=WebsetSearchConfig(
                query="AI startups in Berlin",
                count=20,
                entity=WebsetEntity(type="company"),
                criteria=[SearchCriterion(description="Founded after 2020")],
            ),
            enrichments=[EnrichmentConfig(description="CEO name", format="text")],
            external_id="crm-42",
        )

        assert exa_api.body() == {
            "search": {
                "query": "AI startups in Berlin",
                "count": 20,
                "entity": {"type": "company"},
                "criteria": [{"description": "Founded after 2020"}],
            },
            "enrichments": [{"description": "CEO name", "format": "text"}],
            "externalId": "crm-42",
        }
        assert json.loads(output)["id"] == "ws_1"

    @pytest.mark.asyncio
    async def test_options_format_requires_labels(self, exa_api, client):
        result = await _handle_create_webset(
            client, enrichments=[EnrichmentConfig(description="Stage", format="options")]
        )

        payload = assert_error_envelope(
            result,
            error_code="VALIDATION_ERROR",
            message_prefix="Create Webset error: 'options' format requires providing option labels",
        )
        assert payload["data"]["details"] == {"field": "enrichments"}
        assert exa_api.requests == []

    @pytest.mark.asyncio
    async def test_options_with_labels_accepted(self, exa_api, client):
        exa_api.add("POST", WEBSETS, webset())

        await _handle_create_webset(
            client,
            enrichments=[
                EnrichmentConfig(
                    description="Stage",
                    format="options",
                    options=[EnrichmentOption(label="Seed"), EnrichmentOption(label="Series A")],
                )
            ],
        )

        assert exa_api.body()["enrichments"][0]["options"] == [
            {"label": "Seed"},
            {"label": "Series A"},
        ]


class TestListWebsets:
    @pytest.mark.asyncio
    async def test_page_summary(self, exa_api, client):
        exa_api.add(
            "GET",
            WEBSETS,
            page([webset("ws_1"), webset("ws_2", status="running")], has_more=True, next_cursor="c2"),
        )

        payload = json.loads(await _handle_list_websets(client, cursor="c1", limit=2))

        assert dict(exa_api.last_request.url.params) == {"cursor": "c1", "limit": "2"}
        assert payload["websetsCount"] == 2
        assert payload["hasMore"] is True
        assert payload["nextCursor"] == "c2"
        assert payload["websets"][1] == {
            "id": "ws_2",
            "status": "running",
            "externalId": None,
            "searchCount": 1,
            "enrichmentCount": 0,
            "monitorCount": 0,
            "createdAt": "2024-05-01T00:00:00Z",
            "updatedAt": "2024-05-02T00:00:00Z",
            "metadata": {},
        }

    @pytest.mark.asyncio
    async def test_no_params_when_unset(self, exa_api, client):
        exa_api.add("GET", WEBSETS, page([]))

        payload = json.loads(await _handle_list_websets(client))

        assert exa_api.last_request.url.query == b""
        assert payload == {"websetsCount": 0, "hasMore": False, "nextCursor": None, "websets": []}


class TestSingleWebset:
    @pytest.mark.asyncio
    async def test_get(self, exa_api, client):
        exa_api.add("GET", f"{WEBSETS}/ws_1", webset())

        assert json.loads(await _handle_get_webset(client, webset_id="ws_1"))["status"] == "idle"

    @pytest.mark.asyncio
    async def test_get_missing(self, exa_api, client):
        exa_api.add("GET", f"{WEBSETS}/ws_x", (404, {"error": "Webset not found"}))

        assert_error_envelope(
            await _handle_get_webset(client, webset_id="ws_x"),
            error_code="NOT_FOUND",
            message_prefix="Get Webset error (404): Webset not found",
        )

    @pytest.mark.asyncio
    async def test_update_posts_changed_fields(self, exa_api, client):
        exa_api.add("POST", f"{WEBSETS}/ws_1", webset(status="paused"))

        await _handle_update_webset(client, webset_id="ws_1", status="paused", metadata={"k": "v"})

        assert exa_api.last_request.method == "POST"
        assert exa_api.body() == {"metadata": {"k": "v"}, "status": "paused"}

    @pytest.mark.asyncio
    async def test_delete_confirmation(self, exa_api, client):
        exa_api.add("DELETE", f"{WEBSETS}/ws_1", webset())

        assert (
            await _handle_delete_webset(client, webset_id="ws_1")
            == "Webset ws_1 has been successfully deleted."
        )

    @pytest.mark.asyncio
    async def test_cancel(self, exa_api, client):
        exa_api.add("POST", f"{WEBSETS}/ws_1/cancel", webset(status="idle"))

        await _handle_cancel_webset(client, webset_id="ws_1")

        assert exa_api.calls("POST", f"{WEBSETS}/ws_1/cancel")
