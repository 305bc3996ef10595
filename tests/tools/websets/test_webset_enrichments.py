"""Tests for Webset enrichment handlers."""

import json

import pytest

from exa_mcp.tools.websets.enrichments import (
    _handle_cancel_enrichment,
    _handle_create_enrichment,
    _handle_delete_enrichment,
    _handle_get_enrichment,
    _handle_list_enrichments,
)
from exa_mcp.tools.websets.models import EnrichmentConfig, EnrichmentOption
from tests.conftest import assert_error_envelope
from tests.fixtures.exa_responses import page

ENRICHMENTS = "/websets/v0/websets/ws_1/enrichments"


class TestWebsetEnrichments:
    @pytest.mark.asyncio
    async def test_create(self, exa_api, client):
        exa_api.add("POST", ENRICHMENTS, {"id": "e_1", "status": "pending"})

        await _handle_create_enrichment(
            client,
            webset_id="ws_1",
            enrichment=EnrichmentConfig(
                description="Funding stage",
                format="options",
                options=[EnrichmentOption(label="Seed")],
                metadata={"owner": "growth"},
            ),
        )

        assert exa_api.body() == {
            "description": "Funding stage",
            "format": "options",
            "options": [{"label": "Seed"}],
            "metadata": {"owner": "growth"},
        }

    @pytest.mark.asyncio
    async def test_options_format_without_labels(self, exa_api, client):
        payload = assert_error_envelope(
            await _handle_create_enrichment(
                client,
                webset_id="ws_1",
                enrichment=EnrichmentConfig(description="Stage", format="options", options=[]),
            ),
            error_code="VALIDATION_ERROR",
            message_prefix="Create enrichment error: 'options' format requires providing option labels",
        )
        assert payload["data"]["details"] == {"field": "options"}
        assert exa_api.requests == []

    @pytest.mark.asyncio
    async def test_get(self, exa_api, client):
        exa_api.add("GET", f"{ENRICHMENTS}/e_1", {"id": "e_1", "format": "text"})

        payload = json.loads(
            await _handle_get_enrichment(client, webset_id="ws_1", enrichment_id="e_1")
        )

        assert payload["format"] == "text"

    @pytest.mark.asyncio
    async def test_list(self, exa_api, client):
        exa_api.add(
            "GET",
            ENRICHMENTS,
            page(
                [{"id": "e_1", "status": "completed", "title": "CEO", "description": "CEO name", "format": "text"}],
                has_more=True,
                next_cursor="n",
            ),
        )

        payload = json.loads(await _handle_list_enrichments(client, webset_id="ws_1", limit=1))

        assert payload["websetId"] == "ws_1"
        assert payload["enrichmentsCount"] == 1
        assert payload["hasMore"] is True
        assert payload["enrichments"][0]["title"] == "CEO"

    @pytest.mark.asyncio
    async def test_delete(self, exa_api, client):
        exa_api.add("DELETE", f"{ENRICHMENTS}/e_1", (200, None))

        assert (
            await _handle_delete_enrichment(client, webset_id="ws_1", enrichment_id="e_1")
            == "Enrichment e_1 has been successfully deleted from Webset ws_1."
        )

    @pytest.mark.asyncio
    async def test_cancel_error(self, exa_api, client):
        exa_api.add("POST", f"{ENRICHMENTS}/e_1/cancel", (409, {"error": "Enrichment already completed"}))

        assert_error_envelope(
            await _handle_cancel_enrichment(client, webset_id="ws_1", enrichment_id="e_1"),
            error_code="PROVIDER_ERROR",
            message_prefix="Cancel enrichment error (409): Enrichment already completed",
        )
