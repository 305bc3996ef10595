"""Tests for imports, monitors, webhooks and events handlers."""

import json

import pytest

from exa_mcp.tools.websets.operations import (
    _handle_create_import,
    _handle_create_monitor,
    _handle_create_webhook,
    _handle_get_event,
    _handle_get_import,
    _handle_list_events,
    _handle_list_webhook_attempts,
    _handle_update_monitor,
)
from tests.conftest import assert_error_envelope


class TestImports:
    @pytest.mark.asyncio
    async def test_create(self, exa_api, client):
        exa_api.add("POST", "/websets/v0/imports", {"id": "imp_1", "status": "pending"})

        await _handle_create_import(
            client, source_url="https://files.example/leads.csv", file_type="csv", webset_id="ws_1"
        )

        assert exa_api.body() == {
            "sourceUrl": "https://files.example/leads.csv",
            "fileType": "csv",
            "websetId": "ws_1",
        }

    @pytest.mark.asyncio
    async def test_get(self, exa_api, client):
        exa_api.add("GET", "/websets/v0/imports/imp_1", {"id": "imp_1", "status": "completed"})

        payload = json.loads(await _handle_get_import(client, import_id="imp_1"))

        assert payload["status"] == "completed"


class TestMonitors:
    @pytest.mark.asyncio
    async def test_create(self, exa_api, client):
        exa_api.add("POST", "/websets/v0/websets/ws_1/monitors", {"id": "m_1"})

        await _handle_create_monitor(
            client, webset_id="ws_1", cadence="weekly", search_behavior="append"
        )

        assert exa_api.body() == {
            "websetId": "ws_1",
            "cadence": "weekly",
            "searchBehavior": "append",
        }

    @pytest.mark.asyncio
    async def test_update_patches_changed_fields(self, exa_api, client):
        exa_api.add("PATCH", "/websets/v0/websets/ws_1/monitors/m_1", {"id": "m_1", "status": "paused"})

        await _handle_update_monitor(client, webset_id="ws_1", monitor_id="m_1", status="paused")

        assert exa_api.last_request.method == "PATCH"
        assert exa_api.body() == {"status": "paused"}

    @pytest.mark.asyncio
    async def test_update_without_changes_rejected(self, exa_api, client):
        assert_error_envelope(
            await _handle_update_monitor(client, webset_id="ws_1", monitor_id="m_1"),
            error_code="VALIDATION_ERROR",
            message_prefix="Update monitor error:",
        )
        assert exa_api.requests == []


class TestWebhooksAndEvents:
    @pytest.mark.asyncio
    async def test_create_webhook(self, exa_api, client):
        exa_api.add("POST", "/websets/v0/webhooks", {"id": "wh_1"})

        await _handle_create_webhook(
            client, url="https://hooks.example/exa", events=["webset.item.created"], secret="s3"
        )

        assert exa_api.body() == {
            "url": "https://hooks.example/exa",
            "events": ["webset.item.created"],
            "secret": "s3",
        }

    @pytest.mark.asyncio
    async def test_create_webhook_requires_events(self, exa_api, client):
        payload = assert_error_envelope(
            await _handle_create_webhook(client, url="https://hooks.example/exa", events=[]),
            error_code="VALIDATION_ERROR",
        )
        assert payload["data"]["details"] == {"field": "events"}

    @pytest.mark.asyncio
    async def test_list_webhook_attempts_params(self, exa_api, client):
        exa_api.add("GET", "/websets/v0/webhooks/wh_1/attempts", {"data": [], "hasMore": False})

        await _handle_list_webhook_attempts(
            client, webhook_id="wh_1", event_type="webset.created", limit=10
        )

        assert dict(exa_api.last_request.url.params) == {
            "eventType": "webset.created",
            "limit": "10",
        }

    @pytest.mark.asyncio
    async def test_list_events_params(self, exa_api, client):
        exa_api.add("GET", "/websets/v0/events", {"data": [{"id": "ev_1"}], "hasMore": False})

        payload = json.loads(
            await _handle_list_events(client, webset_id="ws_1", cursor="c1")
        )

        assert dict(exa_api.last_request.url.params) == {"websetId": "ws_1", "cursor": "c1"}
        assert payload["data"][0]["id"] == "ev_1"

    @pytest.mark.asyncio
    async def test_get_event_error(self, exa_api, client):
        exa_api.add("GET", "/websets/v0/events/ev_x", (404, {"error": "Event not found"}))

        assert_error_envelope(
            await _handle_get_event(client, event_id="ev_x"),
            error_code="NOT_FOUND",
            message_prefix="Get event error (404): Event not found",
        )
