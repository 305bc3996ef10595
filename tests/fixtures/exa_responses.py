"""Builders for Exa API response payloads used across tests."""

from typing import Any, Dict, List, Optional


def search_result(
    url: str = "https://example.com/article",
    title: str = "Example Article",
    **extra: Any,
) -> Dict[str, Any]:
    result = {
        "id": url,
        "url": url,
        "title": title,
        "publishedDate": "2024-05-01T00:00:00.000Z",
        "author": "Jane Doe",
        "score": 0.91,
    }
    result.update(extra)
    return result


def search_response(results: Optional[List[Dict[str, Any]]] = None, request_id: str = "req-1") -> Dict[str, Any]:
    return {
        "requestId": request_id,
        "resolvedSearchType": "neural",
        "results": results if results is not None else [search_result()],
    }


def research_task(task_id: str = "task-1") -> Dict[str, Any]:
    return {"taskId": task_id}


def research_status(
    status: str,
    *,
    report: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    error: Any = None,
    request_id: str = "req-research",
    task_id: str = "task-1",
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"taskId": task_id, "status": status, "requestId": request_id}
    result: Dict[str, Any] = {}
    if report is not None:
        result["report"] = report
    if data is not None:
        result["data"] = data
    if result:
        payload["result"] = result
    if error is not None:
        payload["error"] = error
    return payload


def webset(webset_id: str = "ws_1", status: str = "idle", **extra: Any) -> Dict[str, Any]:
    payload = {
        "id": webset_id,
        "object": "webset",
        "status": status,
        "externalId": None,
        "searches": [{"id": "s_1"}],
        "enrichments": [],
        "monitors": [],
        "metadata": {},
        "createdAt": "2024-05-01T00:00:00Z",
        "updatedAt": "2024-05-02T00:00:00Z",
    }
    payload.update(extra)
    return payload


def webset_item(
    item_id: str,
    *,
    url: str,
    title: Optional[str] = None,
    item_type: str = "company",
    verification: str = "verified",
    enriched: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "id": item_id,
        "object": "webset_item",
        "websetId": "ws_1",
        "url": url,
        "title": title,
        "type": item_type,
        "verification": {"status": verification},
        "enrichedData": enriched or {},
        "createdAt": "2024-05-01T00:00:00Z",
        "updatedAt": "2024-05-01T00:00:00Z",
    }


def page(data: List[Any], *, has_more: bool = False, next_cursor: Optional[str] = None) -> Dict[str, Any]:
    return {"data": data, "hasMore": has_more, "nextCursor": next_cursor}
