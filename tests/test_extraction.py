"""Tests for the AI extraction proxy."""

import json

import httpx
import pytest

from expense_tracker.api.dependencies import get_extraction_service
from expense_tracker.config import Settings
from expense_tracker.errors import InternalError
from expense_tracker.services.extraction import ExtractionService

API_URL = "https://extractor.test/extract"

PAYLOAD = {
    "input_data": {
        "paragraph": "Spent 12 on lunch and 30 on a taxi yesterday",
        "categories": [{"category_id": "1", "name": "Food & Dining", "is_default": True}],
    },
    "conversation_history": [],
}

UPSTREAM_BODY = {
    "output_data": {
        "expenses": [
            {"name": "Lunch", "category_id": 1, "unit": 1, "per_unit_cost": 12},
        ]
    }
}


def _settings(api_key: str | None = "secret-key") -> Settings:
    return Settings(ai_expense_api_url=API_URL, ai_expense_api_key=api_key)


def _service(handler, api_key: str | None = "secret-key") -> ExtractionService:
    return ExtractionService(settings=_settings(api_key), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_forwards_request_unchanged():
    """Test that the body and API key reach the upstream service as sent."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["api_key"] = request.headers.get("X-API-Key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=UPSTREAM_BODY)

    status_code, body = await _service(handler).extract(PAYLOAD)

    assert status_code == 200
    assert body == UPSTREAM_BODY
    assert seen == {"url": API_URL, "api_key": "secret-key", "body": PAYLOAD}


@pytest.mark.asyncio
async def test_upstream_status_passed_through():
    """Test that an upstream error status and body are relayed unchanged."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"detail": "paragraph too vague"})

    status_code, body = await _service(handler).extract(PAYLOAD)

    assert status_code == 422
    assert body == {"detail": "paragraph too vague"}


@pytest.mark.asyncio
async def test_not_configured():
    """Test that a missing API key fails before any request is made."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("upstream must not be called")

    with pytest.raises(InternalError, match="AI service not configured"):
        await _service(handler, api_key=None).extract(PAYLOAD)


@pytest.mark.asyncio
async def test_connection_failure():
    """Test that transport errors become an internal error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(InternalError, match="Failed to connect to AI service"):
        await _service(handler).extract(PAYLOAD)


@pytest.mark.asyncio
async def test_unparseable_response():
    """Test that a non-JSON upstream body becomes an internal error."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>Bad gateway</html>")

    with pytest.raises(InternalError, match="Failed to parse AI response"):
        await _service(handler).extract(PAYLOAD)


@pytest.fixture
def override_extraction(app):
    """Install an extraction service backed by the given handler."""

    def _override(handler, api_key: str | None = "secret-key"):
        app.dependency_overrides[get_extraction_service] = lambda: _service(handler, api_key)

    return _override


def test_extract_endpoint(client, auth_headers, override_extraction):
    """Test the endpoint relays the upstream response."""
    override_extraction(lambda request: httpx.Response(200, json=UPSTREAM_BODY))

    response = client.post("/api/expenses/extract", headers=auth_headers, json=PAYLOAD)
    assert response.status_code == 200
    assert response.json() == UPSTREAM_BODY


def test_extract_endpoint_requires_auth(client):
    """Test that extraction needs a token."""
    response = client.post("/api/expenses/extract", json=PAYLOAD)
    assert response.status_code == 401


def test_extract_endpoint_requires_paragraph(client, auth_headers, override_extraction):
    """Test that an empty paragraph is rejected before calling upstream."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("upstream must not be called")

    override_extraction(handler)

    response = client.post(
        "/api/expenses/extract",
        headers=auth_headers,
        json={"input_data": {"paragraph": "   "}},
    )
    assert response.status_code == 400
    assert response.json()["details"] == [
        {"field": "input_data.paragraph", "message": "is required"}
    ]


def test_extract_endpoint_not_configured(client, auth_headers, override_extraction):
    """Test that an unconfigured service reports a server error."""
    override_extraction(lambda request: httpx.Response(200, json={}), api_key=None)

    response = client.post("/api/expenses/extract", headers=auth_headers, json=PAYLOAD)
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "AI service not configured"}
