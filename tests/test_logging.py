"""Tests for request logging."""

from types import SimpleNamespace

import pytest
from fastapi import Request
from httpx import AsyncClient
from structlog.testing import capture_logs

from app.middleware.logging import route_context


def _request(route=None) -> Request:
    scope = {"type": "http", "method": "GET", "path": "/", "headers": []}
    if route is not None:
        scope["route"] = route
    return Request(scope)


def test_route_context_names_resource() -> None:
    """Test that the resource is the first segment after the API prefix."""
    route = SimpleNamespace(path="/api/appointments/patient/{email}")

    assert route_context(_request(route)) == {
        "route": "/api/appointments/patient/{email}",
        "resource": "appointments",
    }


def test_route_context_without_match() -> None:
    """Test unmatched requests carry no route."""
    assert route_context(_request()) == {"route": None, "resource": None}


@pytest.mark.asyncio
async def test_request_completed_logs_route(
    client: AsyncClient,
    created_provider: dict,
) -> None:
    """Test that the completion log names the route template and resource."""
    with capture_logs() as logs:
        response = await client.get(
            f"/api/providers/{created_provider['id']}",
            headers={"X-Request-ID": "req-123"},
        )

    assert response.headers["X-Request-ID"] == "req-123"
    completed = [entry for entry in logs if entry["event"] == "request_completed"]
    assert len(completed) == 1
    assert completed[0]["route"] == "/api/providers/{provider_id}"
    assert completed[0]["resource"] == "providers"
    assert completed[0]["status_code"] == 200
