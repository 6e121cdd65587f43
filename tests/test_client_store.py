"""Tests for the client-side appointment store."""

import httpx
import pytest
from httpx import AsyncClient

from app.client.store import NON_JSON_MESSAGE, AppointmentStore


@pytest.fixture
def store(client: AsyncClient) -> AppointmentStore:
    """Store talking to the test application."""
    return AppointmentStore(client=client)


def _store_with(handler) -> AppointmentStore:
    transport = httpx.MockTransport(handler)
    return AppointmentStore(client=httpx.AsyncClient(transport=transport, base_url="http://test"))


@pytest.mark.asyncio
async def test_create_and_fetch_appointments(
    store: AppointmentStore,
    sample_appointment_data: dict,
) -> None:
    """Test that a created appointment is appended without a refetch."""
    result = await store.create_appointment(sample_appointment_data)

    assert result.success is True
    assert result.message == "Appointment booked successfully"
    assert [item["id"] for item in store.appointments] == [result.data["id"]]
    assert store.loading is False
    assert store.error is None

    store.appointments = []
    fetched = await store.fetch_appointments(status="scheduled", search=None)
    assert fetched.success is True
    assert fetched.pagination == {"page": 1, "limit": 10, "total": 1, "pages": 1}
    assert store.appointments[0]["patientName"] == sample_appointment_data["patientName"]


@pytest.mark.asyncio
async def test_create_appointment_missing_fields_skips_request() -> None:
    """Test the required-field pre-check."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    store = _store_with(handler)

    result = await store.create_appointment({"patientName": "John Doe"})

    assert result.success is False
    assert result.message == "Please fill in all required fields"
    assert store.appointments == []


@pytest.mark.asyncio
async def test_update_and_delete_appointment(
    store: AppointmentStore,
    created_appointment: dict,
) -> None:
    """Test that update replaces and delete removes the cached item."""
    await store.fetch_appointments()
    appointment_id = created_appointment["id"]

    updated = await store.update_appointment(appointment_id, {"status": "completed"})
    assert updated.success is True
    assert store.appointments[0]["status"] == "completed"

    deleted = await store.delete_appointment(appointment_id)
    assert deleted.success is True
    assert deleted.message == "Appointment cancelled successfully"
    assert store.appointments == []


@pytest.mark.asyncio
async def test_server_validation_error_is_surfaced(
    store: AppointmentStore,
    sample_appointment_data: dict,
) -> None:
    """Test that the server's message and field errors reach the caller."""
    payload = {**sample_appointment_data, "reason": "too short"}

    result = await store.create_appointment(payload)

    assert result.success is False
    assert result.message == "Validation error"
    assert result.errors == ["Reason must be at least 10 characters long"]
    assert store.error == "Validation error"
    assert store.loading is False
    assert store.appointments == []


@pytest.mark.asyncio
async def test_get_appointments_by_patient_leaves_cache(
    store: AppointmentStore,
    created_appointment: dict,
) -> None:
    """Test that patient lookup returns data without changing the cache."""
    result = await store.get_appointments_by_patient(created_appointment["patientEmail"])

    assert result.success is True
    assert [item["id"] for item in result.data] == [created_appointment["id"]]
    assert store.appointments == []


@pytest.mark.asyncio
async def test_provider_operations(store: AppointmentStore, sample_provider_data: dict) -> None:
    """Test provider create, update, fetch and delete through the store."""
    created = await store.create_provider(sample_provider_data)
    assert created.success is True
    assert created.message == "Provider added successfully"
    provider_id = created.data["id"]

    updated = await store.update_provider(provider_id, {"specialty": "Interventional Cardiology"})
    assert updated.success is True
    assert store.providers[0]["specialty"] == "Interventional Cardiology"

    duplicate = await store.create_provider(sample_provider_data)
    assert duplicate.success is False
    assert duplicate.message == "Provider with this email already exists"
    assert len(store.providers) == 1

    store.providers = []
    await store.fetch_providers(specialty="cardio")
    assert [p["id"] for p in store.providers] == [provider_id]

    deleted = await store.delete_provider(provider_id)
    assert deleted.success is True
    assert store.providers == []


@pytest.mark.asyncio
async def test_non_json_error_response() -> None:
    """Test a failure status with a non-JSON body."""
    store = _store_with(lambda request: httpx.Response(500, text="Internal Server Error"))

    async with store:
        result = await store.fetch_appointments()

    assert result.success is False
    assert result.message == "Server Error: 500"
    assert store.error == "Server Error: 500"


@pytest.mark.asyncio
async def test_non_json_success_response() -> None:
    """Test a success status with an HTML body."""
    store = _store_with(
        lambda request: httpx.Response(
            200, text="<html></html>", headers={"content-type": "text/html"}
        )
    )

    async with store:
        result = await store.fetch_providers()

    assert result.success is False
    assert result.message == NON_JSON_MESSAGE


@pytest.mark.asyncio
async def test_json_error_without_message() -> None:
    """Test a JSON error body that carries no message."""
    store = _store_with(lambda request: httpx.Response(400, json={"success": False}))

    async with store:
        result = await store.delete_appointment("abc")

    assert result.success is False
    assert result.message == "Server Error: 400"


@pytest.mark.asyncio
async def test_network_failure() -> None:
    """Test that a transport error is reported with its description."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    store = _store_with(handler)

    async with store:
        result = await store.fetch_appointments()

    assert result.success is False
    assert result.message == "Error: Connection refused"
    assert store.loading is False


@pytest.mark.asyncio
async def test_request_path_uses_prefix() -> None:
    """Test that requests go to the API prefix with encoded patient email."""
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        return httpx.Response(200, json={"success": True, "data": []})

    store = _store_with(handler)

    async with store:
        await store.get_appointments_by_patient("jane doe@email.com")

    assert seen == ["/api/appointments/patient/jane%20doe@email.com"]
