"""Client-side cache of appointments and providers.

``AppointmentStore`` is the state object a UI layer owns: it mirrors the
server collections, tracks a loading flag and the last error, and exposes
one coroutine per API operation.
"""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from app.core.validation import find_missing_fields
from app.schemas.appointments import APPOINTMENT_REQUIRED_FIELDS

logger = structlog.get_logger()

NON_JSON_MESSAGE = "Server returned non-JSON response"


@dataclass
class StoreResult:
    """Outcome of a store operation, suitable for a transient notification."""

    success: bool
    message: str = ""
    data: Any = None
    errors: list[str] = field(default_factory=list)
    pagination: dict[str, int] | None = None


class AppointmentStore:
    """
    Application state for the booking UI.

    Write operations update the cached collections from the record the
    server returns; they never trigger a refetch.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        api_prefix: str = "/api",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        """
        Initialize an empty store.

        Args:
            base_url: Server origin, used when no client is given
            api_prefix: Path prefix of the API routes
            client: Pre-configured HTTP client (the store will not close it)
            timeout: Request timeout for the store's own client
        """
        self.appointments: list[dict[str, Any]] = []
        self.providers: list[dict[str, Any]] = []
        self.loading = False
        self.error: str | None = None
        self.api_prefix = api_prefix.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "AppointmentStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if the store created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    async def fetch_appointments(self, **params: Any) -> StoreResult:
        """Replace the cached appointments with a fresh page from the server."""
        result = await self._request("GET", "/appointments", params=_clean(params))
        if result.success:
            self.appointments = list(result.data or [])
        return result

    async def create_appointment(self, appointment: dict[str, Any]) -> StoreResult:
        """Book an appointment and append it to the cache."""
        if find_missing_fields(appointment, APPOINTMENT_REQUIRED_FIELDS):
            return StoreResult(success=False, message="Please fill in all required fields")

        result = await self._request("POST", "/appointments", json=appointment)
        if result.success:
            self.appointments = [*self.appointments, result.data]
            result.message = "Appointment booked successfully"
        return result

    async def update_appointment(
        self,
        appointment_id: str,
        changes: dict[str, Any],
    ) -> StoreResult:
        """Update an appointment and replace it in the cache."""
        result = await self._request("PUT", f"/appointments/{appointment_id}", json=changes)
        if result.success:
            self.appointments = _replace(self.appointments, appointment_id, result.data)
            result.message = "Appointment updated successfully"
        return result

    async def delete_appointment(self, appointment_id: str) -> StoreResult:
        """Delete an appointment and drop it from the cache."""
        result = await self._request("DELETE", f"/appointments/{appointment_id}")
        if result.success:
            self.appointments = _remove(self.appointments, appointment_id)
            result.message = "Appointment cancelled successfully"
        return result

    async def get_appointments_by_patient(self, email: str) -> StoreResult:
        """Look up a patient's appointments without touching the cache."""
        return await self._request("GET", f"/appointments/patient/{quote(email, safe='@')}")

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    async def fetch_providers(self, **params: Any) -> StoreResult:
        """Replace the cached providers with a fresh page from the server."""
        result = await self._request("GET", "/providers", params=_clean(params))
        if result.success:
            self.providers = list(result.data or [])
        return result

    async def create_provider(self, provider: dict[str, Any]) -> StoreResult:
        """Register a provider and append it to the cache."""
        result = await self._request("POST", "/providers", json=provider)
        if result.success:
            self.providers = [*self.providers, result.data]
            result.message = "Provider added successfully"
        return result

    async def update_provider(self, provider_id: str, changes: dict[str, Any]) -> StoreResult:
        """Update a provider and replace it in the cache."""
        result = await self._request("PUT", f"/providers/{provider_id}", json=changes)
        if result.success:
            self.providers = _replace(self.providers, provider_id, result.data)
            result.message = "Provider updated successfully"
        return result

    async def delete_provider(self, provider_id: str) -> StoreResult:
        """Delete a provider and drop it from the cache."""
        result = await self._request("DELETE", f"/providers/{provider_id}")
        if result.success:
            self.providers = _remove(self.providers, provider_id)
            result.message = "Provider deleted successfully"
        return result

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> StoreResult:
        self.loading = True
        self.error = None

        try:
            response = await self._client.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as e:
            return self._fail(f"Error: {e}", method=method, path=path)

        is_json = "application/json" in response.headers.get("content-type", "")
        body: Any = None
        if is_json:
            try:
                body = response.json()
            except ValueError:
                is_json = False

        if response.is_error:
            if is_json and isinstance(body, dict):
                return self._fail(
                    body.get("message") or f"Server Error: {response.status_code}",
                    errors=body.get("errors") or [],
                    method=method,
                    path=path,
                )
            return self._fail(f"Server Error: {response.status_code}", method=method, path=path)

        if not is_json or not isinstance(body, dict):
            return self._fail(NON_JSON_MESSAGE, method=method, path=path)

        if not body.get("success"):
            return self._fail(
                body.get("message") or "Request failed",
                errors=body.get("errors") or [],
                method=method,
                path=path,
            )

        self.loading = False
        return StoreResult(
            success=True,
            message=body.get("message") or "",
            data=body.get("data"),
            pagination=body.get("pagination"),
        )

    def _fail(
        self,
        message: str,
        errors: list[str] | None = None,
        **context: Any,
    ) -> StoreResult:
        self.error = message
        self.loading = False
        logger.warning("store_request_failed", message=message, **context)
        return StoreResult(success=False, message=message, errors=errors or [])


def _clean(params: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def _replace(
    items: list[dict[str, Any]],
    item_id: str,
    record: dict[str, Any],
) -> list[dict[str, Any]]:
    return [record if item.get("id") == item_id else item for item in items]


def _remove(items: list[dict[str, Any]], item_id: str) -> list[dict[str, Any]]:
    return [item for item in items if item.get("id") != item_id]
