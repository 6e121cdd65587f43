"""Provider endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Query, status

from app.dependencies import ProviderServiceDep
from app.schemas.common import ApiResponse
from app.schemas.providers import ProviderResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[ProviderResponse]],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="List providers",
)
async def list_providers(
    service: ProviderServiceDep,
    page: str | None = Query(None, description="Page number (default 1)"),
    limit: str | None = Query(None, description="Items per page (default 10)"),
    specialty: str | None = Query(None, description="Case-insensitive specialty substring"),
    search: str | None = Query(None, description="Name, specialty or email"),
) -> ApiResponse[list[ProviderResponse]]:
    """
    List providers ordered by name.

    - **specialty**: Filter by specialty (substring, any case)
    - **search**: Free text over name, specialty and email
    - **page/limit**: Pagination
    """
    params = {"page": page, "limit": limit, "specialty": specialty, "search": search}
    items, pagination = await service.list_providers(params)
    return ApiResponse(success=True, data=items, pagination=pagination)


@router.get(
    "/{provider_id}",
    response_model=ApiResponse[ProviderResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Get provider by ID",
)
async def get_provider(
    provider_id: str,
    service: ProviderServiceDep,
) -> ApiResponse[ProviderResponse]:
    """Get a specific provider by ID."""
    provider = await service.get_provider(provider_id)
    return ApiResponse(success=True, data=provider)


@router.post(
    "",
    response_model=ApiResponse[ProviderResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create provider",
)
async def create_provider(
    service: ProviderServiceDep,
    payload: dict[str, Any] = Body(default_factory=dict),
) -> ApiResponse[ProviderResponse]:
    """
    Register a new provider.

    - **name**, **specialty**, **email** (unique), **phone**: required
    - **availableHours**: `{start, end}`, defaults to 09:00-17:00
    - **availableDays**: weekday names
    """
    provider = await service.create_provider(payload)
    return ApiResponse(success=True, data=provider)


@router.put(
    "/{provider_id}",
    response_model=ApiResponse[ProviderResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Update provider",
)
async def update_provider(
    provider_id: str,
    service: ProviderServiceDep,
    payload: dict[str, Any] = Body(default_factory=dict),
) -> ApiResponse[ProviderResponse]:
    """Update an existing provider. Only submitted fields change."""
    provider = await service.update_provider(provider_id, payload)
    return ApiResponse(success=True, data=provider)


@router.delete(
    "/{provider_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Delete provider",
)
async def delete_provider(
    provider_id: str,
    service: ProviderServiceDep,
) -> ApiResponse[None]:
    """Delete a provider. Appointments that reference it are kept."""
    await service.delete_provider(provider_id)
    return ApiResponse(success=True, message="Provider deleted successfully")
