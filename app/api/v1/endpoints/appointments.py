"""Appointment endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Query, status

from app.dependencies import AppointmentServiceDep
from app.schemas.appointments import AppointmentDetailResponse, AppointmentResponse
from app.schemas.common import ApiResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[AppointmentResponse]],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    service: AppointmentServiceDep,
    page: str | None = Query(None, description="Page number (default 1)"),
    limit: str | None = Query(None, description="Items per page (default 10)"),
    status_filter: str | None = Query(None, alias="status"),
    provider_specialty: str | None = Query(None, alias="providerSpecialty"),
    start_date: str | None = Query(None, alias="startDate", description="Inclusive lower bound"),
    end_date: str | None = Query(None, alias="endDate", description="Inclusive upper bound"),
    search: str | None = Query(None, description="Patient name/email, provider name or reason"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder", description="asc or desc"),
) -> ApiResponse[list[AppointmentResponse]]:
    """
    List appointments with filtering, search, sorting and pagination.

    Malformed paging or date values fall back to defaults instead of failing.

    Returns:
        Page of appointments and pagination envelope
    """
    params = {
        "page": page,
        "limit": limit,
        "status": status_filter,
        "providerSpecialty": provider_specialty,
        "startDate": start_date,
        "endDate": end_date,
        "search": search,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    items, pagination = await service.list_appointments(params)
    return ApiResponse(success=True, data=items, pagination=pagination)


@router.get(
    "/patient/{email}",
    response_model=ApiResponse[list[AppointmentResponse]],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="List appointments for a patient",
)
async def list_patient_appointments(
    email: str,
    service: AppointmentServiceDep,
) -> ApiResponse[list[AppointmentResponse]]:
    """
    List all appointments booked under a patient email, soonest first.

    Args:
        email: Patient email
        service: Appointment service

    Returns:
        Unpaginated list of appointments
    """
    items = await service.list_by_patient(email)
    return ApiResponse(success=True, data=items)


@router.get(
    "/{appointment_id}",
    response_model=ApiResponse[AppointmentDetailResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: str,
    service: AppointmentServiceDep,
) -> ApiResponse[AppointmentDetailResponse]:
    """
    Get a specific appointment by ID.

    Args:
        appointment_id: Appointment ID
        service: Appointment service

    Returns:
        Appointment with full provider detail
    """
    appointment = await service.get_appointment(appointment_id)
    return ApiResponse(success=True, data=appointment)


@router.post(
    "",
    response_model=ApiResponse[AppointmentDetailResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create new appointment",
)
async def create_appointment(
    service: AppointmentServiceDep,
    payload: dict[str, Any] = Body(default_factory=dict),
) -> ApiResponse[AppointmentDetailResponse]:
    """
    Book a new appointment.

    Required: patientName, patientEmail, patientPhone, providerName,
    providerSpecialty, appointmentDate, appointmentTime, reason.
    Optional: provider (provider ID), status, notes.

    Returns:
        Created appointment
    """
    appointment = await service.create_appointment(payload)
    return ApiResponse(success=True, data=appointment)


@router.put(
    "/{appointment_id}",
    response_model=ApiResponse[AppointmentDetailResponse],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Update appointment",
)
async def update_appointment(
    appointment_id: str,
    service: AppointmentServiceDep,
    payload: dict[str, Any] = Body(default_factory=dict),
) -> ApiResponse[AppointmentDetailResponse]:
    """
    Update an existing appointment. Only submitted fields change.

    Returns:
        Updated appointment
    """
    appointment = await service.update_appointment(appointment_id, payload)
    return ApiResponse(success=True, data=appointment)


@router.delete(
    "/{appointment_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="Delete appointment",
)
async def delete_appointment(
    appointment_id: str,
    service: AppointmentServiceDep,
) -> ApiResponse[None]:
    """
    Permanently delete an appointment.

    Args:
        appointment_id: Appointment ID
        service: Appointment service
    """
    await service.delete_appointment(appointment_id)
    return ApiResponse(success=True, message="Appointment deleted successfully")
