"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.appointment_service import AppointmentService
from app.services.provider_service import ProviderService

DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def get_appointment_service(db: DatabaseSession) -> AppointmentService:
    """Get appointment service bound to the request session."""
    return AppointmentService(db)


def get_provider_service(db: DatabaseSession) -> ProviderService:
    """Get provider service bound to the request session."""
    return ProviderService(db)


# Type aliases for dependency injection
AppointmentServiceDep = Annotated[AppointmentService, Depends(get_appointment_service)]
ProviderServiceDep = Annotated[ProviderService, Depends(get_provider_service)]
