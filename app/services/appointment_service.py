"""Appointment service for business logic."""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from pydantic import ValidationError
from sqlalchemy import delete, func, insert, select, update

from app.config import settings
from app.core.exceptions import MissingFieldsException, NotFoundException, ValidationException
from app.core.query_builder import build_appointment_query, patient_order_by
from app.core.validation import collect_errors, find_missing_fields, submitted_fields
from app.models.appointments import appointments
from app.models.providers import providers
from app.schemas.appointments import (
    APPOINTMENT_REQUIRED_FIELDS,
    AppointmentCreate,
    AppointmentDetailResponse,
    AppointmentRecord,
    AppointmentResponse,
)
from app.schemas.common import PaginationMeta
from app.schemas.providers import ProviderResponse, ProviderSummary
from app.services.base import BaseService

logger = structlog.get_logger()


class AppointmentService(BaseService):
    """Service for managing appointments."""

    resource = "Appointment"

    async def list_appointments(
        self,
        params: Mapping[str, Any],
    ) -> tuple[list[AppointmentResponse], PaginationMeta]:
        """
        List appointments with filtering, search, sorting and pagination.

        Args:
            params: Raw query parameters

        Returns:
            Page of appointments with provider summaries and the pagination envelope
        """
        query = build_appointment_query(params, default_limit=settings.default_page_size)

        count_stmt = select(func.count()).select_from(appointments).where(query.where)
        total = (await self.execute(count_stmt)).scalar() or 0

        stmt = (
            select(appointments)
            .where(query.where)
            .order_by(*query.order_by)
            .limit(query.page.limit)
            .offset(query.page.offset)
        )
        rows = (await self.execute(stmt)).mappings().all()

        items = await self._with_summaries(rows)
        return items, PaginationMeta.build(query.page.page, query.page.limit, total)

    async def list_by_patient(self, email: str) -> list[AppointmentResponse]:
        """
        List every appointment booked under a patient email.

        Args:
            email: Patient email, matched exactly

        Returns:
            Appointments ordered by date then time
        """
        stmt = (
            select(appointments)
            .where(appointments.c.patient_email == email)
            .order_by(*patient_order_by())
        )
        rows = (await self.execute(stmt)).mappings().all()
        return await self._with_summaries(rows)

    async def get_appointment(self, appointment_id: str) -> AppointmentDetailResponse:
        """
        Get appointment by ID.

        Raises:
            InvalidIdException: If the ID is malformed
            NotFoundException: If appointment not found
        """
        row = await self._get_row(self.parse_id(appointment_id))
        return await self._with_detail(row)

    async def create_appointment(self, payload: Mapping[str, Any]) -> AppointmentDetailResponse:
        """
        Create a new appointment.

        Args:
            payload: Raw request body

        Returns:
            Created appointment with provider detail when a reference was given

        Raises:
            MissingFieldsException: If required fields are absent
            ValidationException: If a field has an invalid format or the date is past
        """
        missing = find_missing_fields(payload, APPOINTMENT_REQUIRED_FIELDS)
        if missing:
            raise MissingFieldsException(missing)

        try:
            record = AppointmentCreate.model_validate(payload)
        except ValidationError as e:
            raise ValidationException(collect_errors(e)) from e

        stmt = insert(appointments).values(id=uuid4(), **record.to_values()).returning(appointments)
        row = (await self.execute(stmt)).mappings().first()
        await self.commit()

        logger.info(
            "appointment_created",
            appointment_id=str(row["id"]),
            provider_id=str(record.provider) if record.provider else None,
        )
        return await self._with_detail(row)

    async def update_appointment(
        self,
        appointment_id: str,
        payload: Mapping[str, Any],
    ) -> AppointmentDetailResponse:
        """
        Update an existing appointment with the submitted fields.

        Format rules are re-run on the merged record. The future-date rule is
        not: an appointment may be moved into the past.

        Raises:
            InvalidIdException: If the ID is malformed
            NotFoundException: If appointment not found
            ValidationException: If the merged record is invalid
        """
        record_id = self.parse_id(appointment_id)
        existing = await self._get_row(record_id)

        submitted = submitted_fields(AppointmentRecord, payload)
        merged = AppointmentRecord.field_values_from_row(existing)
        merged.update(submitted)

        try:
            record = AppointmentRecord.model_validate(merged)
        except ValidationError as e:
            raise ValidationException(collect_errors(e)) from e

        if not submitted:
            return await self._with_detail(existing)

        stmt = (
            update(appointments)
            .where(appointments.c.id == record_id)
            .values(**record.to_values(set(submitted)), updated_at=datetime.now(UTC))
            .returning(appointments)
        )
        row = (await self.execute(stmt)).mappings().first()
        await self.commit()
        if row is None:
            raise NotFoundException("Appointment not found")

        logger.info("appointment_updated", appointment_id=appointment_id, fields=sorted(submitted))
        return await self._with_detail(row)

    async def delete_appointment(self, appointment_id: str) -> None:
        """
        Permanently delete an appointment.

        Raises:
            InvalidIdException: If the ID is malformed
            NotFoundException: If appointment not found
        """
        record_id = self.parse_id(appointment_id)

        stmt = (
            delete(appointments)
            .where(appointments.c.id == record_id)
            .returning(appointments.c.id)
        )
        deleted = (await self.execute(stmt)).first()
        if deleted is None:
            await self.db.rollback()
            raise NotFoundException("Appointment not found")
        await self.commit()

        logger.info("appointment_deleted", appointment_id=appointment_id)

    async def _get_row(self, record_id: UUID) -> Any:
        stmt = select(appointments).where(appointments.c.id == record_id)
        row = (await self.execute(stmt)).mappings().first()
        if row is None:
            raise NotFoundException("Appointment not found")
        return row

    async def _load_providers(self, provider_ids: set[UUID]) -> dict[UUID, Any]:
        """Resolve provider references; dangling ones are simply absent."""
        if not provider_ids:
            return {}
        stmt = select(providers).where(providers.c.id.in_(provider_ids))
        rows = (await self.execute(stmt)).mappings().all()
        return {row["id"]: row for row in rows}

    async def _with_summaries(self, rows: Sequence[Any]) -> list[AppointmentResponse]:
        found = await self._load_providers(
            {row["provider_id"] for row in rows if row["provider_id"] is not None}
        )
        items = []
        for row in rows:
            provider_row = found.get(row["provider_id"])
            summary = (
                ProviderSummary.model_validate(dict(provider_row)) if provider_row else None
            )
            items.append(AppointmentResponse.from_row(row, summary))
        return items

    async def _with_detail(self, row: Any) -> AppointmentDetailResponse:
        detail = None
        if row["provider_id"] is not None:
            found = await self._load_providers({row["provider_id"]})
            provider_row = found.get(row["provider_id"])
            if provider_row is not None:
                detail = ProviderResponse.from_row(provider_row)
        return AppointmentDetailResponse.from_row(row, detail)
