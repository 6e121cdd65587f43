"""Provider service for business logic."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
from pydantic import ValidationError
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.core.exceptions import (
    DatabaseException,
    DuplicateKeyException,
    MissingFieldsException,
    NotFoundException,
    ValidationException,
)
from app.core.query_builder import build_provider_query
from app.core.validation import collect_errors, find_missing_fields, submitted_fields
from app.models.providers import providers
from app.schemas.common import PaginationMeta
from app.schemas.providers import (
    PROVIDER_REQUIRED_FIELDS,
    ProviderRecord,
    ProviderResponse,
)
from app.services.base import BaseService

logger = structlog.get_logger()

DUPLICATE_EMAIL_MESSAGE = "Provider with this email already exists"


class ProviderService(BaseService):
    """Service for managing providers."""

    resource = "Provider"

    async def list_providers(
        self,
        params: Mapping[str, Any],
    ) -> tuple[list[ProviderResponse], PaginationMeta]:
        """
        List providers with filtering, search and pagination.

        Args:
            params: Raw query parameters

        Returns:
            Page of providers and the pagination envelope
        """
        query = build_provider_query(params, default_limit=settings.default_page_size)

        count_stmt = select(func.count()).select_from(providers).where(query.where)
        total = (await self.execute(count_stmt)).scalar() or 0

        stmt = (
            select(providers)
            .where(query.where)
            .order_by(*query.order_by)
            .limit(query.page.limit)
            .offset(query.page.offset)
        )
        rows = (await self.execute(stmt)).mappings().all()

        items = [ProviderResponse.from_row(row) for row in rows]
        return items, PaginationMeta.build(query.page.page, query.page.limit, total)

    async def get_provider(self, provider_id: str) -> ProviderResponse:
        """
        Get provider by ID.

        Raises:
            InvalidIdException: If the ID is malformed
            NotFoundException: If provider not found
        """
        row = await self._get_row(self.parse_id(provider_id))
        return ProviderResponse.from_row(row)

    async def create_provider(self, payload: Mapping[str, Any]) -> ProviderResponse:
        """
        Create a new provider.

        Args:
            payload: Raw request body

        Returns:
            Created provider

        Raises:
            MissingFieldsException: If required fields are absent
            ValidationException: If a field has an invalid format
            DuplicateKeyException: If the email is already registered
        """
        missing = find_missing_fields(payload, PROVIDER_REQUIRED_FIELDS)
        if missing:
            raise MissingFieldsException(missing)

        try:
            record = ProviderRecord.model_validate(payload)
        except ValidationError as e:
            raise ValidationException(collect_errors(e)) from e

        stmt = insert(providers).values(id=uuid4(), **record.to_values()).returning(providers)
        row = await self._write(stmt, record.email)

        logger.info("provider_created", provider_id=str(row["id"]))
        return ProviderResponse.from_row(row)

    async def update_provider(
        self,
        provider_id: str,
        payload: Mapping[str, Any],
    ) -> ProviderResponse:
        """
        Update an existing provider with the submitted fields.

        The merged record is validated as a whole before it is written.
        `availableHours` merges key by key; null restores 09:00-17:00.

        Raises:
            InvalidIdException: If the ID is malformed
            NotFoundException: If provider not found
            ValidationException: If the merged record is invalid
            DuplicateKeyException: If the new email is already registered
        """
        record_id = self.parse_id(provider_id)
        existing = await self._get_row(record_id)

        merged: dict[str, Any] = {
            "name": existing["name"],
            "specialty": existing["specialty"],
            "email": existing["email"],
            "phone": existing["phone"],
            "available_hours": {
                "start": existing["available_hours_start"],
                "end": existing["available_hours_end"],
            },
            "available_days": existing["available_days"] or [],
        }
        submitted = submitted_fields(ProviderRecord, payload)
        hours = submitted.get("available_hours")
        if isinstance(hours, Mapping):
            # Partial hours keep the stored start or end
            submitted["available_hours"] = {**merged["available_hours"], **hours}
        merged.update(submitted)

        try:
            record = ProviderRecord.model_validate(merged)
        except ValidationError as e:
            raise ValidationException(collect_errors(e)) from e

        if not submitted:
            return ProviderResponse.from_row(existing)

        stmt = (
            update(providers)
            .where(providers.c.id == record_id)
            .values(**record.to_values(), updated_at=datetime.now(UTC))
            .returning(providers)
        )
        row = await self._write(stmt, record.email)
        if row is None:
            raise NotFoundException("Provider not found")

        logger.info("provider_updated", provider_id=provider_id, fields=sorted(submitted))
        return ProviderResponse.from_row(row)

    async def delete_provider(self, provider_id: str) -> None:
        """
        Delete a provider.

        Appointments referencing the provider are left untouched.

        Raises:
            InvalidIdException: If the ID is malformed
            NotFoundException: If provider not found
        """
        record_id = self.parse_id(provider_id)

        stmt = delete(providers).where(providers.c.id == record_id).returning(providers.c.id)
        deleted = (await self.execute(stmt)).first()
        if deleted is None:
            await self.db.rollback()
            raise NotFoundException("Provider not found")
        await self.commit()

        logger.info("provider_deleted", provider_id=provider_id)

    async def _get_row(self, record_id: Any) -> Any:
        stmt = select(providers).where(providers.c.id == record_id)
        row = (await self.execute(stmt)).mappings().first()
        if row is None:
            raise NotFoundException("Provider not found")
        return row

    async def _write(self, stmt: Any, email: str) -> Any:
        """Run an insert/update, mapping a unique email violation to a duplicate-key error."""
        try:
            result = await self.execute(stmt)
            row = result.mappings().first()
            await self.commit()
        except IntegrityError as e:
            error_msg = str(e.orig) if e.orig is not None else str(e)
            if "providers_email_key" in error_msg or "providers.email" in error_msg:
                logger.warning("provider_duplicate_email", email=email)
                raise DuplicateKeyException(DUPLICATE_EMAIL_MESSAGE) from e
            logger.error("database_error", resource=self.resource, error=error_msg)
            raise DatabaseException(error_msg) from e
        return row

