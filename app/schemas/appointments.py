"""Appointment schemas for request/response validation."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from app.core.validation import (
    NOTES_MAX_LENGTH,
    REASON_MIN_LENGTH,
    is_blank,
    is_valid_email,
    is_valid_phone,
    is_valid_time,
    parse_id,
)
from app.schemas.common import CamelModel, UtcDateTime, ensure_utc
from app.schemas.providers import ProviderResponse, ProviderSummary

APPOINTMENT_REQUIRED_FIELDS = (
    "patientName",
    "patientEmail",
    "patientPhone",
    "providerName",
    "providerSpecialty",
    "appointmentDate",
    "appointmentTime",
    "reason",
)


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


# ============================================================================
# Request Schemas
# ============================================================================


class AppointmentRecord(CamelModel):
    """
    Complete appointment as it must look before it is written.

    Validates the merged record on update. The future-date rule lives on
    ``AppointmentCreate`` only.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    provider: UUID | None = None
    patient_name: str
    patient_email: str
    patient_phone: str
    provider_name: str
    provider_specialty: str
    appointment_date: datetime
    appointment_time: str
    reason: str
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str = ""

    @field_validator(
        "patient_name",
        "patient_email",
        "patient_phone",
        "provider_name",
        "provider_specialty",
        "appointment_time",
        "reason",
        mode="before",
    )
    @classmethod
    def validate_required(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject empty required text."""
        if is_blank(v):
            raise PydanticCustomError(
                "field_required", "{field} is required", {"field": to_camel(info.field_name)}
            )
        return v

    @field_validator("provider", mode="before")
    @classmethod
    def validate_provider(cls, v: Any) -> Any:
        """Allow an absent reference, reject a malformed one."""
        if is_blank(v):
            return None
        if isinstance(v, UUID):
            return v
        if not isinstance(v, str) or parse_id(v) is None:
            raise PydanticCustomError("field_provider", "Invalid provider reference")
        return v

    @field_validator("patient_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        if not is_valid_email(v):
            raise PydanticCustomError("field_email", "Please enter a valid email address")
        return v

    @field_validator("patient_phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        if not is_valid_phone(v):
            raise PydanticCustomError("field_phone", "Please enter a valid phone number")
        return v

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate HH:MM format."""
        if not is_valid_time(v):
            raise PydanticCustomError("field_time", "Please enter a valid time (HH:MM format)")
        return v

    @field_validator("appointment_date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        """Store dates in UTC."""
        return ensure_utc(v)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        """Enforce minimum reason length."""
        if len(v) < REASON_MIN_LENGTH:
            raise PydanticCustomError(
                "field_reason",
                "Reason must be at least {min_length} characters long",
                {"min_length": REASON_MIN_LENGTH},
            )
        return v

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        """Restrict status to the known values."""
        if isinstance(v, AppointmentStatus):
            return v
        allowed = [s.value for s in AppointmentStatus]
        if v not in allowed:
            raise PydanticCustomError(
                "field_status", "`{value}` is not a valid status", {"value": str(v)}
            )
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def validate_notes(cls, v: Any) -> Any:
        """Default notes to empty and cap their length."""
        if v is None:
            return ""
        if isinstance(v, str) and len(v) > NOTES_MAX_LENGTH:
            raise PydanticCustomError(
                "field_notes",
                "Notes cannot exceed {max_length} characters",
                {"max_length": NOTES_MAX_LENGTH},
            )
        return v

    def to_values(self, fields: set[str] | None = None) -> dict[str, Any]:
        """
        Map to table column values.

        Args:
            fields: Restrict to these field names (all fields when omitted)
        """
        values = {
            "provider_id": self.provider,
            "patient_name": self.patient_name,
            "patient_email": self.patient_email,
            "patient_phone": self.patient_phone,
            "provider_name": self.provider_name,
            "provider_specialty": self.provider_specialty,
            "appointment_date": self.appointment_date,
            "appointment_time": self.appointment_time,
            "reason": self.reason,
            "status": self.status.value,
            "notes": self.notes,
        }
        if fields is None:
            return values
        columns = {"provider_id" if name == "provider" else name for name in fields}
        return {column: value for column, value in values.items() if column in columns}

    @classmethod
    def field_values_from_row(cls, row: Any) -> dict[str, Any]:
        """Current field values of a stored appointment, keyed by field name."""
        return {
            "provider": row["provider_id"],
            "patient_name": row["patient_name"],
            "patient_email": row["patient_email"],
            "patient_phone": row["patient_phone"],
            "provider_name": row["provider_name"],
            "provider_specialty": row["provider_specialty"],
            "appointment_date": row["appointment_date"],
            "appointment_time": row["appointment_time"],
            "reason": row["reason"],
            "status": row["status"],
            "notes": row["notes"],
        }


class AppointmentCreate(AppointmentRecord):
    """Schema for creating a new appointment."""

    @field_validator("appointment_date")
    @classmethod
    def validate_future_date(cls, v: datetime) -> datetime:
        """Reject appointments strictly before now."""
        if ensure_utc(v) < datetime.now(UTC):
            raise PydanticCustomError("field_date", "Appointment date must be in the future")
        return v


# ============================================================================
# Response Schemas
# ============================================================================


class AppointmentResponse(CamelModel):
    """Appointment with its provider summary, as returned by list endpoints."""

    id: UUID
    provider: ProviderSummary | None = None
    patient_name: str
    patient_email: str
    patient_phone: str
    provider_name: str
    provider_specialty: str
    appointment_date: UtcDateTime
    appointment_time: str
    reason: str
    status: AppointmentStatus
    notes: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_row(cls, row: Any, provider: ProviderSummary | None) -> "AppointmentResponse":
        """Build from an appointments table row mapping and its resolved provider."""
        return cls(
            id=row["id"],
            provider=provider,
            patient_name=row["patient_name"],
            patient_email=row["patient_email"],
            patient_phone=row["patient_phone"],
            provider_name=row["provider_name"],
            provider_specialty=row["provider_specialty"],
            appointment_date=row["appointment_date"],
            appointment_time=row["appointment_time"],
            reason=row["reason"],
            status=row["status"],
            notes=row["notes"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class AppointmentDetailResponse(AppointmentResponse):
    """Appointment with full provider detail."""

    provider: ProviderResponse | None = None
