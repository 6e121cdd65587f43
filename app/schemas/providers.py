"""Provider schemas for request/response validation."""

from typing import Any
from uuid import UUID

from pydantic import ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from app.core.validation import WEEKDAYS, is_blank, is_valid_email, is_valid_time
from app.schemas.common import CamelModel, UtcDateTime

PROVIDER_REQUIRED_FIELDS = ("name", "specialty", "email", "phone")


class AvailableHours(CamelModel):
    """Daily working window."""

    start: str = "09:00"
    end: str = "17:00"

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate HH:MM format."""
        if not is_valid_time(v):
            raise PydanticCustomError("field_time", "Please enter a valid time (HH:MM format)")
        return v


# ============================================================================
# Request Schemas
# ============================================================================


class ProviderRecord(CamelModel):
    """
    Complete provider as it must look before it is written.

    Used for creates and for the merged record of an update.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: str
    specialty: str
    email: str
    phone: str
    available_hours: AvailableHours = Field(default_factory=AvailableHours)
    available_days: list[str] = Field(default_factory=list)

    @field_validator("name", "specialty", "email", "phone", mode="before")
    @classmethod
    def validate_required(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject empty required text."""
        if is_blank(v):
            raise PydanticCustomError(
                "field_required", "{field} is required", {"field": to_camel(info.field_name)}
            )
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        if not is_valid_email(v):
            raise PydanticCustomError("field_email", "Please enter a valid email address")
        return v

    @field_validator("available_hours", mode="before")
    @classmethod
    def default_hours(cls, v: Any) -> Any:
        """Fill in the default window when hours are cleared."""
        return AvailableHours() if v is None else v

    @field_validator("available_days", mode="before")
    @classmethod
    def validate_days(cls, v: Any) -> Any:
        """Accept weekday names only, dropping repeats."""
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        days: list[str] = []
        for day in v:
            if day not in WEEKDAYS:
                raise PydanticCustomError(
                    "field_day", "`{day}` is not a valid day of the week", {"day": str(day)}
                )
            if day not in days:
                days.append(day)
        return days

    def to_values(self) -> dict[str, Any]:
        """Flatten into table column values."""
        return {
            "name": self.name,
            "specialty": self.specialty,
            "email": self.email,
            "phone": self.phone,
            "available_hours_start": self.available_hours.start,
            "available_hours_end": self.available_hours.end,
            "available_days": self.available_days,
        }


# ============================================================================
# Response Schemas
# ============================================================================


class ProviderSummary(CamelModel):
    """Provider fields embedded in appointment lists."""

    id: UUID
    name: str
    specialty: str
    email: str
    phone: str


class ProviderResponse(ProviderSummary):
    """Full provider record."""

    available_hours: AvailableHours
    available_days: list[str]
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_row(cls, row: Any) -> "ProviderResponse":
        """Build from a providers table row mapping."""
        return cls(
            id=row["id"],
            name=row["name"],
            specialty=row["specialty"],
            email=row["email"],
            phone=row["phone"],
            available_hours=AvailableHours(
                start=row["available_hours_start"],
                end=row["available_hours_end"],
            ),
            available_days=row["available_days"] or [],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
