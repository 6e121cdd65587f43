"""Translate list query parameters into store filter, sort and paging directives."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any

from sqlalchemy import ColumnElement, Table, and_, or_, true
from sqlalchemy.sql.elements import UnaryExpression

from app.models.appointments import appointments
from app.models.providers import providers

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Ceilings keep LIMIT and OFFSET well inside a signed 64-bit integer
MAX_PAGE = 1_000_000
MAX_LIMIT = 1_000

APPOINTMENT_SEARCH_COLUMNS = ("patient_name", "patient_email", "provider_name", "reason")
PROVIDER_SEARCH_COLUMNS = ("name", "specialty", "email")

# Wire name -> column for caller-selected sorting
APPOINTMENT_SORT_FIELDS = {
    "appointmentDate": "appointment_date",
    "appointmentTime": "appointment_time",
    "patientName": "patient_name",
    "patientEmail": "patient_email",
    "providerName": "provider_name",
    "providerSpecialty": "provider_specialty",
    "status": "status",
    "reason": "reason",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def parse_positive_int(raw: Any, default: int, maximum: int | None = None) -> int:
    """Parse a positive integer up to `maximum`, falling back to the default for anything else."""
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if value <= 0 or (maximum is not None and value > maximum):
        return default
    return value


def parse_date(raw: str | None) -> datetime | None:
    """
    Parse an ISO date or datetime query value.

    Returns:
        Aware UTC datetime, or None when the value is absent or unparseable
    """
    if not raw:
        return None
    value = raw.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _is_date_only(raw: str) -> bool:
    try:
        date.fromisoformat(raw.strip())
    except ValueError:
        return False
    return True


@dataclass
class PageRequest:
    """Requested page of a list."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        default_limit: int = DEFAULT_LIMIT,
    ) -> "PageRequest":
        return cls(
            page=parse_positive_int(params.get("page"), DEFAULT_PAGE, MAX_PAGE),
            limit=parse_positive_int(params.get("limit"), default_limit, MAX_LIMIT),
        )


@dataclass
class ListQuery:
    """Filter conditions, ordering and page for a list read."""

    conditions: list[ColumnElement[bool]] = field(default_factory=list)
    order_by: list[UnaryExpression] = field(default_factory=list)
    page: PageRequest = field(default_factory=PageRequest)

    @property
    def where(self) -> ColumnElement[bool]:
        """All conditions combined; matches everything when there are none."""
        return and_(*self.conditions) if self.conditions else true()


def search_condition(table: Table, columns: tuple[str, ...], term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match against any of the columns."""
    return or_(*(table.c[name].icontains(term, autoescape=True) for name in columns))


def build_appointment_query(
    params: Mapping[str, Any],
    default_limit: int = DEFAULT_LIMIT,
) -> ListQuery:
    """
    Build the list query for appointments.

    Recognized parameters: page, limit, status, providerSpecialty,
    startDate, endDate, search, sortBy, sortOrder. Malformed values never
    raise; they drop the filter or fall back to defaults.
    """
    query = ListQuery(page=PageRequest.from_params(params, default_limit))
    c = appointments.c

    if params.get("status"):
        query.conditions.append(c.status == params["status"])

    if params.get("providerSpecialty"):
        query.conditions.append(c.provider_specialty == params["providerSpecialty"])

    start = parse_date(params.get("startDate"))
    if start is not None:
        query.conditions.append(c.appointment_date >= start)

    raw_end = params.get("endDate")
    end = parse_date(raw_end)
    if end is not None:
        if _is_date_only(raw_end):
            # Whole day inclusive
            query.conditions.append(c.appointment_date < end + timedelta(days=1))
        else:
            query.conditions.append(c.appointment_date <= end)

    if params.get("search"):
        query.conditions.append(
            search_condition(appointments, APPOINTMENT_SEARCH_COLUMNS, params["search"])
        )

    column = c[APPOINTMENT_SORT_FIELDS.get(params.get("sortBy") or "", "appointment_date")]
    descending = params.get("sortOrder") == "desc"
    query.order_by = [column.desc() if descending else column.asc(), c.id.asc()]

    return query


def build_provider_query(
    params: Mapping[str, Any],
    default_limit: int = DEFAULT_LIMIT,
) -> ListQuery:
    """
    Build the list query for providers.

    Recognized parameters: page, limit, specialty (substring), search.
    Results are ordered by name.
    """
    query = ListQuery(page=PageRequest.from_params(params, default_limit))

    if params.get("specialty"):
        query.conditions.append(
            providers.c.specialty.icontains(params["specialty"], autoescape=True)
        )

    if params.get("search"):
        query.conditions.append(
            search_condition(providers, PROVIDER_SEARCH_COLUMNS, params["search"])
        )

    query.order_by = [providers.c.name.asc(), providers.c.id.asc()]
    return query


def patient_order_by() -> list[UnaryExpression]:
    """Ordering for a patient's appointments: date, then time."""
    return [appointments.c.appointment_date.asc(), appointments.c.appointment_time.asc()]
