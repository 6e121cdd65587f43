"""Tests for list query translation."""

from datetime import UTC, datetime

import pytest

from app.core.query_builder import (
    MAX_LIMIT,
    MAX_PAGE,
    PageRequest,
    build_appointment_query,
    build_provider_query,
    parse_date,
    parse_positive_int,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 10), ("3", 3), (" 7 ", 7), ("0", 10), ("-2", 10), ("abc", 10), ("1.5", 10)],
)
def test_parse_positive_int(raw, expected) -> None:
    """Test fallback to the default for anything but a positive integer."""
    assert parse_positive_int(raw, 10) == expected


def test_parse_date() -> None:
    """Test date parsing into aware UTC values."""
    assert parse_date("2025-03-01") == datetime(2025, 3, 1, tzinfo=UTC)
    assert parse_date("2025-03-01T10:30:00Z") == datetime(2025, 3, 1, 10, 30, tzinfo=UTC)
    assert parse_date("2025-03-01T12:00:00+02:00") == datetime(2025, 3, 1, 10, tzinfo=UTC)
    assert parse_date("tomorrow") is None
    assert parse_date("") is None
    assert parse_date(None) is None


def test_page_request_offset() -> None:
    """Test offset computation from page and limit."""
    page = PageRequest.from_params({"page": "3", "limit": "20"})

    assert page.page == 3
    assert page.limit == 20
    assert page.offset == 40


def test_page_request_default_limit() -> None:
    """Test that the configured default limit is used when none is given."""
    assert PageRequest.from_params({}, default_limit=25).limit == 25


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("50", 50), ("51", 10), ("99999999999999999999", 10), ("9" * 5000, 10)],
)
def test_parse_positive_int_ceiling(raw, expected) -> None:
    """Test that values above the ceiling fall back to the default."""
    assert parse_positive_int(raw, 10, maximum=50) == expected


def test_page_request_oversized_values() -> None:
    """Test that oversized paging falls back and keeps the offset bounded."""
    page = PageRequest.from_params({"page": "9223372036854775807", "limit": "99999999999999999999"})

    assert page.page == 1
    assert page.limit == 10

    largest = PageRequest.from_params({"page": str(MAX_PAGE), "limit": str(MAX_LIMIT)})
    assert largest.page == MAX_PAGE
    assert largest.limit == MAX_LIMIT
    assert largest.offset < 2**63 - 1


def test_appointment_query_defaults() -> None:
    """Test that no parameters yields no conditions and date ordering."""
    query = build_appointment_query({})

    assert query.conditions == []
    assert query.page == PageRequest(page=1, limit=10)
    assert [str(clause) for clause in query.order_by] == [
        "appointments.appointment_date ASC",
        "appointments.id ASC",
    ]


def test_appointment_query_filters() -> None:
    """Test that each recognized filter adds one condition."""
    query = build_appointment_query(
        {
            "status": "scheduled",
            "providerSpecialty": "Cardiology",
            "startDate": "2025-01-01",
            "endDate": "2025-01-31",
            "search": "smith",
        }
    )

    assert len(query.conditions) == 5


def test_appointment_query_drops_bad_dates() -> None:
    """Test that unparseable dates add no condition."""
    query = build_appointment_query({"startDate": "soon", "endDate": "later"})

    assert query.conditions == []


def test_appointment_query_sort() -> None:
    """Test whitelisted sort fields and direction."""
    query = build_appointment_query({"sortBy": "patientName", "sortOrder": "desc"})
    assert str(query.order_by[0]) == "appointments.patient_name DESC"

    fallback = build_appointment_query({"sortBy": "password", "sortOrder": "sideways"})
    assert str(fallback.order_by[0]) == "appointments.appointment_date ASC"


def test_provider_query() -> None:
    """Test provider filters and name ordering."""
    query = build_provider_query({"specialty": "cardio", "search": "sarah", "limit": "5"})

    assert len(query.conditions) == 2
    assert query.page.limit == 5
    assert str(query.order_by[0]) == "providers.name ASC"
