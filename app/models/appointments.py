"""Appointments table model using SQLAlchemy Core."""

from sqlalchemy import CheckConstraint, Column, DateTime, Index, String, Table, Text, Uuid

from app.models.metadata import metadata, utcnow

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True),
    # Weak reference to providers.id: no foreign key, no cascade
    Column("provider_id", Uuid, nullable=True),
    # Patient
    Column("patient_name", Text, nullable=False),
    Column("patient_email", String(320), nullable=False),
    Column("patient_phone", String(40), nullable=False),
    # Snapshot fields (denormalized so the appointment outlives its provider)
    Column("provider_name", Text, nullable=False),
    Column("provider_specialty", Text, nullable=False),
    # Appointment details
    Column("appointment_date", DateTime(timezone=True), nullable=False),
    Column("appointment_time", String(5), nullable=False),
    Column("reason", Text, nullable=False),
    Column("status", String(20), nullable=False, default="scheduled"),
    Column("notes", Text, nullable=False, default=""),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow),
    CheckConstraint(
        "status IN ('scheduled', 'completed', 'cancelled', 'rescheduled')",
        name="appointments_status_check",
    ),
    Index("ix_appointments_date_time", "appointment_date", "appointment_time"),
    Index("ix_appointments_patient_email", "patient_email"),
    Index("ix_appointments_provider_id", "provider_id"),
    Index("ix_appointments_status", "status"),
)
