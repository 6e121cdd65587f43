"""Providers table model using SQLAlchemy Core."""

from sqlalchemy import JSON, Column, DateTime, String, Table, Text, UniqueConstraint, Uuid

from app.models.metadata import metadata, utcnow

providers = Table(
    "providers",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("name", Text, nullable=False),
    Column("specialty", Text, nullable=False, index=True),
    Column("email", String(320), nullable=False),
    Column("phone", String(40), nullable=False),
    # Availability
    Column("available_hours_start", String(5), nullable=False, default="09:00"),
    Column("available_hours_end", String(5), nullable=False, default="17:00"),
    Column("available_days", JSON, nullable=False, default=list),
    # Audit fields
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow),
    UniqueConstraint("email", name="providers_email_key"),
)
