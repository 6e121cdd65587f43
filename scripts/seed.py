"""Script to load demo providers and appointments.

Clears both tables first. Rows are inserted directly so that the sample
appointment dated in the past does not hit the future-date rule.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from sqlalchemy import delete, insert

from app.database import database
from app.models import appointments, metadata, providers

WEEKDAYS_MON_FRI = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

PROVIDERS = [
    {
        "name": "Dr. Sarah Johnson",
        "specialty": "Cardiology",
        "email": "sarah.johnson@healthcare.com",
        "phone": "+1-555-0101",
        "available_hours_start": "09:00",
        "available_hours_end": "17:00",
        "available_days": WEEKDAYS_MON_FRI,
    },
    {
        "name": "Dr. Michael Chen",
        "specialty": "Pediatrics",
        "email": "michael.chen@healthcare.com",
        "phone": "+1-555-0102",
        "available_hours_start": "08:00",
        "available_hours_end": "16:00",
        "available_days": WEEKDAYS_MON_FRI,
    },
    {
        "name": "Dr. Emily Rodriguez",
        "specialty": "Dermatology",
        "email": "emily.rodriguez@healthcare.com",
        "phone": "+1-555-0103",
        "available_hours_start": "10:00",
        "available_hours_end": "18:00",
        "available_days": ["Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
    },
    {
        "name": "Dr. James Wilson",
        "specialty": "Orthopedics",
        "email": "james.wilson@healthcare.com",
        "phone": "+1-555-0104",
        "available_hours_start": "09:00",
        "available_hours_end": "17:00",
        "available_days": ["Monday", "Wednesday", "Thursday", "Friday"],
    },
    {
        "name": "Dr. Lisa Anderson",
        "specialty": "General Medicine",
        "email": "lisa.anderson@healthcare.com",
        "phone": "+1-555-0105",
        "available_hours_start": "08:00",
        "available_hours_end": "16:00",
        "available_days": WEEKDAYS_MON_FRI,
    },
]

# (patient, email, phone, provider index, days from now, time, reason, status, notes)
APPOINTMENTS = [
    ("John Doe", "john.doe@email.com", "+1-555-1001", 0, 2, "10:00",
     "Routine heart checkup and ECG", "scheduled", "Patient has history of hypertension"),
    ("Jane Smith", "jane.smith@email.com", "+1-555-1002", 1, 5, "14:30",
     "Child vaccination and wellness check", "scheduled", "Bring vaccination records"),
    ("Robert Brown", "robert.brown@email.com", "+1-555-1003", 2, -1, "11:00",
     "Skin condition evaluation", "completed", "Prescribed topical treatment"),
    ("Maria Garcia", "maria.garcia@email.com", "+1-555-1004", 3, 7, "09:30",
     "Knee pain consultation", "scheduled", "Bring X-ray results if available"),
    ("David Lee", "david.lee@email.com", "+1-555-1005", 4, 3, "15:00",
     "Annual physical examination", "scheduled", ""),
]  # fmt: skip


async def seed() -> None:
    """Replace all data with the demo data set."""
    engine = await database.get_engine()
    now = datetime.now(UTC)

    provider_rows = [{"id": uuid4(), **provider} for provider in PROVIDERS]
    appointment_rows = []
    for patient, email, phone, index, days, time, reason, status, notes in APPOINTMENTS:
        provider = provider_rows[index]
        appointment_rows.append(
            {
                "id": uuid4(),
                "provider_id": provider["id"],
                "patient_name": patient,
                "patient_email": email,
                "patient_phone": phone,
                "provider_name": provider["name"],
                "provider_specialty": provider["specialty"],
                "appointment_date": now + timedelta(days=days),
                "appointment_time": time,
                "reason": reason,
                "status": status,
                "notes": notes,
            }
        )

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(delete(appointments))
        await conn.execute(delete(providers))
        print("Cleared existing data")

        await conn.execute(insert(providers), provider_rows)
        print(f"Inserted {len(provider_rows)} providers")

        await conn.execute(insert(appointments), appointment_rows)
        print(f"Inserted {len(appointment_rows)} appointments")

    print("✓ Demo data seeded successfully!")
    await database.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
