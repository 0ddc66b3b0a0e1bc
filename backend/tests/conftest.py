"""
Shared fixtures for the schedule reconciliation tests.
"""

import pytest

from reconciliation.schedule_models import Appointment, Professional, Slot


@pytest.fixture
def make_slot():
    """Factory for occupied slots with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> Slot:
        counter["n"] += 1
        data = {
            "id": f"slot-{counter['n']}",
            "room_name": "Room 1",
            "day_of_week": "Monday",
            "time": "09:00",
            "appointment_date": "2025-03-17",
            "is_occupied": True,
        }
        data.update(overrides)
        return Slot(**data)

    return _make


@pytest.fixture
def professionals():
    """Professional registry."""
    return [
        Professional(id="prof-1", name="Dr. Carlos Mendes", specialty="Psychology"),
        Professional(id="prof-2", name="Dra. Helena Prado", specialty="Speech Therapy"),
        Professional(id="prof-3", name="Dr. Rui Barros", specialty="Physiotherapy", inactive=True),
    ]


@pytest.fixture
def appointments():
    """Existing appointments."""
    return [
        Appointment(id="apt-1", client="João Silva", professional_id="prof-1",
                    date="2025-03-10", time="09:00", type="Consultation"),
        Appointment(id="apt-2", client="Maria Souza", professional_id="prof-2",
                    date="2025-03-10", time="10:00", type="Follow-up"),
        Appointment(id="apt-3", client="  maria souza", professional_id="prof-2",
                    date="2025-03-12", time="10:00", type="Follow-up"),
    ]
