"""
Schedule Data Models

Pydantic models for the imported room schedule and the registries it is
checked against:
- Slot: one room/day/time cell of the imported schedule
- Professional: registry professional (or a synthetic one created on import)
- Appointment: existing appointment
- ImportedSchedule: the batch produced by the importer

Attributes are snake_case in Python and camelCase on the wire.
Unknown fields supplied by the host are kept so they survive reconciliation.
"""

from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ScheduleModel(BaseModel):
    """Base model with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow"
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Slot(ScheduleModel):
    """One cell in the imported room schedule."""
    id: str
    room_name: str
    day_of_week: str
    time: str
    appointment_date: Optional[str] = None
    is_occupied: bool = False
    patient_name: Optional[str] = None
    professional_name: Optional[str] = None
    professional_id: Optional[str] = None
    linked_appointment_id: Optional[str] = None
    has_schedule_conflict: Optional[bool] = None
    has_validation_error: Optional[bool] = None

    @property
    def location(self) -> str:
        """Room, day and time, as shown in change records."""
        return f"{self.room_name} - {self.day_of_week} {self.time}"

    @property
    def day_time(self) -> str:
        return f"{self.day_of_week} {self.time}"


class Professional(ScheduleModel):
    """A registered (or newly imported) professional."""
    id: str
    name: str
    specialty: str = ""
    registration: str = ""
    inactive: bool = False


class Appointment(ScheduleModel):
    """An existing appointment."""
    id: str
    client: str
    professional_id: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    type: Optional[str] = None


class ImportedSchedule(ScheduleModel):
    """A batch of imported schedule data."""
    schedule: List[Slot]
    new_professionals: List[Professional] = Field(default_factory=list)
    updated_appointments: List[Appointment] = Field(default_factory=list)
