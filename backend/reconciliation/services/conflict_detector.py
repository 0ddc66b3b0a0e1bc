"""
Conflict Detector

Scheduling checks run over the imported slots, in this order:
1. Professional double-booking (same professional, date and time)
2. Collision with existing appointments
3. Duplicate room booking (same room, day and time)
4. Inactive professional

Passes never read each other's conflicts, but they share the slot flags
and the run's ChangeSet, so one slot can collect several records.
"""

import logging
from typing import Dict, List, Sequence, Tuple

from reconciliation.change_set import (
    ChangeSet,
    ChangeType,
    DuplicateRoomBooking,
    ExistingAppointmentCollision,
    InactiveProfessional,
    ProfessionalDoubleBooked
)
from reconciliation.schedule_models import (
    Appointment,
    ImportedSchedule,
    Professional,
    Slot
)

logger = logging.getLogger(__name__)


def group_slots(slots: Sequence[Slot], key) -> Dict[Tuple, List[Slot]]:
    """Group slots by a composite key, keeping first-seen order."""
    groups: Dict[Tuple, List[Slot]] = {}
    for slot in slots:
        groups.setdefault(key(slot), []).append(slot)
    return groups


class ConflictDetector:
    """
    Detects scheduling conflicts in an imported schedule.
    """

    def detect(
        self,
        imported: ImportedSchedule,
        professionals: Sequence[Professional],
        appointments: Sequence[Appointment],
        change_set: ChangeSet
    ):
        """Run every pass in order."""
        self.detect_professional_double_booking(imported, change_set)
        self.detect_existing_appointment_collisions(imported, appointments, change_set)
        self.detect_duplicate_room_bookings(imported, change_set)
        self.detect_inactive_professionals(imported, professionals, change_set)

    def detect_professional_double_booking(self, imported: ImportedSchedule, change_set: ChangeSet):
        """Flag professionals booked in more than one slot at the same date and time."""
        booked = [s for s in imported.schedule if s.is_occupied and s.professional_id]
        groups = group_slots(booked, lambda s: (s.professional_id, s.appointment_date, s.time))

        for slots in groups.values():
            if len(slots) < 2:
                continue

            professional_name = slots[0].professional_name
            rooms = ", ".join(s.room_name for s in slots)
            day_time = slots[0].day_time

            change_set.conflicts.append(ProfessionalDoubleBooked(
                professional_name=professional_name,
                rooms=rooms,
                day_time=day_time,
                slots=tuple(s.id for s in slots)
            ))

            for slot in slots:
                slot.has_schedule_conflict = True
                change_set.suggest(
                    ChangeType.SCHEDULE_CONFLICT,
                    f'Professional "{professional_name}" booked in multiple rooms: {rooms}',
                    day_time,
                    slot.id
                )

            logger.debug(f"Double booking for {professional_name!r} at {day_time}: {len(slots)} slots")

    def detect_existing_appointment_collisions(
        self,
        imported: ImportedSchedule,
        appointments: Sequence[Appointment],
        change_set: ChangeSet
    ):
        """Flag slots that collide with appointments already in the registry."""
        for slot in imported.schedule:
            if not slot.is_occupied or not slot.professional_id:
                continue

            colliding = [
                apt for apt in appointments
                if apt.professional_id == slot.professional_id
                and apt.date == slot.appointment_date
                and apt.time == slot.time
                # The appointment this slot updates is not a collision
                and not (slot.linked_appointment_id and apt.id == slot.linked_appointment_id)
            ]
            if not colliding:
                continue

            clients = ", ".join(apt.client for apt in colliding)

            change_set.conflicts.append(ExistingAppointmentCollision(
                professional_name=slot.professional_name,
                patient_name=slot.patient_name,
                room=slot.room_name,
                day_time=slot.day_time,
                conflicting_appointments=tuple(
                    {"id": apt.id, "client": apt.client, "type": apt.type}
                    for apt in colliding
                ),
                slot_id=slot.id
            ))

            slot.has_schedule_conflict = True
            change_set.suggest(
                ChangeType.EXISTING_APPOINTMENT_CONFLICT,
                f'Professional "{slot.professional_name}" already has an appointment with "{clients}"',
                slot.location,
                slot.id
            )

    def detect_duplicate_room_bookings(self, imported: ImportedSchedule, change_set: ChangeSet):
        """Flag rooms booked more than once at the same day and time."""
        occupied = [s for s in imported.schedule if s.is_occupied]
        groups = group_slots(occupied, lambda s: (s.room_name, s.day_of_week, s.time))

        for slots in groups.values():
            if len(slots) < 2:
                continue

            room_name = slots[0].room_name
            day_time = slots[0].day_time

            change_set.conflicts.append(DuplicateRoomBooking(
                room_name=room_name,
                day_time=day_time,
                patients=", ".join(s.patient_name for s in slots if s.patient_name),
                professionals=", ".join(s.professional_name for s in slots if s.professional_name),
                slots=tuple(s.id for s in slots)
            ))

            for slot in slots:
                slot.has_schedule_conflict = True
                change_set.suggest(
                    ChangeType.DUPLICATE_ROOM,
                    f'Room "{room_name}" has multiple bookings at the same time',
                    day_time,
                    slot.id
                )

    def detect_inactive_professionals(
        self,
        imported: ImportedSchedule,
        professionals: Sequence[Professional],
        change_set: ChangeSet
    ):
        """Flag slots assigned to inactive professionals."""
        by_id: Dict[str, Professional] = {}
        for prof in professionals:
            by_id.setdefault(prof.id, prof)

        for slot in imported.schedule:
            if not slot.is_occupied or not slot.professional_id:
                continue

            professional = by_id.get(slot.professional_id)
            if professional is None or not professional.inactive:
                continue

            change_set.conflicts.append(InactiveProfessional(
                professional_name=professional.name,
                patient_name=slot.patient_name,
                room=slot.room_name,
                day_time=slot.day_time,
                slot_id=slot.id
            ))

            slot.has_validation_error = True
            change_set.suggest(
                ChangeType.INACTIVE_PROFESSIONAL,
                f'Professional "{professional.name}" is inactive',
                slot.location,
                slot.id
            )
