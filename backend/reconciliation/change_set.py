"""
Change-Set Data Model

Records produced by a schedule reconciliation run:
- ChangeRecord: one human-readable proposal per issue or correction
- Conflict variants: scheduling collisions that need a human decision
- AutoCorrection: a name rewritten because the match was confident
- NameValidationError: a name that matched nothing in the registry
- ReconciliationResult: everything above plus the processed data

The change-set is built by ChangeSet during a run and frozen into a
ReconciliationResult when the run completes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, ClassVar

from reconciliation.match_profiles import EntityType
from reconciliation.schedule_models import ImportedSchedule


class ChangeCategory(str, Enum):
    """
    Review category of a change, used by presentation layers for highlighting.
    """
    CONFLICT = "conflict"
    ERROR = "error"
    CORRECTION = "correction"
    INFO = "info"


class ChangeType(str, Enum):
    """
    Types of suggested changes.
    """
    PATIENT_NAME_CORRECTION = "Patient Name Correction"
    PROFESSIONAL_NAME_CORRECTION = "Professional Name Correction"
    VALIDATION_ERROR = "Validation Error"
    NEW_PROFESSIONAL = "New Professional"
    SCHEDULE_CONFLICT = "Schedule Conflict"
    EXISTING_APPOINTMENT_CONFLICT = "Existing Appointment Conflict"
    DUPLICATE_ROOM = "Duplicate Room"
    INACTIVE_PROFESSIONAL = "Inactive Professional"

    @property
    def category(self) -> ChangeCategory:
        return _CHANGE_CATEGORIES.get(self, ChangeCategory.INFO)


_CHANGE_CATEGORIES = {
    ChangeType.SCHEDULE_CONFLICT: ChangeCategory.CONFLICT,
    ChangeType.EXISTING_APPOINTMENT_CONFLICT: ChangeCategory.CONFLICT,
    ChangeType.VALIDATION_ERROR: ChangeCategory.ERROR,
    ChangeType.PATIENT_NAME_CORRECTION: ChangeCategory.CORRECTION,
    ChangeType.PROFESSIONAL_NAME_CORRECTION: ChangeCategory.CORRECTION,
}


class ConflictType(str, Enum):
    """
    Types of scheduling conflicts.
    """
    PROFESSIONAL_DOUBLE_BOOKED = "Professional in Multiple Rooms"
    EXISTING_APPOINTMENT_COLLISION = "Existing Appointment Conflict"
    DUPLICATE_ROOM_BOOKING = "Room with Multiple Bookings"
    INACTIVE_PROFESSIONAL = "Inactive Professional"


@dataclass(frozen=True)
class ChangeRecord:
    """
    A human-readable proposed change.
    """
    type: ChangeType
    description: str
    location: str
    slot_id: str

    @property
    def category(self) -> ChangeCategory:
        return self.type.category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "description": self.description,
            "location": self.location,
            "slotId": self.slot_id,
            "category": self.category.value
        }


@dataclass(frozen=True)
class Conflict(ABC):
    """
    Base class for scheduling conflicts.
    """
    conflict_type: ClassVar[ConflictType]

    @property
    @abstractmethod
    def slot_ids(self) -> List[str]:
        """Ids of the imported slots involved."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialise for the review payload."""


@dataclass(frozen=True)
class ProfessionalDoubleBooked(Conflict):
    """Same professional booked in several imported slots at the same date and time."""
    conflict_type: ClassVar[ConflictType] = ConflictType.PROFESSIONAL_DOUBLE_BOOKED

    professional_name: Optional[str]
    rooms: str
    day_time: str
    slots: Tuple[str, ...]

    @property
    def slot_ids(self) -> List[str]:
        return list(self.slots)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.conflict_type.value,
            "professionalName": self.professional_name,
            "rooms": self.rooms,
            "dayTime": self.day_time,
            "slots": list(self.slots)
        }


@dataclass(frozen=True)
class ExistingAppointmentCollision(Conflict):
    """Imported slot collides with appointments already in the registry."""
    conflict_type: ClassVar[ConflictType] = ConflictType.EXISTING_APPOINTMENT_COLLISION

    professional_name: Optional[str]
    patient_name: Optional[str]
    room: str
    day_time: str
    conflicting_appointments: Tuple[Dict[str, Any], ...]
    slot_id: str

    @property
    def slot_ids(self) -> List[str]:
        return [self.slot_id]

    @property
    def appointment_ids(self) -> List[str]:
        return [apt["id"] for apt in self.conflicting_appointments]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.conflict_type.value,
            "professionalName": self.professional_name,
            "patientName": self.patient_name,
            "room": self.room,
            "dayTime": self.day_time,
            "conflictingAppointments": [dict(apt) for apt in self.conflicting_appointments],
            "slotId": self.slot_id
        }


@dataclass(frozen=True)
class DuplicateRoomBooking(Conflict):
    """Same room booked more than once at the same day and time."""
    conflict_type: ClassVar[ConflictType] = ConflictType.DUPLICATE_ROOM_BOOKING

    room_name: str
    day_time: str
    patients: str
    professionals: str
    slots: Tuple[str, ...]

    @property
    def slot_ids(self) -> List[str]:
        return list(self.slots)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.conflict_type.value,
            "roomName": self.room_name,
            "dayTime": self.day_time,
            "patients": self.patients,
            "professionals": self.professionals,
            "slots": list(self.slots)
        }


@dataclass(frozen=True)
class InactiveProfessional(Conflict):
    """Slot assigned to a professional flagged inactive."""
    conflict_type: ClassVar[ConflictType] = ConflictType.INACTIVE_PROFESSIONAL

    professional_name: str
    patient_name: Optional[str]
    room: str
    day_time: str
    slot_id: str

    @property
    def slot_ids(self) -> List[str]:
        return [self.slot_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.conflict_type.value,
            "professionalName": self.professional_name,
            "patientName": self.patient_name,
            "room": self.room,
            "dayTime": self.day_time,
            "slotId": self.slot_id
        }


@dataclass(frozen=True)
class AutoCorrection:
    """A name corrected automatically."""
    type: EntityType
    original: str
    corrected: str
    location: str
    slot_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "original": self.original,
            "corrected": self.corrected,
            "location": self.location,
            "slotId": self.slot_id
        }


@dataclass(frozen=True)
class NameValidationError:
    """
    A name that could not be matched.

    This is a data-quality record returned for review, not an exception.
    """
    type: EntityType
    name: str
    location: str
    slot_id: str
    action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type.value,
            "name": self.name,
            "location": self.location,
            "slotId": self.slot_id
        }
        if self.action:
            data["action"] = self.action
        return data


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Result of a schedule reconciliation run.

    processed_data is the reconciled working copy; original_data is the
    snapshot taken before anything was changed.
    """
    run_id: str
    suggested_changes: Tuple[ChangeRecord, ...]
    conflicts: Tuple[Conflict, ...]
    validation_errors: Tuple[NameValidationError, ...]
    auto_corrections: Tuple[AutoCorrection, ...]
    processed_data: ImportedSchedule
    original_data: ImportedSchedule

    def summary(self) -> Dict[str, int]:
        """Counts shown to the reviewer."""
        return {
            "conflicts": len(self.conflicts),
            "validationErrors": len(self.validation_errors),
            "autoCorrections": len(self.auto_corrections),
            "totalChanges": len(self.suggested_changes)
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runId": self.run_id,
            "suggestedChanges": [c.to_dict() for c in self.suggested_changes],
            "conflicts": [c.to_dict() for c in self.conflicts],
            "validationErrors": [e.to_dict() for e in self.validation_errors],
            "autoCorrections": [a.to_dict() for a in self.auto_corrections],
            "processedData": self.processed_data.to_dict(),
            "summary": self.summary()
        }


@dataclass
class ChangeSet:
    """
    Accumulates the records of a single run.

    Lists only ever grow while the run is in progress.
    """
    suggested_changes: List[ChangeRecord] = field(default_factory=list)
    conflicts: List[Conflict] = field(default_factory=list)
    validation_errors: List[NameValidationError] = field(default_factory=list)
    auto_corrections: List[AutoCorrection] = field(default_factory=list)

    def suggest(self, change_type: ChangeType, description: str, location: str, slot_id: str) -> ChangeRecord:
        record = ChangeRecord(change_type, description, location, slot_id)
        self.suggested_changes.append(record)
        return record

    def freeze(
        self,
        run_id: str,
        processed_data: ImportedSchedule,
        original_data: ImportedSchedule
    ) -> ReconciliationResult:
        return ReconciliationResult(
            run_id=run_id,
            suggested_changes=tuple(self.suggested_changes),
            conflicts=tuple(self.conflicts),
            validation_errors=tuple(self.validation_errors),
            auto_corrections=tuple(self.auto_corrections),
            processed_data=processed_data,
            original_data=original_data
        )
