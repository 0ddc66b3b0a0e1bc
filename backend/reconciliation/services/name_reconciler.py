"""
Name Reconciler

Checks patient and professional names of every occupied slot against the
registries:
- Known names are left alone
- Confident matches are auto-corrected to the registry spelling
- Unknown patients are reported for review
- Unknown professionals are created as new (synthetic) professionals
"""

import logging
import uuid
from typing import List, Optional, Sequence

from config import get_settings
from reconciliation.change_set import (
    AutoCorrection,
    ChangeSet,
    ChangeType,
    NameValidationError
)
from reconciliation.match_profiles import (
    EntityType,
    MatchProfileRegistry,
    match_profiles
)
from reconciliation.matching_rules.name_rules import NameMatcher, normalize_name
from reconciliation.schedule_models import (
    Appointment,
    ImportedSchedule,
    Professional,
    Slot
)

logger = logging.getLogger(__name__)

NEW_PROFESSIONAL_ACTION = "New professional will be created"


def generate_professional_id(prefix: Optional[str] = None) -> str:
    """Generate a unique id for a professional created during import."""
    prefix = prefix or get_settings().NEW_PROFESSIONAL_ID_PREFIX
    return f"{prefix}-{uuid.uuid4().hex}"


class NameReconciler:
    """
    Reconciles imported names against the professional and appointment registries.

    Slots are mutated in place; every finding is appended to the run's ChangeSet.
    """

    def __init__(self, profiles: Optional[MatchProfileRegistry] = None):
        self.profiles = profiles or match_profiles
        self.patient_matcher = NameMatcher(self.profiles.get_threshold(EntityType.PATIENT))
        self.professional_matcher = NameMatcher(self.profiles.get_threshold(EntityType.PROFESSIONAL))
        self.new_professional_specialty = get_settings().NEW_PROFESSIONAL_SPECIALTY

    def reconcile(
        self,
        imported: ImportedSchedule,
        professionals: Sequence[Professional],
        appointments: Sequence[Appointment],
        change_set: ChangeSet
    ):
        """
        Validate and correct names across all occupied slots.

        Args:
            imported: Working copy of the imported schedule (mutated)
            professionals: Professional registry
            appointments: Existing appointments (source of known patients)
            change_set: Accumulator for the run's records
        """
        # dict.fromkeys keeps first-seen order while deduplicating
        registered_patients = list(dict.fromkeys(
            normalize_name(apt.client) for apt in appointments
        ))
        registered_professionals = [normalize_name(prof.name) for prof in professionals]

        for slot in imported.schedule:
            if not slot.is_occupied:
                continue

            if normalize_name(slot.patient_name):
                self._reconcile_patient(slot, registered_patients, appointments, change_set)

            if normalize_name(slot.professional_name):
                self._reconcile_professional(
                    slot,
                    registered_professionals,
                    professionals,
                    imported.new_professionals,
                    change_set
                )

    def _reconcile_patient(
        self,
        slot: Slot,
        registered_patients: List[str],
        appointments: Sequence[Appointment],
        change_set: ChangeSet
    ):
        patient = normalize_name(slot.patient_name)
        if patient in registered_patients:
            return

        closest = self.patient_matcher.find_closest_match(patient, registered_patients)

        if closest is None:
            change_set.validation_errors.append(NameValidationError(
                type=EntityType.PATIENT,
                name=slot.patient_name,
                location=slot.location,
                slot_id=slot.id
            ))
            change_set.suggest(
                ChangeType.VALIDATION_ERROR,
                f'Patient "{slot.patient_name}" not found in the registry',
                slot.location,
                slot.id
            )
            return

        appointment = next(
            apt for apt in appointments if normalize_name(apt.client) == closest
        )
        original_name = slot.patient_name
        slot.patient_name = appointment.client

        change_set.auto_corrections.append(AutoCorrection(
            type=EntityType.PATIENT,
            original=original_name,
            corrected=appointment.client,
            location=slot.location,
            slot_id=slot.id
        ))
        change_set.suggest(
            ChangeType.PATIENT_NAME_CORRECTION,
            f'Correct "{original_name}" to "{appointment.client}"',
            slot.location,
            slot.id
        )
        logger.debug(f"Patient name corrected on slot {slot.id}: {original_name!r} -> {appointment.client!r}")

    def _reconcile_professional(
        self,
        slot: Slot,
        registered_professionals: List[str],
        professionals: Sequence[Professional],
        new_professionals: List[Professional],
        change_set: ChangeSet
    ):
        name = normalize_name(slot.professional_name)
        if name in registered_professionals:
            return

        # Already created earlier in this run: link the slot, record nothing new
        created = next(
            (p for p in new_professionals if normalize_name(p.name) == name),
            None
        )
        if created is not None:
            slot.professional_id = created.id
            return

        closest = self.professional_matcher.find_closest_match(name, registered_professionals)

        if closest is not None:
            professional = professionals[registered_professionals.index(closest)]
            original_name = slot.professional_name
            slot.professional_name = professional.name
            slot.professional_id = professional.id

            change_set.auto_corrections.append(AutoCorrection(
                type=EntityType.PROFESSIONAL,
                original=original_name,
                corrected=professional.name,
                location=slot.location,
                slot_id=slot.id
            ))
            change_set.suggest(
                ChangeType.PROFESSIONAL_NAME_CORRECTION,
                f'Correct "{original_name}" to "{professional.name}"',
                slot.location,
                slot.id
            )
            logger.debug(f"Professional name corrected on slot {slot.id}: {original_name!r} -> {professional.name!r}")
            return

        if not self.profiles.get_profile(EntityType.PROFESSIONAL).create_when_unmatched:
            change_set.validation_errors.append(NameValidationError(
                type=EntityType.PROFESSIONAL,
                name=slot.professional_name,
                location=slot.location,
                slot_id=slot.id
            ))
            change_set.suggest(
                ChangeType.VALIDATION_ERROR,
                f'Professional "{slot.professional_name}" not found in the registry',
                slot.location,
                slot.id
            )
            return

        new_professional = Professional(
            id=generate_professional_id(),
            name=slot.professional_name,
            specialty=self.new_professional_specialty,
            registration="",
            inactive=False
        )
        new_professionals.append(new_professional)
        slot.professional_id = new_professional.id

        change_set.validation_errors.append(NameValidationError(
            type=EntityType.PROFESSIONAL,
            name=slot.professional_name,
            location=slot.location,
            slot_id=slot.id,
            action=NEW_PROFESSIONAL_ACTION
        ))
        change_set.suggest(
            ChangeType.NEW_PROFESSIONAL,
            f'Create new professional "{slot.professional_name}"',
            slot.location,
            slot.id
        )
        logger.debug(f"New professional {new_professional.id} created for {slot.professional_name!r}")
