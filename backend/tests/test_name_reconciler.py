"""
Unit Tests for Name Reconciler

Tests patient and professional name reconciliation:
- Registered names left untouched
- Auto-correction of close matches
- Validation errors for unknown patients
- New professional creation and in-run deduplication

Run with: pytest tests/test_name_reconciler.py -v
"""

import pytest

from reconciliation.change_set import ChangeSet, ChangeType, ChangeCategory
from reconciliation.match_profiles import EntityType, MatchProfileRegistry
from reconciliation.schedule_models import Appointment, ImportedSchedule, Professional
from reconciliation.services.name_reconciler import (
    NameReconciler,
    NEW_PROFESSIONAL_ACTION,
    generate_professional_id
)


class TestPatientReconciliation:
    """Test patient name handling."""

    @pytest.fixture
    def reconciler(self):
        return NameReconciler(MatchProfileRegistry(default_threshold=0.80))

    def run(self, reconciler, slots, professionals, appointments):
        imported = ImportedSchedule(schedule=slots)
        change_set = ChangeSet()
        reconciler.reconcile(imported, professionals, appointments, change_set)
        return imported, change_set

    def test_registered_patient_untouched(self, reconciler, make_slot, professionals, appointments):
        """Test a registered patient (case/whitespace differences) produces no records."""
        slot = make_slot(patient_name="  MARIA souza ")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert imported.schedule[0].patient_name == "  MARIA souza "
        assert change_set.auto_corrections == []
        assert change_set.suggested_changes == []

    def test_patient_auto_corrected(self, reconciler, make_slot, professionals, appointments):
        """Test a missing accent is corrected to the appointment's spelling."""
        slot = make_slot(patient_name="Joao Silva")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert imported.schedule[0].patient_name == "João Silva"
        assert len(change_set.auto_corrections) == 1
        correction = change_set.auto_corrections[0]
        assert correction.type == EntityType.PATIENT
        assert correction.original == "Joao Silva"
        assert correction.corrected == "João Silva"
        assert correction.location == "Room 1 - Monday 09:00"
        assert correction.slot_id == slot.id

        assert len(change_set.suggested_changes) == 1
        change = change_set.suggested_changes[0]
        assert change.type == ChangeType.PATIENT_NAME_CORRECTION
        assert change.category == ChangeCategory.CORRECTION
        assert change.description == 'Correct "Joao Silva" to "João Silva"'

    def test_unknown_patient_reported(self, reconciler, make_slot, professionals, appointments):
        """Test an unknown patient yields a validation error and is left as is."""
        slot = make_slot(patient_name="Xyzzy Unknown")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert imported.schedule[0].patient_name == "Xyzzy Unknown"
        assert change_set.auto_corrections == []
        assert len(change_set.validation_errors) == 1
        error = change_set.validation_errors[0]
        assert error.type == EntityType.PATIENT
        assert error.name == "Xyzzy Unknown"
        assert error.action is None
        assert change_set.suggested_changes[0].type == ChangeType.VALIDATION_ERROR

    def test_unoccupied_slots_skipped(self, reconciler, make_slot, professionals, appointments):
        """Test empty slots are never examined."""
        slot = make_slot(is_occupied=False, patient_name="Xyzzy Unknown", professional_name="Nobody Known")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert change_set.validation_errors == []
        assert imported.new_professionals == []

    def test_blank_names_skipped(self, reconciler, make_slot, professionals, appointments):
        """Test whitespace-only names are treated as absent."""
        slot = make_slot(patient_name="   ", professional_name="")
        _, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert change_set.suggested_changes == []

    def test_blank_appointment_client_ignored(self, reconciler, make_slot, professionals):
        """Test an appointment without a client does not absorb unknown patients."""
        appointments = [
            Appointment(id="apt-0", client=""),
            Appointment(id="apt-1", client="João Silva", professional_id="prof-1"),
        ]
        slot = make_slot(patient_name="Joao Silva")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert imported.schedule[0].patient_name == "João Silva"
        assert change_set.auto_corrections[0].corrected == "João Silva"


class TestProfessionalReconciliation:
    """Test professional name handling."""

    @pytest.fixture
    def profiles(self):
        return MatchProfileRegistry(default_threshold=0.80)

    @pytest.fixture
    def reconciler(self, profiles):
        return NameReconciler(profiles)

    def run(self, reconciler, slots, professionals, appointments):
        imported = ImportedSchedule(schedule=slots)
        change_set = ChangeSet()
        reconciler.reconcile(imported, professionals, appointments, change_set)
        return imported, change_set

    def test_registered_professional_untouched(self, reconciler, make_slot, professionals, appointments):
        slot = make_slot(professional_name="dr. carlos mendes", professional_id="prof-1")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert imported.schedule[0].professional_name == "dr. carlos mendes"
        assert change_set.suggested_changes == []

    def test_professional_auto_corrected(self, reconciler, make_slot, professionals, appointments):
        """Test a typo is corrected to the registry name and id."""
        slot = make_slot(professional_name="Dr. Carlos Mendez")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        corrected = imported.schedule[0]
        assert corrected.professional_name == "Dr. Carlos Mendes"
        assert corrected.professional_id == "prof-1"
        assert change_set.auto_corrections[0].type == EntityType.PROFESSIONAL
        assert change_set.suggested_changes[0].type == ChangeType.PROFESSIONAL_NAME_CORRECTION

    def test_unknown_professional_created(self, reconciler, make_slot, professionals, appointments):
        """Test an unknown professional becomes a new synthetic professional."""
        slot = make_slot(professional_name="Zeferino Quaresma")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert len(imported.new_professionals) == 1
        created = imported.new_professionals[0]
        assert created.name == "Zeferino Quaresma"
        assert created.inactive is False
        assert created.registration == ""
        assert created.specialty == "Imported - system"
        assert imported.schedule[0].professional_id == created.id

        assert len(change_set.validation_errors) == 1
        assert change_set.validation_errors[0].action == NEW_PROFESSIONAL_ACTION
        assert change_set.suggested_changes[0].type == ChangeType.NEW_PROFESSIONAL

    def test_blank_registry_professional_ignored(self, reconciler, make_slot, professionals, appointments):
        """Test a professional without a name does not absorb unknown professionals."""
        registry = [Professional(id="prof-0", name=" ")] + professionals
        slot = make_slot(professional_name="Xyzzy Unknown")
        imported, _ = self.run(reconciler, [slot], registry, appointments)

        assert len(imported.new_professionals) == 1
        assert imported.schedule[0].professional_id == imported.new_professionals[0].id

    def test_new_professional_deduplicated_within_run(self, reconciler, make_slot, professionals, appointments):
        """Test the same unknown name on two slots creates one professional."""
        first = make_slot(professional_name="Zeferino Quaresma")
        second = make_slot(professional_name="ZEFERINO QUARESMA ", time="10:00")
        imported, change_set = self.run(reconciler, [first, second], professionals, appointments)

        assert len(imported.new_professionals) == 1
        created_id = imported.new_professionals[0].id
        assert [s.professional_id for s in imported.schedule] == [created_id, created_id]
        assert len(change_set.validation_errors) == 1
        assert len(change_set.suggested_changes) == 1

    def test_different_spellings_not_merged(self, reconciler, make_slot, professionals, appointments):
        """Test near-duplicate spellings of a new name each create a professional."""
        first = make_slot(professional_name="Zeferino Quaresma")
        second = make_slot(professional_name="Zeferino Quaresmo", time="10:00")
        imported, _ = self.run(reconciler, [first, second], professionals, appointments)

        assert len(imported.new_professionals) == 2

    def test_creation_disabled_reports_error(self, profiles, make_slot, professionals, appointments):
        """Test that without creation an unknown professional is only reported."""
        profiles.update_profile(EntityType.PROFESSIONAL, create_when_unmatched=False)
        reconciler = NameReconciler(profiles)

        slot = make_slot(professional_name="Zeferino Quaresma")
        imported, change_set = self.run(reconciler, [slot], professionals, appointments)

        assert imported.new_professionals == []
        assert imported.schedule[0].professional_id is None
        assert change_set.validation_errors[0].type == EntityType.PROFESSIONAL
        assert change_set.suggested_changes[0].type == ChangeType.VALIDATION_ERROR


class TestGenerateProfessionalId:
    """Test synthetic id generation."""

    def test_unique_ids(self):
        ids = {generate_professional_id("imported-prof") for _ in range(100)}
        assert len(ids) == 100
        assert all(i.startswith("imported-prof-") for i in ids)
