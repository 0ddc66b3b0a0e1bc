"""
Schedule Reconciliation Module

Reconciles imported room schedules against the professional and
appointment registries:
- Patient/professional name validation with fuzzy auto-correction
- New professional proposals for unknown names
- Double-booking, appointment collision, duplicate room and
  inactive professional detection
- A change-set for human review before anything is committed
"""

from reconciliation.match_profiles import (
    EntityType,
    NameMatchType,
    MatchProfile,
    MatchProfileRegistry,
    match_profiles
)
from reconciliation.matching_rules.name_rules import NameMatcher, NameMatch, normalize_name
from reconciliation.schedule_models import Slot, Professional, Appointment, ImportedSchedule
from reconciliation.change_set import (
    ChangeCategory,
    ChangeType,
    ConflictType,
    ChangeRecord,
    Conflict,
    ProfessionalDoubleBooked,
    ExistingAppointmentCollision,
    DuplicateRoomBooking,
    InactiveProfessional,
    AutoCorrection,
    NameValidationError,
    ReconciliationResult
)
from reconciliation.services.reconciliation_service import ReconciliationEngine, reconcile
from reconciliation.services.review import ReviewDecision, resolve_review
from reconciliation.endpoints.reconciliation_api import router as reconciliation_router

__all__ = [
    # Match profiles
    'EntityType',
    'NameMatchType',
    'MatchProfile',
    'MatchProfileRegistry',
    'match_profiles',
    # Matching rules
    'NameMatcher',
    'NameMatch',
    'normalize_name',
    # Schedule data
    'Slot',
    'Professional',
    'Appointment',
    'ImportedSchedule',
    # Change-set
    'ChangeCategory',
    'ChangeType',
    'ConflictType',
    'ChangeRecord',
    'Conflict',
    'ProfessionalDoubleBooked',
    'ExistingAppointmentCollision',
    'DuplicateRoomBooking',
    'InactiveProfessional',
    'AutoCorrection',
    'NameValidationError',
    'ReconciliationResult',
    # Engine
    'ReconciliationEngine',
    'reconcile',
    'ReviewDecision',
    'resolve_review',
    # Router
    'reconciliation_router'
]
