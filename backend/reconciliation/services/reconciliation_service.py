"""
Schedule Reconciliation Service

Runs one reconciliation of an imported schedule:
- Snapshot of the imported data before any change
- Name validation and auto-correction
- Conflict detection
- Audit logging

The engine never touches the caller's objects: it reconciles an owned
working copy and returns it as processed_data. Committing that data is
up to the caller (see services.review).
"""

import uuid
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Iterable, List, Optional, Union, Type, TypeVar

from logging_config import set_run_context, clear_run_context
from reconciliation.change_set import ChangeSet, ReconciliationResult
from reconciliation.match_profiles import MatchProfileRegistry
from reconciliation.schedule_models import (
    Appointment,
    ImportedSchedule,
    Professional,
    ScheduleModel
)
from reconciliation.services.conflict_detector import ConflictDetector
from reconciliation.services.name_reconciler import NameReconciler

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=ScheduleModel)


class ReconciliationAuditEvent:
    """Audit event types for schedule reconciliation."""
    RUN_STARTED = "schedule_reconciliation.run_started"
    RUN_COMPLETED = "schedule_reconciliation.run_completed"
    RUN_FAILED = "schedule_reconciliation.run_failed"


def log_reconciliation_event(
    event_type: str,
    run_id: str,
    details: Dict[str, Any],
    actor: str = "system"
):
    """Log reconciliation event for audit trail."""
    log_entry = {
        "event": event_type,
        "run_id": run_id,
        "details": details,
        "actor": actor,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    logger.info(f"Reconciliation event: {event_type}", extra=log_entry)


def _as_model(value: Union[ModelT, Dict[str, Any]], model: Type[ModelT]) -> ModelT:
    if isinstance(value, model):
        return value
    return model.model_validate(value)


class ReconciliationEngine:
    """
    Reconciles an imported schedule against the professional and appointment registries.

    Build one engine per run; it keeps no state between runs.
    """

    def __init__(
        self,
        name_reconciler: Optional[NameReconciler] = None,
        conflict_detector: Optional[ConflictDetector] = None,
        profiles: Optional[MatchProfileRegistry] = None
    ):
        self.name_reconciler = name_reconciler or NameReconciler(profiles)
        self.conflict_detector = conflict_detector or ConflictDetector()

    def run(
        self,
        imported_data: Union[ImportedSchedule, Dict[str, Any]],
        professionals: Iterable[Union[Professional, Dict[str, Any]]],
        appointments: Iterable[Union[Appointment, Dict[str, Any]]]
    ) -> ReconciliationResult:
        """
        Reconcile an imported schedule.

        Args:
            imported_data: Imported schedule (model or camelCase/snake_case dict)
            professionals: Professional registry
            appointments: Existing appointments

        Returns:
            ReconciliationResult with the change-set and the processed data

        Raises:
            pydantic.ValidationError: if the input is structurally invalid
        """
        run_id = str(uuid.uuid4())

        imported = _as_model(imported_data, ImportedSchedule)
        professional_registry: List[Professional] = [_as_model(p, Professional) for p in professionals]
        appointment_registry: List[Appointment] = [_as_model(a, Appointment) for a in appointments]

        original_data = imported.model_copy(deep=True)
        working = imported.model_copy(deep=True)
        change_set = ChangeSet()

        set_run_context(run_id)
        try:
            log_reconciliation_event(
                ReconciliationAuditEvent.RUN_STARTED,
                run_id,
                {
                    "slots": len(working.schedule),
                    "occupied_slots": sum(1 for s in working.schedule if s.is_occupied),
                    "professionals": len(professional_registry),
                    "appointments": len(appointment_registry)
                }
            )

            self.name_reconciler.reconcile(
                working,
                professional_registry,
                appointment_registry,
                change_set
            )
            self.conflict_detector.detect(
                working,
                professional_registry,
                appointment_registry,
                change_set
            )
        except Exception as e:
            log_reconciliation_event(
                ReconciliationAuditEvent.RUN_FAILED,
                run_id,
                {"error": str(e), "error_type": type(e).__name__}
            )
            raise
        finally:
            clear_run_context()

        result = change_set.freeze(run_id, processed_data=working, original_data=original_data)

        log_reconciliation_event(
            ReconciliationAuditEvent.RUN_COMPLETED,
            run_id,
            {
                **result.summary(),
                "new_professionals": len(working.new_professionals) - len(original_data.new_professionals)
            }
        )

        return result


def reconcile(
    imported_data: Union[ImportedSchedule, Dict[str, Any]],
    professionals: Iterable[Union[Professional, Dict[str, Any]]],
    appointments: Iterable[Union[Appointment, Dict[str, Any]]]
) -> ReconciliationResult:
    """Run a reconciliation with a fresh engine."""
    return ReconciliationEngine().run(imported_data, professionals, appointments)
