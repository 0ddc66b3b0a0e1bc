"""
Schedule Reconciliation Services
"""

from .name_reconciler import NameReconciler
from .conflict_detector import ConflictDetector
from .reconciliation_service import ReconciliationEngine, reconcile
from .review import ReviewDecision, resolve_review

__all__ = [
    "NameReconciler",
    "ConflictDetector",
    "ReconciliationEngine",
    "reconcile",
    "ReviewDecision",
    "resolve_review",
]
