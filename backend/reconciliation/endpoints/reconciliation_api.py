"""
Schedule Reconciliation API Endpoints

REST API for the schedule reconciliation engine:
- GET /api/schedule-reconciliation/status - Module status
- GET /api/schedule-reconciliation/match-profiles - Name matching profiles
- POST /api/schedule-reconciliation/preview - Reconcile an imported schedule
- POST /api/schedule-reconciliation/review - Resolve accept/cancel for a preview

Nothing is persisted: preview returns the change-set and the processed
data, review returns the dataset the host should keep.
"""

import logging
from collections import Counter
from typing import Optional, List
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Header
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import get_settings
from reconciliation.match_profiles import EntityType, match_profiles
from reconciliation.schedule_models import Appointment, ImportedSchedule, Professional
from reconciliation.services.reconciliation_service import ReconciliationEngine
from reconciliation.services.review import ReviewDecision, choose_dataset
from utils.validation_errors import raise_invalid_parameter, raise_validation_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule-reconciliation", tags=["Schedule Reconciliation"])


# ==================== Request Models ====================

class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PreviewRequest(CamelRequest):
    """Request to reconcile an imported schedule."""
    imported_data: ImportedSchedule = Field(..., description="Imported schedule batch")
    professionals: List[Professional] = Field(default_factory=list, description="Professional registry")
    appointments: List[Appointment] = Field(default_factory=list, description="Existing appointments")


class ReviewRequest(CamelRequest):
    """Request to resolve a reviewer decision."""
    decision: ReviewDecision = Field(..., description="accept or cancel")
    original_data: ImportedSchedule = Field(..., description="Imported data as it was before the preview")
    processed_data: Optional[ImportedSchedule] = Field(default=None, description="processedData returned by the preview")


# ==================== Authentication ====================

def verify_internal_auth(x_internal_api_key: Optional[str] = Header(None, alias="X-Internal-Api-Key")):
    """Verify internal API key authentication."""
    valid_keys = get_settings().internal_api_keys_list

    if not valid_keys:
        logger.warning("No internal API keys configured")
        raise HTTPException(status_code=503, detail="Internal authentication not configured")

    if not x_internal_api_key:
        raise HTTPException(status_code=401, detail="Missing X-Internal-Api-Key header")

    if x_internal_api_key not in valid_keys:
        raise HTTPException(status_code=403, detail="Invalid API key")

    return True


# ==================== Endpoints ====================

@router.get("/status", summary="Module status")
async def get_module_status():
    """
    Get schedule reconciliation module status.
    """
    settings = get_settings()
    return {
        "module": "schedule_reconciliation",
        "status": "operational",
        "version": settings.API_VERSION,
        "features": {
            "name_auto_correction": True,
            "professional_creation": match_profiles.get_profile(EntityType.PROFESSIONAL).create_when_unmatched,
            "conflict_detection": True
        },
        "name_match_threshold": settings.NAME_MATCH_THRESHOLD,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/match-profiles", summary="List name matching profiles")
async def list_match_profiles():
    """
    List the name matching profile of each entity type.
    """
    return {"profiles": [p.to_dict() for p in match_profiles.get_all_profiles()]}


@router.post("/preview", summary="Reconcile an imported schedule")
def preview_reconciliation(
    request: PreviewRequest,
    _auth: bool = Depends(verify_internal_auth)
):
    """
    Reconcile an imported schedule without committing anything.

    This will:
    1. Validate and auto-correct patient and professional names
    2. Propose new professionals for unknown names
    3. Detect double bookings, appointment collisions, duplicate rooms
       and inactive professionals

    Returns the change-set for review plus the processed data.
    """
    counts = Counter(slot.id for slot in request.imported_data.schedule)
    duplicates = sorted(slot_id for slot_id, n in counts.items() if n > 1)
    if duplicates:
        raise_invalid_parameter(
            "importedData.schedule",
            "slot ids must be unique",
            ", ".join(duplicates)
        )

    result = ReconciliationEngine().run(
        request.imported_data,
        request.professionals,
        request.appointments
    )

    return result.to_dict()


@router.post("/review", summary="Resolve a review decision")
async def review_reconciliation(
    request: ReviewRequest,
    _auth: bool = Depends(verify_internal_auth)
):
    """
    Resolve the reviewer's decision on a previewed change-set.

    Accept returns the processed data to commit; cancel returns the
    original data unchanged.
    """
    if request.decision == ReviewDecision.ACCEPT and request.processed_data is None:
        raise_validation_error("processedData is required to accept a change-set")

    dataset = choose_dataset(request.decision, request.original_data, request.processed_data)

    logger.info(f"Review decision received: {request.decision.value}")

    return {
        "decision": request.decision.value,
        "data": dataset.to_dict(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
