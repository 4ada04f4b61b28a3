"""Doctor listing endpoint — the hand-off target of a recommendation."""

from fastapi import APIRouter, Depends, Query

from symptom_triage.constants import FALLBACK_DOCTOR_COUNT
from symptom_triage.directory import DoctorDirectory, match_doctors
from symptom_triage.models.schema import DoctorMatch
from symptom_triage.ruleset import RulesetStore

from triage_server.dependencies import get_directory, get_store

router = APIRouter(tags=["doctors"])


@router.get("/doctors")
def list_doctors(
    specialization: str | None = Query(None),
    concern: str | None = Query(None),
    condition: str | None = Query(None),
    fallback: int = Query(FALLBACK_DOCTOR_COUNT, ge=0, le=50),
    store: RulesetStore = Depends(get_store),
    directory: DoctorDirectory = Depends(get_directory),
) -> list[DoctorMatch]:
    """List doctors, recommended ones first.

    ``specialization`` takes precedence over ``concern``, which takes
    precedence over ``condition``.  An unknown specialization tag is a 404.
    """
    if specialization:
        store.resolve_specialization(specialization)
    return match_doctors(
        directory,
        specialization=specialization,
        concern_id=concern,
        condition_id=condition,
        fallback_limit=fallback,
    )
