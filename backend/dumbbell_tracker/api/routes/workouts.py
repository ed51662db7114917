from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, StrictFloat, StrictInt
from sqlalchemy.orm import Session

from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.database import get_db
from dumbbell_tracker.services.ingestion import IngestionService, WorkoutSubmission
from dumbbell_tracker.services.workouts import WorkoutService

logger = get_logger(__name__)

router = APIRouter()


# =========================================================================
# Request/Response Models
# =========================================================================


class WorkoutCreate(BaseModel):
    # Presence and positivity are checked by the ingestion service so every
    # missing field is reported together
    session_id: Optional[str] = None
    user_id: Optional[StrictInt] = None
    reps: Optional[StrictInt] = None
    sets: Optional[StrictInt] = None
    weight: Optional[StrictFloat] = None
    duration: Optional[StrictInt] = None
    form_score: Optional[StrictFloat] = None
    workout_date: Optional[str] = None


class WorkoutUpdate(BaseModel):
    weight: Optional[StrictFloat] = None
    reps: Optional[StrictInt] = None
    sets: Optional[StrictInt] = None
    duration: Optional[StrictInt] = None
    form_score: Optional[StrictFloat] = None
    calories: Optional[StrictFloat] = None
    workout_date: Optional[str] = None


# =========================================================================
# Helper Functions
# =========================================================================


def entry_to_response(entry) -> dict:
    """Convert WorkoutEntry model to response dict."""
    return {
        "id": entry.id,
        "session_id": entry.session_id,
        "weight": entry.weight,
        "reps": entry.reps,
        "sets": entry.sets,
        "duration": entry.duration,
        "calories": round(entry.calories, 2),
        "form_score": entry.form_score,
        "total_weight": entry.total_weight,
        "timestamp": entry.timestamp.isoformat(sep=" ") if entry.timestamp else None,
    }


def aggregates_to_response(session) -> dict:
    return {
        "session_id": session.session_id,
        "total_reps": session.total_reps,
        "total_sets": session.total_sets,
        "total_calories": round(session.total_calories, 2),
        "avg_form_score": round(session.avg_form_score, 2),
    }


# =========================================================================
# Workout Endpoints
# =========================================================================


@router.post("")
async def create_workout(data: WorkoutCreate, db: Session = Depends(get_db)):
    """Ingest one workout entry; a retransmission inside the duplicate window is a no-op."""
    service = IngestionService(db)
    result = service.ingest(WorkoutSubmission(**data.model_dump()))
    return {
        "status": "success",
        "message": "Duplicate submission ignored" if result.duplicate else "Workout data saved",
        "duplicate": result.duplicate,
        "session_created": result.session_created,
        "data": entry_to_response(result.entry),
        "session": aggregates_to_response(result.session),
    }


@router.get("")
async def list_workouts(
    user_id: int = Query(...),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Paginated workout details for a user, newest first."""
    service = WorkoutService(db)
    result = service.list_for_user(user_id, page=page, limit=limit)
    return {
        "status": "success",
        "data": [entry_to_response(entry) for entry in result.entries],
        "pagination": {
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "pages": result.pages,
        },
    }


@router.get("/{entry_id}")
async def get_workout(entry_id: int, db: Session = Depends(get_db)):
    service = WorkoutService(db)
    return {"status": "success", "data": entry_to_response(service.get_entry(entry_id))}


@router.put("/{entry_id}")
async def update_workout(entry_id: int, data: WorkoutUpdate, db: Session = Depends(get_db)):
    """Edit a workout entry and recompute its session."""
    service = WorkoutService(db)
    entry, session = service.update_entry(entry_id, data.model_dump(exclude_unset=True))
    return {
        "status": "success",
        "message": "Workout updated",
        "data": entry_to_response(entry),
        "session": aggregates_to_response(session),
    }


@router.delete("/{entry_id}")
async def delete_workout(entry_id: int, db: Session = Depends(get_db)):
    """Delete a workout entry and recompute its session."""
    service = WorkoutService(db)
    session = service.delete_entry(entry_id)
    return {
        "status": "success",
        "message": "Workout deleted",
        "session": aggregates_to_response(session),
    }
