from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, StrictFloat, StrictInt
from sqlalchemy.orm import Session

from dumbbell_tracker.api.routes.workouts import entry_to_response
from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.database import get_db
from dumbbell_tracker.services.sessions import SessionService

logger = get_logger(__name__)

router = APIRouter()


class SessionStart(BaseModel):
    session_id: str
    user_id: StrictInt
    weight: StrictFloat


def _isoformat(value) -> Optional[str]:
    return value.isoformat(sep=" ") if value else None


def session_to_response(session, include_entries: bool = True) -> dict:
    """Convert WorkoutSession model to response dict."""
    data = {
        "id": session.id,
        "session_id": session.session_id,
        "user_id": session.user_id,
        "dumbbell_weight": session.dumbbell_weight,
        "start_time": _isoformat(session.start_time),
        "end_time": _isoformat(session.end_time),
        "status": "active" if session.is_active else "completed",
        "total_reps": session.total_reps,
        "total_sets": session.total_sets,
        "total_calories": round(session.total_calories, 2),
        "avg_form_score": round(session.avg_form_score, 2),
    }
    if include_entries:
        entries = [entry_to_response(entry) for entry in session.entries]
        data["workout_data"] = entries
        data["duration"] = sum(entry["duration"] for entry in entries)
    return data


@router.post("", status_code=201)
async def start_session(data: SessionStart, db: Session = Depends(get_db)):
    """Open a session after an RFID tap and weight entry."""
    service = SessionService(db)
    session = service.start_session(data.session_id, data.user_id, data.weight)
    return {"status": "success", "data": session_to_response(session, include_entries=False)}


@router.get("")
async def list_sessions(
    user_id: int = Query(...),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """Sessions for a user, each with its nested workout entries."""
    service = SessionService(db)
    sessions = service.list_sessions(user_id, start_date, end_date)
    return {
        "status": "success",
        "count": len(sessions),
        "data": [session_to_response(session) for session in sessions],
    }


@router.get("/{session_id}")
async def get_session(session_id: str, db: Session = Depends(get_db)):
    service = SessionService(db)
    return {"status": "success", "data": session_to_response(service.get_session(session_id))}


@router.post("/{session_id}/end")
async def end_session(session_id: str, db: Session = Depends(get_db)):
    """Close a session; totals are recomputed from its stored entries."""
    service = SessionService(db)
    session = service.end_session(session_id)
    return {
        "status": "success",
        "message": "Session ended successfully",
        "data": session_to_response(session),
    }
