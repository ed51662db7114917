from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dumbbell_tracker.database import get_db
from dumbbell_tracker.services.history import HistoryService

router = APIRouter()


@router.get("")
async def get_history(
    user_id: int = Query(...),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """Per-day buckets, range totals and the latest workout for the dashboard charts."""
    service = HistoryService(db)
    summary = service.history(user_id, start_date, end_date)
    latest = summary.latest
    return {
        "status": "success",
        "start_date": summary.start_date.isoformat(),
        "end_date": summary.end_date.isoformat(),
        "buckets": [
            {
                "date": bucket.date.isoformat(),
                "duration": bucket.duration,
                "calories": round(bucket.calories, 2),
                "reps": bucket.reps,
                "total_weight": bucket.total_weight,
                "session_count": bucket.session_count,
            }
            for bucket in summary.buckets
        ],
        "totals": {
            "duration": summary.totals.duration,
            "calories": round(summary.totals.calories, 2),
            "reps": summary.totals.reps,
            "total_weight": summary.totals.total_weight,
            "session_count": summary.totals.session_count,
        },
        "latest": (
            {
                "date": latest.date.isoformat(sep=" "),
                "duration": latest.duration,
                "reps": latest.reps,
                "calories": round(latest.calories, 2),
                "weight": latest.weight,
            }
            if latest
            else None
        ),
    }
