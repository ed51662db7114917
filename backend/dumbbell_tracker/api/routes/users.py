from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.database import get_db
from dumbbell_tracker.services.history import HistoryService
from dumbbell_tracker.services.users import UserService

logger = get_logger(__name__)

router = APIRouter()


class UserCreate(BaseModel):
    name: str
    rfid_tag: str


class RfidScan(BaseModel):
    rfid_tag: str


def user_to_response(user) -> dict:
    """Convert User model to response dict."""
    return {
        "id": user.id,
        "name": user.name,
        "rfid_tag": user.rfid_tag,
        "created_at": user.created_at.isoformat(sep=" ") if user.created_at else None,
    }


@router.post("", status_code=201)
async def register_user(data: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    user = service.register(data.name, data.rfid_tag)
    return {"status": "success", "data": user_to_response(user)}


@router.post("/rfid-scan")
async def rfid_scan(data: RfidScan, db: Session = Depends(get_db)):
    """Resolve a tapped RFID tag to a user, if one is registered."""
    service = UserService(db)
    user = service.scan(data.rfid_tag)
    if user is None:
        return {"status": "success", "user_exists": False, "user": None}
    return {"status": "success", "user_exists": True, "user": user_to_response(user)}


@router.get("/{user_id}")
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """User profile with lifetime workout statistics."""
    service = UserService(db)
    user = service.get_user(user_id)
    return {
        "status": "success",
        "data": user_to_response(user),
        "stats": service.get_stats(user_id),
    }


@router.get("/{user_id}/workout-dates")
async def workout_dates(user_id: int, db: Session = Depends(get_db)):
    service = HistoryService(db)
    dates = service.workout_dates(user_id)
    return {"status": "success", "dates": [d.isoformat() for d in dates]}


@router.get("/{user_id}/streak")
async def workout_streak(user_id: int, db: Session = Depends(get_db)):
    """Current consecutive-day streak; has_data is false for users with no workouts."""
    service = HistoryService(db)
    result = service.streak(user_id)
    return {
        "status": "success",
        "streak": result.streak,
        "has_data": result.has_data,
        "last_workout_date": result.last_workout_date.isoformat() if result.last_workout_date else None,
    }
