from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, StrictFloat, StrictInt
from sqlalchemy.orm import Session

from dumbbell_tracker.core.logging import get_logger
from dumbbell_tracker.database import get_db
from dumbbell_tracker.metrics.motion import RepCaptureWindow, RepSample
from dumbbell_tracker.services.rep_capture import RepCaptureService

logger = get_logger(__name__)

router = APIRouter()


class SamplePayload(BaseModel):
    ax: float
    ay: float
    az: float
    angle: float
    t: float = 0.0


class RepUpload(BaseModel):
    session_id: str
    rep_number: StrictInt
    weight: Optional[StrictFloat] = None
    user_id: Optional[StrictInt] = None
    rep_start: Optional[float] = None
    rep_end: Optional[float] = None
    rep_duration: Optional[float] = None
    data_points: list[SamplePayload] = Field(default_factory=list)


@router.post("")
async def upload_rep(data: RepUpload, db: Session = Depends(get_db)):
    """Record one sensor-captured rep and its estimated work."""
    window = RepCaptureWindow(
        rep_number=data.rep_number,
        samples=[RepSample(**point.model_dump()) for point in data.data_points],
        rep_start=data.rep_start,
        rep_end=data.rep_end,
        rep_duration=data.rep_duration,
    )
    service = RepCaptureService(db)
    result = service.record_rep(data.session_id, window, weight=data.weight, user_id=data.user_id)
    capture = result.capture
    return {
        "status": "success",
        "session_created": result.session_created,
        "data": {
            "session_id": capture.session_id,
            "rep_number": capture.rep_number,
            "angle_range": capture.angle_range,
            "peak_acceleration": capture.max_accel,
            "displacement": capture.displacement,
            "work_done": capture.work_done,
            "calories": capture.calories,
            "duration": capture.duration,
            "samples": len(window.samples),
        },
        "session_rep_calories": result.session_rep_calories,
    }
