import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_today
from fittrack.core.config import settings
from fittrack.core.exceptions import ValidationError
from fittrack.db import get_db
from fittrack.models.profile import Profile
from fittrack.models.weight_log import WeightLog
from fittrack.schemas.logs import WeightLogCreate, WeightLogRead
from fittrack.services.body import build_weight_progress

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


def _point(row: WeightLog) -> dict:
    return {"date": row.date, "weight": float(row.weight_lbs)}


@router.get("/weight")
def get_weight_progress(
    days: int = Query(30, ge=1),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Current weight, recent history, change since the first log and goal ETA."""
    start = today - timedelta(days=days)
    rows = (
        db.query(WeightLog)
        .filter(WeightLog.user_id == user_id)
        .filter(WeightLog.date >= start)
        .order_by(WeightLog.date.desc(), WeightLog.id.desc())
        .all()
    )
    earliest = (
        db.query(WeightLog)
        .filter(WeightLog.user_id == user_id)
        .order_by(WeightLog.date.asc(), WeightLog.id.asc())
        .first()
    )
    profile = db.query(Profile).filter(Profile.id == user_id).first()

    return build_weight_progress(
        [_point(r) for r in rows],
        _point(earliest) if earliest else None,
        profile.weight_goal if profile else None,
        today,
        unit=settings.weight_unit,
    )


@router.post("/weight", response_model=WeightLogRead)
def log_weight(
    payload: WeightLogCreate,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    if payload.weight_lbs <= 0:
        raise ValidationError("weight_lbs must be > 0", field="weight_lbs")

    row = WeightLog(
        user_id=user_id,
        date=payload.date or today,
        weight_lbs=payload.weight_lbs,
        time_of_day=payload.time_of_day,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Logged weight for user %s on %s", user_id, row.date)
    return row
