import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_today
from fittrack.core.exceptions import ValidationError
from fittrack.db import get_db
from fittrack.models.sleep_log import SleepLog
from fittrack.schemas.logs import SleepLogCreate, SleepLogRead
from fittrack.services.body import build_sleep_summary, hours_between

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sleep", tags=["sleep"])


@router.post("", response_model=SleepLogRead)
def log_sleep(
    payload: SleepLogCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        hours = hours_between(payload.bedtime, payload.wake_time)
    except ValueError as e:
        raise ValidationError(str(e), field="wake_time")
    if payload.quality_rating is not None and not 1 <= payload.quality_rating <= 5:
        raise ValidationError("quality_rating must be between 1 and 5", field="quality_rating")

    row = SleepLog(
        user_id=user_id,
        date=payload.date or payload.bedtime.date(),
        bedtime=payload.bedtime,
        wake_time=payload.wake_time,
        hours_slept=hours,
        quality_rating=payload.quality_rating,
        notes=payload.notes,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Logged %.2fh of sleep for user %s", hours, user_id)
    return row


@router.get("/summary")
def get_sleep_summary(
    days: int = Query(7, ge=1),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    start = today - timedelta(days=days)
    logs = (
        db.query(SleepLog)
        .filter(SleepLog.user_id == user_id)
        .filter(SleepLog.date >= start)
        .filter(SleepLog.date <= today)
        .order_by(SleepLog.date.asc(), SleepLog.id.asc())
        .all()
    )
    return build_sleep_summary(logs, start, today)
