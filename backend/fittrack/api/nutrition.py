import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_today
from fittrack.core.config import settings
from fittrack.core.exceptions import NotFoundError, ValidationError
from fittrack.db import get_db
from fittrack.models.meal_log import MealLog, WaterLog
from fittrack.models.profile import Profile
from fittrack.schemas.logs import MealLogCreate, MealLogRead, WaterLogCreate
from fittrack.services.nutrition import (
    build_nutrition_summary,
    build_nutrition_today,
    build_water_today,
    daily_breakdown,
    resolve_targets,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nutrition", tags=["nutrition"])


def _targets(db: Session, user_id: str) -> dict:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    return resolve_targets(profile.nutrition_targets if profile else None, settings.default_targets())


@router.get("/today")
def get_nutrition_today(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    meals = (
        db.query(MealLog)
        .filter(MealLog.user_id == user_id)
        .filter(MealLog.date == today)
        .order_by(MealLog.logged_at.asc(), MealLog.id.asc())
        .all()
    )
    return build_nutrition_today(meals, _targets(db, user_id), today, settings.timezone)


@router.get("/summary")
def get_nutrition_summary(
    days: int = Query(7, ge=1),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Averages, compliance and trends over the last `days` days."""
    start = today - timedelta(days=days)
    meals = (
        db.query(MealLog)
        .filter(MealLog.user_id == user_id)
        .filter(MealLog.date >= start)
        .filter(MealLog.date <= today)
        .order_by(MealLog.date.asc(), MealLog.id.asc())
        .all()
    )
    return build_nutrition_summary(daily_breakdown(meals), _targets(db, user_id), start, today)


@router.post("/meals", response_model=MealLogRead)
def log_meal(
    payload: MealLogCreate,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    for field in ("calories", "protein", "carbs", "fats"):
        value = getattr(payload, field)
        if value is not None and value < 0:
            raise ValidationError(f"{field} must be >= 0", field=field)

    meal = MealLog(
        user_id=user_id,
        date=payload.date or today,
        meal_type=payload.meal_type.value,
        name=payload.name,
        calories=payload.calories,
        protein=payload.protein,
        carbs=payload.carbs,
        fats=payload.fats,
    )
    db.add(meal)
    db.commit()
    db.refresh(meal)
    logger.info("Logged %s for user %s on %s", meal.meal_type, user_id, meal.date)
    return meal


@router.delete("/meals/{meal_id}")
def delete_meal(
    meal_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    meal = (
        db.query(MealLog)
        .filter(MealLog.id == meal_id, MealLog.user_id == user_id)
        .first()
    )
    if not meal:
        raise NotFoundError("Meal", meal_id)
    db.delete(meal)
    db.commit()
    return {"message": "Meal deleted"}


@router.post("/water")
def log_water(
    payload: WaterLogCreate,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    if payload.amount_oz <= 0:
        raise ValidationError("amount_oz must be > 0", field="amount_oz")
    row = WaterLog(user_id=user_id, date=payload.date or today, amount_oz=payload.amount_oz)
    db.add(row)
    db.commit()
    db.refresh(row)
    return {"id": row.id, "date": row.date.isoformat(), "amountOz": payload.amount_oz}


@router.get("/water/today")
def get_water_today(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    logs = (
        db.query(WaterLog)
        .filter(WaterLog.user_id == user_id)
        .filter(WaterLog.date == today)
        .order_by(WaterLog.logged_at.asc(), WaterLog.id.asc())
        .all()
    )
    return build_water_today(logs, today)
