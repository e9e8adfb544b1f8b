from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_today
from fittrack.api.queries import completed_sessions
from fittrack.db import get_db
from fittrack.models.workout import Exercise
from fittrack.services.strength import build_exercise_history, empty_exercise_history

router = APIRouter(prefix="/exercise", tags=["exercises"])


@router.get("/{name}/history")
def get_exercise_history(
    name: str,
    limit: int = Query(20, ge=1, le=200),
    days: Optional[int] = Query(None, ge=1),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Recent sessions of the first exercise whose name contains `name`
    ('-' for spaces), newest first:
      GET /exercise/bench-press/history?limit=10&days=90
    """
    needle = name.replace("-", " ")
    exercise = (
        db.query(Exercise)
        .filter(Exercise.name.ilike(f"%{needle}%"))
        .order_by(Exercise.name)
        .first()
    )
    if not exercise:
        return empty_exercise_history()

    since = today - timedelta(days=days) if days else None
    sessions = completed_sessions(
        db,
        user_id,
        exercise_id=exercise.id,
        since=since,
        newest_first=True,
        limit=limit,
    )

    muscle_groups = [
        g for g in [exercise.primary_muscle_group, *(exercise.secondary_muscle_groups or [])] if g
    ]
    return {
        "exercise": {
            "id": exercise.id,
            "name": exercise.name,
            "muscleGroups": muscle_groups,
        },
        **build_exercise_history(sessions),
    }
