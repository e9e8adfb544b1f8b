from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_today
from fittrack.api.queries import working_sets_by_instance
from fittrack.core.config import settings
from fittrack.db import get_db
from fittrack.models.workout import Exercise, ExerciseInstance, WorkoutInstance
from fittrack.services.strength import summarize_workout

router = APIRouter(prefix="/workout-history", tags=["workouts"])


@router.get("")
def get_workout_history(
    days: int = Query(7, ge=1),
    limit: int = Query(10, ge=1, le=100),
    program_instance_id: Optional[int] = Query(None),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Completed workouts in the last `days` days, most recent first."""
    since = datetime.combine(today - timedelta(days=days), time.min)

    query = (
        db.query(WorkoutInstance)
        .filter(WorkoutInstance.user_id == user_id)
        .filter(WorkoutInstance.status == "completed")
        .filter(WorkoutInstance.completed_at >= since)
    )
    if program_instance_id is not None:
        query = query.filter(WorkoutInstance.program_instance_id == program_instance_id)
    workouts = query.order_by(WorkoutInstance.completed_at.desc()).limit(limit).all()

    instances = []
    if workouts:
        instances = (
            db.query(ExerciseInstance, Exercise)
            .join(Exercise, Exercise.id == ExerciseInstance.exercise_id)
            .filter(ExerciseInstance.workout_instance_id.in_([w.id for w in workouts]))
            .order_by(ExerciseInstance.workout_instance_id, ExerciseInstance.exercise_order)
            .all()
        )
    sets = working_sets_by_instance(db, [ei.id for ei, _ in instances])

    by_workout: dict[int, list] = defaultdict(list)
    for ei, exercise in instances:
        by_workout[ei.workout_instance_id].append((exercise.name, sets.get(ei.id, [])))

    summaries = [
        summarize_workout(w, by_workout.get(w.id, []), settings.timezone)
        for w in workouts
    ]
    return {
        "workouts": summaries,
        "summary": {
            "totalWorkouts": len(summaries),
            "periodDays": days,
        },
    }
