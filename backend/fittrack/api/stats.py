from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_today
from fittrack.api.queries import working_sets_by_instance
from fittrack.core.config import settings
from fittrack.core.time_utils import local_day
from fittrack.db import get_db
from fittrack.models.workout import (
    ExerciseInstance,
    ProgramInstance,
    ProgramTemplate,
    WorkoutInstance,
)
from fittrack.services.strength import session_volume
from fittrack.services.summary import build_stats_summary, period_window, program_progress
from fittrack.services.trends import compute_streak

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/summary")
def get_stats_summary(
    period: str = Query("week", description="week | month | program | all"),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Workout counts, consistency, volume, streak and active program for a period."""
    active = (
        db.query(ProgramInstance, ProgramTemplate)
        .join(ProgramTemplate, ProgramTemplate.id == ProgramInstance.program_id)
        .filter(ProgramInstance.user_id == user_id)
        .filter(ProgramInstance.status == "active")
        .order_by(ProgramInstance.id.desc())
        .first()
    )
    program_started = None
    if active is not None and active[0].started_at is not None:
        program_started = local_day(active[0].started_at, settings.timezone)

    start, end = period_window(period, today, program_started if period == "program" else None)
    window_start = datetime.combine(start, time.min)
    window_end = datetime.combine(end + timedelta(days=1), time.min)

    completed = (
        db.query(WorkoutInstance.id)
        .filter(WorkoutInstance.user_id == user_id)
        .filter(WorkoutInstance.status == "completed")
        .filter(WorkoutInstance.completed_at >= window_start)
        .filter(WorkoutInstance.completed_at < window_end)
        .all()
    )
    completed_ids = [row.id for row in completed]

    scheduled_count = (
        db.query(WorkoutInstance.id)
        .filter(WorkoutInstance.user_id == user_id)
        .filter(WorkoutInstance.scheduled_date >= start)
        .filter(WorkoutInstance.scheduled_date <= end)
        .count()
    )

    total_volume = 0.0
    if completed_ids:
        instance_ids = [
            row.id
            for row in db.query(ExerciseInstance.id)
            .filter(ExerciseInstance.workout_instance_id.in_(completed_ids))
            .all()
        ]
        for sets in working_sets_by_instance(db, instance_ids).values():
            total_volume += session_volume(sets)

    completed_times = [
        row.completed_at
        for row in db.query(WorkoutInstance.completed_at)
        .filter(WorkoutInstance.user_id == user_id)
        .filter(WorkoutInstance.status == "completed")
        .filter(WorkoutInstance.completed_at.isnot(None))
        .all()
    ]
    streak = compute_streak(completed_times, today, settings.timezone)

    program = None
    if active is not None:
        instance, template = active
        program_completed = (
            db.query(WorkoutInstance.id)
            .filter(WorkoutInstance.program_instance_id == instance.id)
            .filter(WorkoutInstance.status == "completed")
            .count()
        )
        program = program_progress(
            template.name,
            instance.status,
            instance.current_cycle,
            program_completed,
            template.total_days,
        )

    return build_stats_summary(
        period,
        start,
        end,
        completed=len(completed_ids),
        scheduled=scheduled_count,
        total_volume=total_volume,
        streak=streak,
        program=program,
    )
