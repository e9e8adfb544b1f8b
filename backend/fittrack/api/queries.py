"""Read helpers shared by the statistics routers.

Sets are fetched in one query per call rather than per exercise instance.
"""
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from fittrack.models.workout import Exercise, ExerciseInstance, SetInstance, WorkoutInstance
from fittrack.services.strength import ExerciseSession, WorkingSet, working_sets


def working_sets_by_instance(db: Session, instance_ids: Iterable[int]) -> dict[int, list[WorkingSet]]:
    """Working sets (no warmups, weight logged) per exercise instance, in set order."""
    ids = list(instance_ids)
    grouped: dict[int, list] = defaultdict(list)
    if not ids:
        return {}
    rows = (
        db.query(SetInstance)
        .filter(SetInstance.exercise_instance_id.in_(ids))
        .filter(SetInstance.is_warmup.is_(False))
        .filter(SetInstance.actual_weight_lbs.isnot(None))
        .order_by(SetInstance.exercise_instance_id, SetInstance.set_number)
        .all()
    )
    for row in rows:
        grouped[row.exercise_instance_id].append(row)
    return {instance_id: working_sets(sets) for instance_id, sets in grouped.items()}


def completed_sessions(
    db: Session,
    user_id: str,
    exercise_id: Optional[int] = None,
    since: Optional[date] = None,
    newest_first: bool = False,
    limit: Optional[int] = None,
) -> list[ExerciseSession]:
    """Completed exercise instances for a user as ExerciseSession objects.

    The session date is the performed date, or the workout's scheduled date
    when none was recorded.
    """
    query = (
        db.query(ExerciseInstance, Exercise, WorkoutInstance)
        .join(Exercise, Exercise.id == ExerciseInstance.exercise_id)
        .outerjoin(WorkoutInstance, WorkoutInstance.id == ExerciseInstance.workout_instance_id)
        .filter(ExerciseInstance.user_id == user_id)
        .filter(ExerciseInstance.status == "completed")
    )
    if exercise_id is not None:
        query = query.filter(ExerciseInstance.exercise_id == exercise_id)
    if since is not None:
        query = query.filter(ExerciseInstance.performed_date >= since)

    rows = query.all()

    sessions_with_ids = []
    for instance, exercise, workout in rows:
        when = instance.performed_date or (workout.scheduled_date if workout else None)
        session = ExerciseSession(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            date=when,
            workout_name=(workout.name if workout and workout.name else "Workout"),
        )
        sessions_with_ids.append((instance.id, session))

    # Chronological (or newest first), undated sessions last
    sessions_with_ids.sort(
        key=lambda pair: (pair[1].date is None, pair[1].date or date.min, pair[0]),
    )
    if newest_first:
        dated = [p for p in sessions_with_ids if p[1].date is not None]
        undated = [p for p in sessions_with_ids if p[1].date is None]
        sessions_with_ids = list(reversed(dated)) + undated
    if limit is not None:
        sessions_with_ids = sessions_with_ids[:limit]

    sets = working_sets_by_instance(db, [instance_id for instance_id, _ in sessions_with_ids])
    for instance_id, session in sessions_with_ids:
        session.sets = sets.get(instance_id, [])
    return [session for _, session in sessions_with_ids]
