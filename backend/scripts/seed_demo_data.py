from datetime import date, datetime, time, timedelta
import random

from fittrack.db import Base, SessionLocal, engine
from fittrack.models import meal_log, profile, schedule_event, sleep_log, weight_log  # noqa: F401
from fittrack.models.meal_log import MealLog
from fittrack.models.profile import Profile
from fittrack.models.schedule_event import ScheduleEvent
from fittrack.models.weight_log import WeightLog
from fittrack.models.workout import (
    Exercise,
    ExerciseInstance,
    ProgramInstance,
    ProgramTemplate,
    SetInstance,
    WorkoutInstance,
)

DEMO_USER = "demo-user"

# name, primary muscle group, starting working weight
LIFTS = [
    ("Bench Press", "chest", 135),
    ("Back Squat", "legs", 185),
    ("Deadlift", "back", 225),
    ("Overhead Press", "shoulders", 85),
]


def clear_demo_user(db) -> None:
    """Delete everything owned by the demo user so we can reseed cleanly."""
    workout_ids = [w.id for w in db.query(WorkoutInstance.id).filter(WorkoutInstance.user_id == DEMO_USER)]
    instance_ids = [
        e.id for e in db.query(ExerciseInstance.id).filter(ExerciseInstance.user_id == DEMO_USER)
    ]
    if instance_ids:
        db.query(SetInstance).filter(SetInstance.exercise_instance_id.in_(instance_ids)).delete(
            synchronize_session=False
        )
    db.query(ExerciseInstance).filter(ExerciseInstance.user_id == DEMO_USER).delete()
    if workout_ids:
        db.query(WorkoutInstance).filter(WorkoutInstance.id.in_(workout_ids)).delete(
            synchronize_session=False
        )
    for model in (ProgramInstance, ScheduleEvent, WeightLog, MealLog):
        db.query(model).filter(model.user_id == DEMO_USER).delete()
    db.query(Profile).filter(Profile.id == DEMO_USER).delete()
    db.commit()


def get_or_create_exercises(db) -> list[Exercise]:
    exercises = []
    for name, group, _ in LIFTS:
        exercise = db.query(Exercise).filter(Exercise.name == name).first()
        if exercise is None:
            exercise = Exercise(name=name, primary_muscle_group=group)
            db.add(exercise)
            db.flush()
        exercises.append(exercise)
    return exercises


def seed_training(db, weeks: int = 8) -> int:
    """Mon/Wed/Fri full-body sessions with a small weekly progression."""
    today = date.today()
    start_day = today - timedelta(weeks=weeks - 1, days=today.weekday())

    template = ProgramTemplate(name="Demo Full Body", total_days=weeks * 3)
    db.add(template)
    db.flush()
    program = ProgramInstance(
        user_id=DEMO_USER,
        program_id=template.id,
        status="active",
        current_cycle=1,
        started_at=datetime.combine(start_day, time(7, 0)),
    )
    db.add(program)
    db.flush()

    exercises = get_or_create_exercises(db)
    count = 0
    for week in range(weeks):
        for offset in (0, 2, 4):
            day = start_day + timedelta(weeks=week, days=offset)
            if day > today:
                continue
            started = datetime.combine(day, time(7, 0))
            workout = WorkoutInstance(
                user_id=DEMO_USER,
                program_instance_id=program.id,
                name="Full Body",
                day_number=count + 1,
                status="completed",
                scheduled_date=day,
                started_at=started,
                completed_at=started + timedelta(minutes=random.randint(45, 75)),
            )
            db.add(workout)
            db.flush()

            for order, (exercise, (_, _, base)) in enumerate(zip(exercises, LIFTS), start=1):
                instance = ExerciseInstance(
                    user_id=DEMO_USER,
                    workout_instance_id=workout.id,
                    exercise_id=exercise.id,
                    exercise_order=order,
                    status="completed",
                    performed_date=day,
                )
                db.add(instance)
                db.flush()

                working = base + 5 * week
                sets = [(round(working * 0.5), 8, True)] + [(working, random.randint(4, 8), False)] * 3
                db.add_all(
                    SetInstance(
                        exercise_instance_id=instance.id,
                        set_number=n,
                        actual_weight_lbs=weight,
                        actual_reps=reps,
                        is_warmup=warmup,
                    )
                    for n, (weight, reps, warmup) in enumerate(sets, start=1)
                )
            count += 1

    db.commit()
    return count


def seed_logs(db, days: int = 42) -> None:
    """Daily weigh-ins trending down plus a few meals a day."""
    today = date.today()
    weight = 200.0
    for i in range(days, -1, -1):
        day = today - timedelta(days=i)
        weight -= random.uniform(0.0, 0.3)
        db.add(WeightLog(user_id=DEMO_USER, date=day, weight_lbs=round(weight, 1), time_of_day="morning"))
        for meal_type, calories, protein in (("breakfast", 600, 40), ("lunch", 800, 55), ("dinner", 900, 70)):
            db.add(
                MealLog(
                    user_id=DEMO_USER,
                    date=day,
                    meal_type=meal_type,
                    name=meal_type.title(),
                    calories=calories + random.randint(-100, 150),
                    protein=protein + random.randint(-10, 10),
                    carbs=random.randint(60, 110),
                    fats=random.randint(15, 35),
                )
            )

    db.add(Profile(id=DEMO_USER, full_name="Demo User", weight_goal=185))
    db.add(
        ScheduleEvent(
            user_id=DEMO_USER,
            title="Lift",
            start_time=time(7, 0),
            end_time=time(8, 15),
            is_recurring=True,
            recurrence_days=[1, 3, 5],
        )
    )
    db.commit()


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_demo_user(db)
        workouts = seed_training(db)
        seed_logs(db)
    finally:
        db.close()

    print(f"Seeded {workouts} demo workouts for {DEMO_USER}")


if __name__ == "__main__":
    main()
