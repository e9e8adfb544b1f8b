from datetime import date, datetime

from conftest import TODAY, USER

from fittrack.models.profile import Profile
from fittrack.models.weight_log import WeightLog
from fittrack.models.workout import (
    Exercise,
    ExerciseInstance,
    ProgramInstance,
    ProgramTemplate,
    SetInstance,
    WorkoutInstance,
)


def add_workout(db, completed_at=None, scheduled=None, name="Push Day", sets=(), exercise=None,
                user_id=USER, program_instance_id=None):
    """Workout with one exercise instance and the given (weight, reps, warmup) sets."""
    workout = WorkoutInstance(
        user_id=user_id,
        name=name,
        day_number=1,
        status="completed" if completed_at else "scheduled",
        scheduled_date=scheduled or (completed_at.date() if completed_at else TODAY),
        started_at=completed_at.replace(hour=completed_at.hour - 1) if completed_at else None,
        completed_at=completed_at,
        program_instance_id=program_instance_id,
    )
    db.add(workout)
    db.flush()
    if exercise is not None:
        instance = ExerciseInstance(
            user_id=user_id,
            workout_instance_id=workout.id,
            exercise_id=exercise.id,
            exercise_order=1,
            status="completed" if completed_at else "pending",
            performed_date=completed_at.date() if completed_at else None,
        )
        db.add(instance)
        db.flush()
        for number, (weight, reps, warmup) in enumerate(sets, start=1):
            db.add(
                SetInstance(
                    exercise_instance_id=instance.id,
                    set_number=number,
                    actual_weight_lbs=weight,
                    actual_reps=reps,
                    is_warmup=warmup,
                )
            )
    db.commit()
    return workout


def add_exercise(db, name="Bench Press"):
    exercise = Exercise(name=name, primary_muscle_group="chest", secondary_muscle_groups=["triceps"])
    db.add(exercise)
    db.commit()
    return exercise


def test_root(client):
    assert client.get("/").json() == {"message": "fittrack backend is running"}


# --------- Schedule --------- #

def test_requests_without_user_are_rejected(client):
    r = client.get("/schedule/events", headers={"X-User-Id": ""})
    assert r.status_code == 401
    assert r.json()["error_code"] == "UNAUTHORIZED"


def test_create_and_lay_out_a_day(client):
    r = client.post(
        "/schedule/events",
        json={"title": "Lift", "start_time": "09:00", "end_time": "10:00", "date": "2024-03-15"},
    )
    assert r.status_code == 200, r.text
    created = r.json()
    assert created["status"] == "pending"
    assert created["start_time"] == "09:00:00"

    client.post(
        "/schedule/events",
        json={
            "title": "Standup",
            "start_time": "9:30 AM",
            "end_time": "10:30 AM",
            "is_recurring": True,
            "recurrence_days": [5, 1, 1],
        },
    )
    client.post(
        "/schedule/events",
        json={"title": "Tomorrow", "start_time": "07:00", "end_time": "08:00", "date": "2024-03-16"},
    )

    events = client.get("/schedule/events", params={"date": "2024-03-15"}).json()
    assert [e["title"] for e in events] == ["Lift", "Standup"]
    assert events[1]["recurrence_days"] == [1, 5]

    day = client.get("/schedule/day", params={"date": "2024-03-15"}).json()
    assert day["header"] == "Friday, March 15, 2024"
    assert day["isToday"] is True
    layout = [(e["event"]["title"], e["top"], e["height"], e["column"], e["totalColumns"]) for e in day["events"]]
    assert layout == [("Lift", 320, 80, 0, 2), ("Standup", 360, 80, 1, 2)]

    saturday = client.get("/schedule/day", params={"date": "2024-03-16"}).json()
    assert saturday["isToday"] is False
    assert [e["event"]["title"] for e in saturday["events"]] == ["Tomorrow"]


def test_day_defaults_to_today(client):
    client.post(
        "/schedule/events",
        json={"title": "Lift", "start_time": "06:00", "end_time": "07:00", "date": "2024-03-15"},
    )
    day = client.get("/schedule/day").json()
    assert day["date"] == "2024-03-15"
    assert len(day["events"]) == 1


def test_event_validation(client):
    r = client.post("/schedule/events", json={"title": "x", "start_time": "09:00", "end_time": "10:00"})
    assert r.status_code == 422
    assert r.json()["error_code"] == "VALIDATION_ERROR_DATE"

    r = client.post(
        "/schedule/events",
        json={"title": "x", "start_time": "25:00", "end_time": "10:00", "date": "2024-03-15"},
    )
    assert r.status_code == 422
    assert r.json()["error_code"] == "VALIDATION_ERROR_START_TIME"

    r = client.post(
        "/schedule/events",
        json={"title": "x", "start_time": "09:00", "end_time": "10:00", "is_recurring": True, "recurrence_days": [7]},
    )
    assert r.status_code == 422

    r = client.get("/schedule/events", params={"date": "03/15/2024"})
    assert r.status_code == 422


def test_update_and_delete_event(client):
    event = client.post(
        "/schedule/events",
        json={"title": "Lift", "start_time": "09:00", "end_time": "10:00", "date": "2024-03-15"},
    ).json()

    r = client.patch(f"/schedule/events/{event['id']}", json={"status": "completed", "title": None, "end_time": "11:15"})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "completed"
    assert body["title"] == "Lift"
    assert body["end_time"] == "11:15:00"

    r = client.patch(f"/schedule/events/{event['id']}", json={"date": None})
    assert r.status_code == 422

    assert client.delete(f"/schedule/events/{event['id']}").status_code == 200
    r = client.delete(f"/schedule/events/{event['id']}")
    assert r.status_code == 404
    assert r.json()["error_code"] == "NOT_FOUND"


def test_events_are_private_to_their_user(client):
    event = client.post(
        "/schedule/events",
        json={"title": "Lift", "start_time": "09:00", "end_time": "10:00", "date": "2024-03-15"},
    ).json()

    other = {"X-User-Id": "user-2"}
    assert client.get("/schedule/events", params={"date": "2024-03-15"}, headers=other).json() == []
    assert client.delete(f"/schedule/events/{event['id']}", headers=other).status_code == 404


def test_categories(client):
    category = client.post("/schedule/categories", json={"name": "Gym", "color": "#22c55e"}).json()
    event = client.post(
        "/schedule/events",
        json={
            "title": "Lift",
            "start_time": "09:00",
            "end_time": "10:00",
            "date": "2024-03-15",
            "category_id": category["id"],
        },
    ).json()
    assert event["category_id"] == category["id"]
    assert [c["name"] for c in client.get("/schedule/categories").json()] == ["Gym"]

    r = client.post(
        "/schedule/events",
        json={"title": "x", "start_time": "09:00", "end_time": "10:00", "date": "2024-03-15", "category_id": 999},
    )
    assert r.status_code == 404

    assert client.delete(f"/schedule/categories/{category['id']}").status_code == 200
    events = client.get("/schedule/events", params={"date": "2024-03-15"}).json()
    assert events[0]["category_id"] is None


# --------- Strength --------- #

def test_prs_ignore_warmups(client, db):
    bench = add_exercise(db)
    add_workout(db, datetime(2024, 3, 1, 18), sets=[(300, 1, True), (100, 5, False)], exercise=bench)
    add_workout(db, datetime(2024, 3, 10, 18), sets=[(115, 5, False)], exercise=bench)

    body = client.get("/prs").json()
    (record,) = body["prs"]
    assert record["exercise"] == "Bench Press"
    assert record["records"]["maxWeight"] == {"value": 115, "date": "2024-03-10", "reps": 5}
    assert record["records"]["estimated1RM"]["value"] == 134
    assert {r["type"]: r["improvement"] for r in body["recentPRs"]} == {
        "estimated1RM": "+17 lbs",
        "maxWeight": "+15 lbs",
        "maxVolume": "+75 lbs total",
    }

    assert client.get("/prs", params={"exercise": "squat"}).json() == {"prs": [], "recentPRs": []}


def test_prs_only_for_the_requesting_user(client, db):
    bench = add_exercise(db)
    add_workout(db, datetime(2024, 3, 10, 18), sets=[(115, 5, False)], exercise=bench, user_id="user-2")
    assert client.get("/prs").json()["prs"] == []


def test_exercise_history(client, db):
    bench = add_exercise(db)
    add_workout(db, datetime(2024, 3, 1, 18), sets=[(100, 5, False)], exercise=bench)
    add_workout(db, datetime(2024, 3, 10, 18), sets=[(100, 5, False), (90, 10, False)], exercise=bench)

    body = client.get("/exercise/bench-press/history").json()
    assert body["exercise"] == {"id": bench.id, "name": "Bench Press", "muscleGroups": ["chest", "triceps"]}
    assert [h["date"] for h in body["history"]] == ["2024-03-10", "2024-03-01"]
    assert body["history"][0]["topSet"] == {"weight": 90, "reps": 10}
    assert body["prs"]["estimated1RM"]["value"] == 120
    assert body["trend"] == "stable"

    assert len(client.get("/exercise/bench-press/history", params={"limit": 1}).json()["history"]) == 1

    missing = client.get("/exercise/deadlift/history").json()
    assert missing["exercise"] is None
    assert missing["history"] == []


def test_workout_history(client, db):
    bench = add_exercise(db)
    add_workout(db, datetime(2024, 3, 14, 8), sets=[(135, 8, False), (155, 5, False)], exercise=bench)
    add_workout(db, datetime(2024, 3, 1, 8), sets=[(135, 8, False)], exercise=bench)

    body = client.get("/workout-history").json()
    assert body["summary"] == {"totalWorkouts": 1, "periodDays": 7}
    (workout,) = body["workouts"]
    assert workout["date"] == "2024-03-14"
    assert workout["duration"] == "1h 0m"
    assert workout["totalVolume"] == 1855
    assert workout["exercises"] == [{"name": "Bench Press", "sets": 2, "topSet": "135x8"}]


def test_stats_summary(client, db):
    bench = add_exercise(db)
    template = ProgramTemplate(name="PPL", total_days=12)
    db.add(template)
    db.flush()
    program = ProgramInstance(user_id=USER, program_id=template.id, status="active", current_cycle=1,
                              started_at=datetime(2024, 3, 1))
    db.add(program)
    db.commit()

    for day in (13, 14, 15):
        add_workout(db, datetime(2024, 3, day, 8), sets=[(100, 10, False)], exercise=bench,
                    program_instance_id=program.id)
    add_workout(db, scheduled=date(2024, 3, 12))

    body = client.get("/stats/summary").json()
    assert body["periodStart"] == "2024-03-08"
    assert body["workouts"] == {"completed": 3, "scheduled": 4, "consistency": 0.75}
    assert body["volume"] == {"total": 3000, "avgPerWorkout": 1000}
    assert body["streak"] == {"current": 3, "longest": 3}
    assert body["program"]["name"] == "PPL"
    assert body["program"]["currentDay"] == 4

    program_period = client.get("/stats/summary", params={"period": "program"}).json()
    assert program_period["periodStart"] == "2024-03-01"


def test_stats_summary_without_workouts(client):
    body = client.get("/stats/summary", params={"period": "month"}).json()
    assert body["workouts"] == {"completed": 0, "scheduled": 0, "consistency": 0}
    assert body["volume"] == {"total": 0, "avgPerWorkout": 0}
    assert body["program"] is None
    assert body["streak"] == {"current": 0, "longest": 0}


# --------- Body, nutrition, sleep --------- #

def test_weight_progress(client, db):
    db.add(Profile(id=USER, weight_goal=180))
    db.add(WeightLog(user_id=USER, date=date(2024, 1, 1), weight_lbs=200))
    db.commit()
    for day, weight in (("2024-02-23", 197), ("2024-03-01", 195), ("2024-03-08", 191)):
        r = client.post("/progress/weight", json={"date": day, "weight_lbs": weight})
        assert r.status_code == 200
    r = client.post("/progress/weight", json={"weight_lbs": 190})
    assert r.json()["date"] == "2024-03-15"

    body = client.get("/progress/weight").json()
    assert body["current"]["weight"] == 190
    assert len(body["history"]) == 4
    assert body["stats"]["change"] == -10.0
    assert body["stats"]["avgWeeklyChange"] == -0.9
    assert body["stats"]["trend"] == "decreasing"
    assert body["goal"]["estimatedDate"] == "2024-05-31"

    r = client.post("/progress/weight", json={"weight_lbs": 0})
    assert r.status_code == 422


def test_nutrition_today_end_to_end(client, db):
    db.add(Profile(id=USER, nutrition_targets={"calories": 2000}))
    db.commit()

    client.post("/nutrition/meals", json={"meal_type": "breakfast", "name": "Oats", "calories": 1500, "protein": 120})
    lunch = client.post(
        "/nutrition/meals", json={"meal_type": "lunch", "name": "Burrito", "calories": 800, "protein": 40}
    ).json()
    client.post(
        "/nutrition/meals",
        json={"meal_type": "dinner", "name": "Yesterday", "calories": 900, "date": "2024-03-14"},
    )

    body = client.get("/nutrition/today").json()
    assert [m["name"] for m in body["meals"]] == ["Breakfast", "Lunch"]
    assert body["totals"]["calories"] == 2300
    assert body["targets"]["calories"] == 2000
    assert body["targets"]["protein"] == 180
    assert body["remaining"]["calories"] == 0
    assert body["remaining"]["protein"] == 20
    assert body["percentComplete"]["calories"] == 1.15

    assert client.delete(f"/nutrition/meals/{lunch['id']}").status_code == 200
    assert client.get("/nutrition/today").json()["totals"]["calories"] == 1500
    assert client.delete(f"/nutrition/meals/{lunch['id']}").status_code == 404

    summary = client.get("/nutrition/summary").json()
    assert summary["period"]["daysTracked"] == 2

    r = client.post("/nutrition/meals", json={"meal_type": "snack", "name": "x", "calories": -5})
    assert r.json()["error_code"] == "VALIDATION_ERROR_CALORIES"


def test_water(client):
    client.post("/nutrition/water", json={"amount_oz": 16})
    client.post("/nutrition/water", json={"amount_oz": 8})
    assert client.get("/nutrition/water/today").json()["totalOz"] == 24
    assert client.post("/nutrition/water", json={"amount_oz": 0}).status_code == 422


def test_sleep(client):
    r = client.post(
        "/sleep",
        json={"bedtime": "2024-03-14T22:30:00", "wake_time": "2024-03-15T06:45:00", "quality_rating": 4},
    )
    assert r.status_code == 200, r.text
    assert r.json()["hours_slept"] == 8.25
    assert r.json()["date"] == "2024-03-14"

    r = client.post("/sleep", json={"bedtime": "2024-03-15T06:00:00", "wake_time": "2024-03-14T22:00:00"})
    assert r.json()["error_code"] == "VALIDATION_ERROR_WAKE_TIME"

    summary = client.get("/sleep/summary").json()
    assert summary["period"]["nightsTracked"] == 1
    assert summary["averageHours"] == 8.3
    assert summary["averageQuality"] == 4


def test_sleep_with_mixed_utc_offsets_is_rejected(client):
    r = client.post("/sleep", json={"bedtime": "2024-03-14T23:00:00+00:00", "wake_time": "2024-03-15T07:00:00"})
    assert r.status_code == 422
    assert r.json()["error_code"] == "VALIDATION_ERROR_WAKE_TIME"


def test_sleep_summary_ignores_future_nights(client):
    client.post("/sleep", json={"bedtime": "2024-04-01T22:00:00", "wake_time": "2024-04-02T06:00:00"})
    client.post("/sleep", json={"bedtime": "2024-03-13T23:00:00", "wake_time": "2024-03-14T06:00:00"})

    summary = client.get("/sleep/summary").json()
    assert summary["period"]["end"] == "2024-03-15"
    assert summary["period"]["nightsTracked"] == 1
    assert summary["averageHours"] == 7
