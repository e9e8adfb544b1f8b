"""
Strength statistics: estimated 1RM, personal records, exercise history and
workout summaries.

Callers hand in `ExerciseSession`s built from completed exercise instances.
Only working sets count: warmups and sets without a weight are dropped by
`working_sets()` before anything is computed.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from fittrack.core.constants import EPLEY_DIVISOR, RECENT_PR_DAYS
from fittrack.core.time_utils import (
    clean_number as _num,
    format_elapsed,
    format_number,
    local_day,
    round_half_up,
)
from fittrack.services.trends import Trend, session_1rm_trend

logger = logging.getLogger(__name__)

PR_TYPES = ("estimated1RM", "maxWeight", "maxReps", "maxVolume")

# Query-string aliases accepted by the PR endpoint's `type` filter
PR_TYPE_FILTERS = {
    "1rm": "estimated1RM",
    "weight": "maxWeight",
    "reps": "maxReps",
    "volume": "maxVolume",
}


@dataclass(frozen=True)
class StatsConfig:
    weight_unit: str = "lbs"
    recent_pr_days: int = RECENT_PR_DAYS
    max_prs: int = 20
    max_recent_prs: int = 10


@dataclass
class WorkingSet:
    weight: float
    reps: int
    set_number: int = 0

    @property
    def volume(self) -> float:
        return self.weight * self.reps


@dataclass
class ExerciseSession:
    """One completed exercise instance and its working sets, in logged order."""

    exercise_id: int
    exercise_name: str
    date: Optional[date]
    sets: list[WorkingSet] = field(default_factory=list)
    workout_name: str = "Workout"

    @property
    def volume(self) -> float:
        return session_volume(self.sets)


@dataclass
class PRRecord:
    value: float
    date: Optional[date]
    based_on: Optional[str] = None
    reps: Optional[int] = None
    weight: Optional[float] = None

    def to_dict(self) -> dict:
        data = {"value": _num(self.value), "date": _iso(self.date)}
        if self.based_on is not None:
            data["basedOn"] = self.based_on
        if self.weight is not None:
            data["weight"] = _num(self.weight)
        if self.reps is not None:
            data["reps"] = self.reps
        return data


@dataclass
class RecentPR:
    exercise: str
    type: str
    value: float
    date: Optional[date]
    improvement: str

    def to_dict(self) -> dict:
        return {
            "exercise": self.exercise,
            "type": self.type,
            "value": _num(self.value),
            "date": _iso(self.date),
            "improvement": self.improvement,
        }


def _iso(d) -> str:
    return d.isoformat() if d else ""


def calculate_1rm(weight: float, reps: int):
    """Epley estimate: weight * (1 + reps/30), rounded to a whole number.

    A single rep is already a 1RM. `reps` is assumed to be >= 1.
    """
    if reps == 1:
        return weight
    return round_half_up(weight * (1 + reps / EPLEY_DIVISOR))


def working_sets(rows: Iterable) -> list[WorkingSet]:
    """Non-warmup sets with a logged weight, as WorkingSet in the given order.

    Accepts SetInstance rows (actual_weight_lbs / actual_reps / is_warmup).
    """
    result = []
    for row in rows:
        if row.is_warmup or row.actual_weight_lbs is None:
            continue
        result.append(
            WorkingSet(
                weight=float(row.actual_weight_lbs),
                reps=int(row.actual_reps or 0),
                set_number=row.set_number or 0,
            )
        )
    return result


def session_volume(sets: Iterable[WorkingSet]) -> float:
    return sum(s.weight * s.reps for s in sets)


def top_set(sets: list[WorkingSet]) -> Optional[WorkingSet]:
    """Highest weight x reps; the first set wins when nothing beats zero."""
    if not sets:
        return None
    best = sets[0]
    best_volume = 0.0
    for s in sets:
        if s.volume > best_volume:
            best_volume = s.volume
            best = s
    return best


class PRTracker:
    """Running personal records for one exercise.

    Each metric is replaced only on a strict improvement. Rep records also
    require the weight to be at least the record's weight, so more reps with
    a lighter load never count. Replacing a non-zero record dated within the
    trailing window of `today` emits a RecentPR.
    """

    def __init__(
        self,
        exercise_id: int,
        exercise_name: str,
        today: date,
        config: StatsConfig | None = None,
    ):
        self.exercise_id = exercise_id
        self.exercise_name = exercise_name
        self.config = config or StatsConfig()
        self.recent_cutoff = today - timedelta(days=self.config.recent_pr_days)
        self.records: dict[str, Optional[PRRecord]] = {kind: None for kind in PR_TYPES}
        self.recent: list[RecentPR] = []

    def _replace(self, kind: str, record: PRRecord, old_value, unit_suffix: str) -> None:
        self.records[kind] = record
        if not old_value:
            return
        if record.date is None or record.date < self.recent_cutoff:
            return
        delta = record.value - old_value
        self.recent.append(
            RecentPR(
                exercise=self.exercise_name,
                type=kind,
                value=record.value,
                date=record.date,
                improvement=f"+{format_number(delta)} {unit_suffix}",
            )
        )

    def add_set(self, working_set: WorkingSet, when: Optional[date]) -> None:
        unit = self.config.weight_unit
        weight, reps = working_set.weight, working_set.reps
        estimate = calculate_1rm(weight, reps)

        best = self.records["estimated1RM"]
        if best is None or estimate > best.value:
            self._replace(
                "estimated1RM",
                PRRecord(value=estimate, date=when, based_on=f"{format_number(weight)}x{reps}"),
                best.value if best else None,
                unit,
            )

        heaviest = self.records["maxWeight"]
        if heaviest is None or weight > heaviest.value:
            self._replace(
                "maxWeight",
                PRRecord(value=weight, date=when, reps=reps),
                heaviest.value if heaviest else None,
                unit,
            )

        most_reps = self.records["maxReps"]
        if most_reps is None or (
            reps > (most_reps.reps or 0) and weight >= (most_reps.weight or 0)
        ):
            self._replace(
                "maxReps",
                PRRecord(value=reps, date=when, weight=weight, reps=reps),
                most_reps.reps if most_reps else None,
                "reps",
            )

    def add_session(self, session: ExerciseSession) -> None:
        for working_set in session.sets:
            self.add_set(working_set, session.date)

        volume = session.volume
        biggest = self.records["maxVolume"]
        if biggest is None or volume > biggest.value:
            self._replace(
                "maxVolume",
                PRRecord(value=volume, date=session.date),
                biggest.value if biggest else None,
                f"{self.config.weight_unit} total",
            )

    def to_dict(self) -> dict:
        return {
            "exercise": self.exercise_name,
            "exerciseId": self.exercise_id,
            "records": {
                kind: (record.to_dict() if record else None)
                for kind, record in self.records.items()
            },
        }


def detect_prs(
    sessions: Iterable[ExerciseSession],
    today: date,
    config: StatsConfig | None = None,
) -> list[PRTracker]:
    """Feed sessions (any order; sets in logged order) into per-exercise trackers.

    Sessions without working sets are skipped.
    """
    trackers: dict[int, PRTracker] = {}
    for session in sessions:
        if not session.sets:
            logger.debug(
                "Skipping %s session on %s: no working sets", session.exercise_name, session.date
            )
            continue
        tracker = trackers.get(session.exercise_id)
        if tracker is None:
            tracker = PRTracker(session.exercise_id, session.exercise_name, today, config)
            trackers[session.exercise_id] = tracker
        tracker.add_session(session)
    return list(trackers.values())


def matches_exercise_filter(name: str, exercise_filter: Optional[str]) -> bool:
    """Case-insensitive substring match; '-' in the filter stands for a space."""
    if not exercise_filter:
        return True
    needle = exercise_filter.lower().replace("-", " ")
    return needle in name.lower()


def build_pr_report(
    sessions: Iterable[ExerciseSession],
    today: date,
    config: StatsConfig | None = None,
    exercise_filter: Optional[str] = None,
    type_filter: Optional[str] = None,
) -> dict:
    """PR endpoint payload: {"prs": [...], "recentPRs": [...]}.

    PRs are ordered by estimated 1RM (highest first), recent PRs newest first,
    both capped by `config`.
    """
    config = config or StatsConfig()
    selected = (
        s for s in sessions if matches_exercise_filter(s.exercise_name, exercise_filter)
    )
    trackers = detect_prs(selected, today, config)

    kind = PR_TYPE_FILTERS.get(type_filter or "")
    if kind is not None:
        trackers = [t for t in trackers if t.records[kind] is not None]

    def best_1rm(tracker: PRTracker) -> float:
        record = tracker.records["estimated1RM"]
        return record.value if record else 0

    trackers.sort(key=best_1rm, reverse=True)

    recent = [entry for tracker in trackers for entry in tracker.recent]
    recent.sort(key=lambda r: r.date or date.min, reverse=True)

    return {
        "prs": [t.to_dict() for t in trackers[: config.max_prs]],
        "recentPRs": [r.to_dict() for r in recent[: config.max_recent_prs]],
    }


def build_exercise_history(sessions: Iterable[ExerciseSession]) -> dict:
    """History, session-level PRs and 1RM trend for one exercise.

    `sessions` must be newest first; the trend compares the three most recent
    sessions' best 1RM with the three before them.
    """
    history = []
    max_weight: Optional[PRRecord] = None
    max_reps: Optional[PRRecord] = None
    max_volume: Optional[PRRecord] = None
    max_1rm: Optional[PRRecord] = None
    estimates: list[float] = []

    for session in sessions:
        if not session.sets:
            logger.debug(
                "Skipping %s session on %s: no working sets", session.exercise_name, session.date
            )
            continue

        best_set = top_set(session.sets)
        session_max_1rm = 0
        for s in session.sets:
            session_max_1rm = max(session_max_1rm, calculate_1rm(s.weight, s.reps))

            if max_weight is None or s.weight > max_weight.value:
                max_weight = PRRecord(value=s.weight, date=session.date, reps=s.reps)
            if max_reps is None or (
                s.reps > (max_reps.reps or 0) and s.weight >= (max_reps.weight or 0)
            ):
                max_reps = PRRecord(value=s.reps, date=session.date, weight=s.weight, reps=s.reps)

        estimates.append(session_max_1rm)

        volume = session.volume
        if max_volume is None or volume > max_volume.value:
            max_volume = PRRecord(value=volume, date=session.date)
        if max_1rm is None or session_max_1rm > max_1rm.value:
            max_1rm = PRRecord(
                value=session_max_1rm,
                date=session.date,
                based_on=f"{format_number(best_set.weight)}x{best_set.reps}",
            )

        history.append(
            {
                "date": _iso(session.date),
                "workoutName": session.workout_name,
                "sets": [
                    {
                        "setNumber": s.set_number,
                        "weight": _num(s.weight),
                        "reps": s.reps,
                        "rpe": None,
                    }
                    for s in session.sets
                ],
                "topSet": {"weight": _num(best_set.weight), "reps": best_set.reps},
                "totalVolume": _num(volume),
            }
        )

    return {
        "history": history,
        "prs": {
            "estimated1RM": max_1rm.to_dict() if max_1rm else None,
            "maxWeight": max_weight.to_dict() if max_weight else None,
            "maxReps": max_reps.to_dict() if max_reps else None,
            "maxVolume": max_volume.to_dict() if max_volume else None,
        },
        "trend": session_1rm_trend(estimates).value,
    }


def empty_exercise_history() -> dict:
    return {
        "exercise": None,
        "history": [],
        "prs": {kind: None for kind in PR_TYPES},
        "trend": Trend.stable.value,
    }


def summarize_workout(workout, exercises: list[tuple[str, list[WorkingSet]]], tz_name: str | None = None) -> dict:
    """Workout history card: per-exercise top set plus totals.

    `exercises` is (name, working sets) in exercise order; exercises with no
    working sets are left out.
    """
    summaries = []
    total_sets = 0
    total_volume = 0.0
    for name, sets in exercises:
        if not sets:
            continue
        best = top_set(sets)
        total_volume += session_volume(sets)
        total_sets += len(sets)
        summaries.append(
            {
                "name": name,
                "sets": len(sets),
                "topSet": f"{format_number(best.weight)}x{best.reps}",
            }
        )

    if workout.completed_at is not None:
        day = local_day(workout.completed_at, tz_name)
    else:
        day = workout.scheduled_date

    return {
        "id": workout.id,
        "date": _iso(day),
        "name": workout.name or "Workout",
        "dayNumber": workout.day_number,
        "status": workout.status,
        "duration": format_elapsed(workout.started_at, workout.completed_at),
        "exerciseCount": len(summaries),
        "totalSets": total_sets,
        "totalVolume": _num(total_volume),
        "exercises": summaries,
    }
