"""Stats summary: period windows, consistency and active program progress."""
from datetime import date, timedelta
from typing import Optional

from fittrack.core.time_utils import clean_number, round_half_up
from fittrack.services.trends import Streak

PERIODS = ("week", "month", "program", "all")

# Earliest date the "all" period reaches back to
ALL_TIME_START = date(2020, 1, 1)


def period_window(period: str, today: date, program_started: Optional[date] = None) -> tuple[date, date]:
    """(start, end) dates for a summary period; unknown periods mean "week"."""
    if period == "month":
        start = today - timedelta(days=30)
    elif period == "program":
        # A year back until we know when the active program started
        start = program_started or today - timedelta(days=365)
    elif period == "all":
        start = ALL_TIME_START
    else:
        start = today - timedelta(days=7)
    return start, today


def program_progress(name: str, status: str, cycle: int, completed: int, total_days: int) -> dict:
    """The next day to train is one past the completed count."""
    current_day = completed + 1
    total_days = total_days or 1
    return {
        "name": name or "Unknown",
        "status": status,
        "cycle": cycle,
        "currentDay": current_day,
        "totalDays": total_days,
        "percentComplete": round_half_up(current_day / total_days, 2),
    }


def build_stats_summary(
    period: str,
    start: date,
    end: date,
    completed: int,
    scheduled: int,
    total_volume: float,
    streak: Streak,
    program: Optional[dict] = None,
) -> dict:
    return {
        "period": period,
        "periodStart": start.isoformat(),
        "periodEnd": end.isoformat(),
        "workouts": {
            "completed": completed,
            "scheduled": scheduled,
            "consistency": round_half_up(completed / scheduled, 2) if scheduled else 0,
        },
        "volume": {
            "total": clean_number(total_volume),
            "avgPerWorkout": round_half_up(total_volume / completed) if completed else 0,
        },
        "program": program,
        "streak": {
            "current": streak.current,
            "longest": streak.longest,
        },
    }
