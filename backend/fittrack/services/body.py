"""Body weight progress and sleep summaries."""
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from fittrack.core.time_utils import clean_number, round_half_up
from fittrack.services.trends import body_weight_trend, half_split_trend, project_goal_date


def weight_stats(
    history: Sequence[dict],
    earliest: Optional[dict],
) -> Optional[dict]:
    """Change since the first ever log, weekly rate and recent trend.

    `history` is newest first ({"date": date, "weight": float}). Needs at
    least two entries in the window and an earliest log; otherwise None.
    """
    if earliest is None or len(history) < 2:
        return None

    current = history[0]
    start_weight = earliest["weight"]
    change = current["weight"] - start_weight
    change_percent = (change / start_weight) * 100 if start_weight else 0.0

    # Elapsed weeks, never less than one so a few days of logs don't explode the rate
    weeks = max(1.0, (current["date"] - earliest["date"]).days / 7)
    avg_weekly_change = change / weeks

    return {
        "startWeight": clean_number(start_weight),
        "startDate": earliest["date"].isoformat(),
        "change": round_half_up(change, 1),
        "changePercent": round_half_up(change_percent, 1),
        "trend": body_weight_trend([h["weight"] for h in history]).value,
        "avgWeeklyChange": round_half_up(avg_weekly_change, 1),
    }


def build_weight_progress(
    history: Sequence[dict],
    earliest: Optional[dict],
    weight_goal: Optional[float],
    today: date,
    unit: str = "lbs",
) -> dict:
    """Weight progress payload; every section degrades to null without data."""
    if not history:
        return {"current": None, "history": [], "stats": None, "goal": None}

    current = history[0]
    stats = weight_stats(history, earliest)

    goal = None
    if weight_goal and stats:
        target = float(weight_goal)
        remaining = current["weight"] - target
        estimated = project_goal_date(remaining, stats["avgWeeklyChange"], today)
        goal = {
            "target": clean_number(target),
            "remaining": round_half_up(remaining, 1),
            "estimatedDate": estimated.isoformat() if estimated else None,
        }

    return {
        "current": {
            "weight": clean_number(current["weight"]),
            "date": current["date"].isoformat(),
            "unit": unit,
        },
        "history": [
            {"date": h["date"].isoformat(), "weight": clean_number(h["weight"])}
            for h in history
        ],
        "stats": stats,
        "goal": goal,
    }


def hours_between(bedtime: datetime, wake_time: datetime) -> float:
    """Hours slept, two decimals. Wake before bed is a data error."""
    if (bedtime.tzinfo is None) != (wake_time.tzinfo is None):
        raise ValueError("bedtime and wake_time must both include a UTC offset or both omit it")
    seconds = (wake_time - bedtime).total_seconds()
    if seconds <= 0:
        raise ValueError("wake_time must be after bedtime")
    return round_half_up(seconds / 3600, 2)


def build_sleep_summary(logs: Iterable, start: date, end: date) -> dict:
    """Average hours/quality and hours trend over chronological sleep logs."""
    logs = list(logs)
    hours = [float(log.hours_slept) for log in logs]
    ratings = [log.quality_rating for log in logs if log.quality_rating is not None]

    return {
        "period": {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "nightsTracked": len(logs),
        },
        "averageHours": round_half_up(sum(hours) / len(hours), 1) if hours else None,
        "averageQuality": round_half_up(sum(ratings) / len(ratings), 1) if ratings else None,
        "trend": half_split_trend(hours).value,
        "nights": [
            {
                "date": log.date.isoformat(),
                "hoursSlept": clean_number(log.hours_slept),
                "quality": log.quality_rating,
            }
            for log in logs
        ],
    }
