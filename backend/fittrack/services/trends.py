"""
Time-series helpers: two-window trend classification, workout streaks and
goal-date projection. All inputs are plain sequences; insufficient data always
resolves to a default ("stable", 0, None) instead of raising.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Sequence

from fittrack.core.constants import (
    HALF_SPLIT_TOLERANCE,
    SESSION_TOLERANCE,
    SESSION_WINDOW,
    STREAK_MAX_GAP_DAYS,
    WEIGHT_TOLERANCE,
    WEIGHT_WINDOW,
)
from fittrack.core.time_utils import local_day


class Trend(str, Enum):
    increasing = "increasing"
    decreasing = "decreasing"
    stable = "stable"


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def compare_windows(older: Sequence[float], newer: Sequence[float], tolerance: float) -> Trend:
    """Classify the newer window's mean against the older one's +/- tolerance."""
    if not older or not newer:
        return Trend.stable
    older_avg = _mean(older)
    newer_avg = _mean(newer)
    if newer_avg > older_avg * (1 + tolerance):
        return Trend.increasing
    if newer_avg < older_avg * (1 - tolerance):
        return Trend.decreasing
    return Trend.stable


def half_split_trend(values: Sequence[float], tolerance: float = HALF_SPLIT_TOLERANCE) -> Trend:
    """Chronological values: first floor(n/2) vs the rest. Needs 4+ points."""
    if len(values) < 4:
        return Trend.stable
    half = len(values) // 2
    return compare_windows(values[:half], values[half:], tolerance)


def recent_window_trend(newest_first: Sequence[float], window: int, tolerance: float) -> Trend:
    """Most recent `window` values vs the `window` before them. Needs 2*window points."""
    if len(newest_first) < 2 * window:
        return Trend.stable
    recent = newest_first[:window]
    previous = newest_first[window:2 * window]
    return compare_windows(previous, recent, tolerance)


def session_1rm_trend(newest_first: Sequence[float]) -> Trend:
    return recent_window_trend(newest_first, SESSION_WINDOW, SESSION_TOLERANCE)


def body_weight_trend(newest_first: Sequence[float]) -> Trend:
    return recent_window_trend(newest_first, WEIGHT_WINDOW, WEIGHT_TOLERANCE)


@dataclass
class Streak:
    current: int = 0
    longest: int = 0


def compute_streak(completed: Iterable, today: date, tz_name: str | None = None) -> Streak:
    """Workout streak over completion timestamps (any order).

    Timestamps collapse to calendar days. Consecutive days at most
    STREAK_MAX_GAP_DAYS apart continue a streak. The current streak only
    counts when the newest day is today or yesterday, and ends at the first
    break.
    """
    days = sorted({local_day(ts, tz_name) for ts in completed if ts is not None}, reverse=True)
    if not days:
        return Streak()

    current_open = (today - days[0]).days <= 1
    current = 1 if current_open else 0
    longest = 0
    run = 1

    for previous, day in zip(days, days[1:]):
        if (previous - day).days <= STREAK_MAX_GAP_DAYS:
            run += 1
            if current_open:
                current = run
        else:
            longest = max(longest, run)
            run = 1
            current_open = False

    return Streak(current=current, longest=max(longest, run))


def project_goal_date(remaining: float, avg_weekly_change: float, today: date) -> date | None:
    """Date the goal is reached at the current weekly rate.

    `remaining` is current - target, so progress means the rate has the
    opposite sign. Flat or wrong-way trends give None.
    """
    # A goal already reached has nothing left to project
    if not avg_weekly_change or not remaining:
        return None
    if (remaining > 0) == (avg_weekly_change > 0):
        return None
    weeks_to_goal = abs(remaining / avg_weekly_change)
    return today + timedelta(days=int(weeks_to_goal * 7))
