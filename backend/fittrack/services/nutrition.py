"""Daily nutrition totals, period summaries and water intake."""
from datetime import date
from typing import Iterable, Mapping, Optional

from fittrack.core.constants import COMPLIANCE_FRACTION, MEAL_TYPE_NAMES
from fittrack.core.time_utils import clean_number, round_half_up, time_to_hhmm, to_local_datetime
from fittrack.services.trends import half_split_trend

MACROS = ("calories", "protein", "carbs", "fat")


def resolve_targets(profile_targets: Optional[Mapping], defaults: Mapping) -> dict:
    """Profile targets layered over defaults; missing or empty keys fall back."""
    targets = dict(defaults)
    for key, value in (profile_targets or {}).items():
        if value is not None:
            targets[key] = value
    return targets


def _meal_macros(meal) -> dict:
    return {
        "calories": float(meal.calories or 0),
        "protein": float(meal.protein or 0),
        "carbs": float(meal.carbs or 0),
        "fat": float(meal.fats or 0),
    }


def _share(total: float, target) -> float:
    if not target:
        return 0
    return round_half_up(total / float(target), 2)


def build_nutrition_today(
    meals: Iterable,
    targets: Mapping,
    today: date,
    tz_name: str | None = None,
) -> dict:
    """Meals logged today with totals, remaining (floored at 0) and progress."""
    totals = {key: 0.0 for key in MACROS}
    entries = []
    for meal in meals:
        macros = _meal_macros(meal)
        for key in MACROS:
            totals[key] += macros[key]

        logged = to_local_datetime(meal.logged_at, tz_name) if meal.logged_at else None
        entries.append(
            {
                "id": meal.id,
                "name": MEAL_TYPE_NAMES.get(meal.meal_type, meal.meal_type),
                "time": time_to_hhmm(logged.time()) if logged else None,
                **{key: clean_number(value) for key, value in macros.items()},
                "items": [{"name": meal.name, "calories": clean_number(macros["calories"])}],
            }
        )

    remaining = {
        key: clean_number(max(0.0, float(targets.get(key, 0)) - totals[key]))
        for key in MACROS
    }

    return {
        "date": today.isoformat(),
        "meals": entries,
        "totals": {key: clean_number(value) for key, value in totals.items()},
        "targets": dict(targets),
        "remaining": remaining,
        "percentComplete": {
            "calories": _share(totals["calories"], targets.get("calories")),
            "protein": _share(totals["protein"], targets.get("protein")),
        },
    }


def daily_breakdown(meals: Iterable) -> list[dict]:
    """Per-day macro sums in first-seen order (callers pass meals sorted by date)."""
    by_date: dict[date, dict] = {}
    for meal in meals:
        day = by_date.setdefault(meal.date, {key: 0.0 for key in MACROS})
        for key, value in _meal_macros(meal).items():
            day[key] += value
    return [
        {"date": day.isoformat(), **{k: clean_number(v) for k, v in sums.items()}}
        for day, sums in by_date.items()
    ]


def build_nutrition_summary(
    breakdown: list[dict],
    targets: Mapping,
    start: date,
    end: date,
) -> dict:
    """Averages, compliance and half-split trends over a daily breakdown."""
    days_tracked = len(breakdown)

    averages = {}
    for key in MACROS:
        total = sum(d[key] for d in breakdown)
        averages[key] = round_half_up(total / days_tracked) if days_tracked else 0

    def compliance(key: str) -> float:
        if not days_tracked:
            return 0
        threshold = float(targets.get(key, 0)) * COMPLIANCE_FRACTION
        hits = sum(1 for d in breakdown if d[key] >= threshold)
        return round_half_up(hits / days_tracked, 2)

    return {
        "period": {
            "start": start.isoformat(),
            "end": end.isoformat(),
            "daysTracked": days_tracked,
        },
        "averages": averages,
        "targets": {"calories": targets.get("calories"), "protein": targets.get("protein")},
        "compliance": {
            "calories": compliance("calories"),
            "protein": compliance("protein"),
        },
        "trend": {
            "calories": half_split_trend([d["calories"] for d in breakdown]).value,
            "protein": half_split_trend([d["protein"] for d in breakdown]).value,
        },
        "dailyBreakdown": breakdown,
    }


def build_water_today(logs: Iterable, today: date) -> dict:
    entries = [
        {"id": log.id, "amountOz": clean_number(log.amount_oz)}
        for log in logs
    ]
    total = sum(float(log["amountOz"]) for log in entries)
    return {
        "date": today.isoformat(),
        "totalOz": clean_number(total),
        "entries": entries,
    }
