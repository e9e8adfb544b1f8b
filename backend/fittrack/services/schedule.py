"""
Schedule occurrence resolution and day-grid layout.

Events are anything with `start_time`, `end_time`, `date`, `is_recurring` and
`recurrence_days` attributes: ORM rows or plain objects alike. Nothing here
touches the database or mutates an event.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable

from fittrack.core.constants import DAY_START_HOUR, HOUR_HEIGHT, MIN_EVENT_MINUTES
from fittrack.core.time_utils import parse_local_date, parse_time_of_day, sunday_weekday


@dataclass(frozen=True)
class LayoutConfig:
    hour_height: float = HOUR_HEIGHT
    day_start_hour: int = DAY_START_HOUR
    min_event_minutes: int = MIN_EVENT_MINUTES

    @property
    def min_height(self) -> float:
        return (self.min_event_minutes / 60) * self.hour_height


@dataclass
class EventPosition:
    event: Any
    top: float
    height: float
    column: int = 0
    total_columns: int = 1


def should_event_recur(event, target_date) -> bool:
    """Does `event` have an occurrence on `target_date`?"""
    target = parse_local_date(target_date)

    if not event.is_recurring:
        if not event.date:
            return False
        return parse_local_date(event.date) == target

    # Recurs every day
    if not event.recurrence_days:
        return True

    return sunday_weekday(target) in event.recurrence_days


def get_events_for_date(all_events: Iterable, target_date) -> list:
    """Occurrences on `target_date`, in input order."""
    target = parse_local_date(target_date)
    return [event for event in all_events if should_event_recur(event, target)]


def calculate_event_position(event, config: LayoutConfig | None = None) -> tuple[float, float]:
    """Map an event's time-of-day span to (top, height) pixels on the day grid.

    Hours are counted from `day_start_hour`, so a 01:00 event lands below a
    23:00 one. Spans that cross midnight get 24h added to their duration.
    """
    config = config or LayoutConfig()
    start = parse_time_of_day(event.start_time)
    end = parse_time_of_day(event.end_time)

    hours_from_start = start.hour - config.day_start_hour
    if hours_from_start < 0:
        hours_from_start += 24

    top = hours_from_start * config.hour_height + (start.minute / 60) * config.hour_height

    duration = (end.hour - start.hour) + (end.minute - start.minute) / 60
    if duration < 0:
        duration += 24

    height = duration * config.hour_height
    return top, max(height, config.min_height)


def detect_overlapping_events(events: Iterable, config: LayoutConfig | None = None) -> list[EventPosition]:
    """Lay out a day's events, splitting overlapping ones into columns.

    Positions are sorted by `top`. For each position in turn, the following
    positions that start before it ends form a run (stopping at the first one
    that does not), and a run of two or more is spread across that many
    columns. Every position gets its turn, so a later run re-partitions events
    already placed by an earlier one.
    """
    positions = []
    for event in events:
        top, height = calculate_event_position(event, config)
        positions.append(EventPosition(event=event, top=top, height=height))

    positions.sort(key=lambda p: p.top)

    for i, current in enumerate(positions):
        overlapping = [current]
        for nxt in positions[i + 1:]:
            if nxt.top < current.top + current.height:
                overlapping.append(nxt)
            else:
                break

        if len(overlapping) > 1:
            for index, pos in enumerate(overlapping):
                pos.column = index
                pos.total_columns = len(overlapping)

    return positions


def format_date_header(d) -> str:
    """'Friday, March 15, 2024'"""
    d = parse_local_date(d)
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"


def is_today(d, today: date) -> bool:
    return parse_local_date(d) == today
