from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from fittrack.services.schedule import (
    LayoutConfig,
    calculate_event_position,
    detect_overlapping_events,
    format_date_header,
    get_events_for_date,
    is_today,
    should_event_recur,
)


def make_event(start="09:00:00", end="10:00:00", date=None, is_recurring=False, days=None, title="Event"):
    return SimpleNamespace(
        title=title,
        start_time=start,
        end_time=end,
        date=date,
        is_recurring=is_recurring,
        recurrence_days=days,
    )


# --------- Recurrence --------- #

def test_one_time_event_matches_only_its_day():
    event = make_event(date="2024-03-15")
    assert should_event_recur(event, date(2024, 3, 15))
    assert not should_event_recur(event, date(2024, 3, 14))
    assert not should_event_recur(event, date(2024, 3, 16))


def test_one_time_event_ignores_utc_offset_of_target():
    event = make_event(date="2024-03-15")
    # Late evening on the 15th, ten hours behind UTC (already the 16th in UTC)
    late_evening = datetime(2024, 3, 15, 23, 0, tzinfo=timezone(timedelta(hours=-10)))
    assert should_event_recur(event, late_evening)
    # Early morning on the 15th, well ahead of UTC (still the 14th in UTC)
    early_morning = datetime(2024, 3, 15, 1, 0, tzinfo=timezone(timedelta(hours=12)))
    assert should_event_recur(event, early_morning)


def test_one_time_event_accepts_date_objects_and_strings():
    event = make_event(date=date(2024, 3, 15))
    assert should_event_recur(event, "2024-03-15")
    assert not should_event_recur(event, "2024-03-16")


def test_one_time_event_without_date_never_occurs():
    assert not should_event_recur(make_event(date=None), date(2024, 3, 15))


def test_daily_recurrence_matches_every_day():
    for days in (None, []):
        event = make_event(is_recurring=True, days=days)
        start = date(2024, 3, 1)
        assert all(should_event_recur(event, start + timedelta(days=i)) for i in range(14))


def test_weekday_recurrence_matches_mon_wed_fri():
    event = make_event(is_recurring=True, days=[1, 3, 5])
    sunday = date(2024, 3, 10)
    hits = [
        (sunday + timedelta(days=i)).strftime("%a")
        for i in range(7)
        if should_event_recur(event, sunday + timedelta(days=i))
    ]
    assert hits == ["Mon", "Wed", "Fri"]


def test_recurring_event_ignores_its_date():
    event = make_event(date="2024-03-15", is_recurring=True, days=[0])
    assert not should_event_recur(event, date(2024, 3, 15))
    assert should_event_recur(event, date(2024, 3, 17))


def test_get_events_for_date_filters_and_keeps_order():
    a = make_event(title="a", date="2024-03-15")
    b = make_event(title="b", date="2024-03-16")
    c = make_event(title="c", is_recurring=True)
    d = make_event(title="d", is_recurring=True, days=[6])
    result = get_events_for_date([c, b, a, d], date(2024, 3, 15))
    assert [e.title for e in result] == ["c", "a"]


# --------- Positions --------- #

def test_position_counts_hours_from_five_am():
    top, height = calculate_event_position(make_event("09:00:00", "10:00:00"))
    assert top == 320
    assert height == 80


def test_position_wraps_early_morning_to_the_bottom():
    top, height = calculate_event_position(make_event("02:30", "03:00"))
    assert top == 21 * 80 + 40
    assert height == 40


def test_position_handles_events_crossing_midnight():
    top, height = calculate_event_position(make_event("23:00", "01:00"))
    assert top == 18 * 80
    assert height == 160


def test_position_enforces_minimum_height():
    _, height = calculate_event_position(make_event("09:00", "09:05"))
    assert height == 20


def test_position_uses_layout_config():
    config = LayoutConfig(hour_height=60, day_start_hour=6, min_event_minutes=30)
    top, height = calculate_event_position(make_event("07:30", "07:40"), config)
    assert top == 90
    assert height == 30


# --------- Overlaps --------- #

def test_no_events_no_positions():
    assert detect_overlapping_events([]) == []


def test_single_event_keeps_default_column():
    (pos,) = detect_overlapping_events([make_event()])
    assert (pos.column, pos.total_columns) == (0, 1)


def test_overlapping_events_share_the_width():
    a = make_event("09:00", "10:00", title="a")
    b = make_event("09:30", "10:30", title="b")
    c = make_event("11:00", "12:00", title="c")
    positions = detect_overlapping_events([c, b, a])
    assert [p.event.title for p in positions] == ["a", "b", "c"]
    assert [(p.column, p.total_columns) for p in positions] == [(0, 2), (1, 2), (0, 1)]


def test_back_to_back_events_are_not_grouped():
    a = make_event("09:00", "10:00")
    b = make_event("10:00", "11:00")
    positions = detect_overlapping_events([a, b])
    assert all(p.total_columns == 1 for p in positions)
    assert all(p.column == 0 for p in positions)


def test_later_runs_repartition_chained_events():
    # a overlaps b, b overlaps c, a and c do not touch
    a = make_event("09:00", "10:00", title="a")
    b = make_event("09:30", "11:00", title="b")
    c = make_event("10:30", "11:30", title="c")
    positions = {p.event.title: p for p in detect_overlapping_events([a, b, c])}
    assert (positions["a"].column, positions["a"].total_columns) == (0, 2)
    assert (positions["b"].column, positions["b"].total_columns) == (0, 2)
    assert (positions["c"].column, positions["c"].total_columns) == (1, 2)


def test_date_header_and_today():
    assert format_date_header(date(2024, 3, 15)) == "Friday, March 15, 2024"
    assert is_today("2024-03-15", date(2024, 3, 15))
    assert not is_today(date(2024, 3, 14), date(2024, 3, 15))
