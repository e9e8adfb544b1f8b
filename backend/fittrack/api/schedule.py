import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from fittrack.api.deps import (
    get_current_user_id,
    get_layout_config,
    get_today,
    parse_date_param,
)
from fittrack.core.exceptions import NotFoundError, ValidationError
from fittrack.core.time_utils import parse_time_of_day
from fittrack.db import get_db
from fittrack.models.schedule_event import EventCategory, ScheduleEvent
from fittrack.schemas.schedule import (
    DayScheduleRead,
    EventCategoryCreate,
    EventCategoryRead,
    EventPositionRead,
    ScheduleEventCreate,
    ScheduleEventRead,
    ScheduleEventUpdate,
)
from fittrack.services.schedule import (
    LayoutConfig,
    detect_overlapping_events,
    format_date_header,
    get_events_for_date,
    is_today,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["schedule"])


def _parse_time(value, field: str):
    try:
        parsed = parse_time_of_day(value)
    except ValueError as e:
        raise ValidationError(str(e), field=field)
    if parsed is None:
        raise ValidationError(f"{field} is required", field=field)
    return parsed


def _require_category(db: Session, user_id: str, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    exists = (
        db.query(EventCategory.id)
        .filter(EventCategory.id == category_id, EventCategory.user_id == user_id)
        .first()
    )
    if not exists:
        raise NotFoundError("Category", category_id)


def _get_event(db: Session, user_id: str, event_id: int) -> ScheduleEvent:
    event = (
        db.query(ScheduleEvent)
        .filter(ScheduleEvent.id == event_id, ScheduleEvent.user_id == user_id)
        .first()
    )
    if not event:
        raise NotFoundError("Event", event_id)
    return event


def _events_on(db: Session, user_id: str, target: date) -> list[ScheduleEvent]:
    """Candidates from the database (recurring or dated today), then the exact filter."""
    candidates = (
        db.query(ScheduleEvent)
        .filter(ScheduleEvent.user_id == user_id)
        .filter(or_(ScheduleEvent.is_recurring.is_(True), ScheduleEvent.date == target))
        .order_by(ScheduleEvent.start_time)
        .all()
    )
    return get_events_for_date(candidates, target)


# --------- Categories --------- #

@router.get("/categories", response_model=list[EventCategoryRead])
def list_categories(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return (
        db.query(EventCategory)
        .filter(EventCategory.user_id == user_id)
        .order_by(EventCategory.name)
        .all()
    )


@router.post("/categories", response_model=EventCategoryRead)
def create_category(
    payload: EventCategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not payload.name.strip():
        raise ValidationError("name must not be empty", field="name")
    category = EventCategory(
        user_id=user_id,
        name=payload.name.strip(),
        color=payload.color,
        icon=payload.icon,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    category = (
        db.query(EventCategory)
        .filter(EventCategory.id == category_id, EventCategory.user_id == user_id)
        .first()
    )
    if not category:
        raise NotFoundError("Category", category_id)

    # Events keep existing, just uncategorized
    db.query(ScheduleEvent).filter(ScheduleEvent.category_id == category_id).update(
        {ScheduleEvent.category_id: None}
    )
    db.delete(category)
    db.commit()
    return {"message": "Category deleted"}


# --------- Events --------- #

@router.post("/events", response_model=ScheduleEventRead)
def create_event(
    payload: ScheduleEventCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not payload.is_recurring and payload.date is None:
        raise ValidationError("date is required for one-time events", field="date")
    _require_category(db, user_id, payload.category_id)

    event = ScheduleEvent(
        user_id=user_id,
        title=payload.title,
        category_id=payload.category_id,
        start_time=_parse_time(payload.start_time, "start_time"),
        end_time=_parse_time(payload.end_time, "end_time"),
        date=payload.date,
        is_recurring=payload.is_recurring,
        recurrence_days=payload.recurrence_days or [],
        status="pending",
        notes=payload.notes or None,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created schedule event %s for user %s", event.id, user_id)
    return event


@router.get("/events", response_model=list[ScheduleEventRead])
def list_events_for_date(
    day: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Occurrences on one calendar day, sorted by start time:
      GET /schedule/events?date=2025-01-06
    """
    target = parse_date_param(day, today)
    return _events_on(db, user_id, target)


@router.patch("/events/{event_id}", response_model=ScheduleEventRead)
def update_event(
    event_id: int,
    payload: ScheduleEventUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    event = _get_event(db, user_id, event_id)
    update_data = payload.model_dump(exclude_unset=True)

    # NOT NULL columns: an explicit null means "leave as is"
    for field in ("title", "is_recurring", "status"):
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    for field in ("start_time", "end_time"):
        if field in update_data:
            update_data[field] = _parse_time(update_data[field], field)

    if "status" in update_data and update_data["status"] is not None:
        update_data["status"] = update_data["status"].value

    if "category_id" in update_data:
        _require_category(db, user_id, update_data["category_id"])

    if "recurrence_days" in update_data and update_data["recurrence_days"] is None:
        update_data["recurrence_days"] = []

    is_recurring = update_data.get("is_recurring", event.is_recurring)
    new_date = update_data.get("date", event.date)
    if not is_recurring and new_date is None:
        raise ValidationError("date is required for one-time events", field="date")

    for key, value in update_data.items():
        setattr(event, key, value)

    db.commit()
    db.refresh(event)
    return event


@router.delete("/events/{event_id}")
def delete_event(
    event_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    event = _get_event(db, user_id, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted schedule event %s for user %s", event_id, user_id)
    return {"message": "Event deleted"}


@router.get("/day", response_model=DayScheduleRead)
def get_day_layout(
    day: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    config: LayoutConfig = Depends(get_layout_config),
    db: Session = Depends(get_db),
):
    """A day's events with grid positions and overlap columns."""
    target = parse_date_param(day, today)
    events = _events_on(db, user_id, target)
    positions = detect_overlapping_events(events, config)

    return DayScheduleRead(
        date=target,
        header=format_date_header(target),
        isToday=is_today(target, today),
        events=[
            EventPositionRead(
                event=ScheduleEventRead.model_validate(p.event),
                top=p.top,
                height=p.height,
                column=p.column,
                totalColumns=p.total_columns,
            )
            for p in positions
        ],
    )
