from datetime import date as date_type, time
from typing import Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class EventStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


def check_recurrence_days(days: Optional[list[int]]) -> Optional[list[int]]:
    """Weekday indices 0 (Sunday) .. 6 (Saturday), de-duplicated and sorted."""
    if days is None:
        return None
    for d in days:
        if d < 0 or d > 6:
            raise ValueError("recurrence_days must be weekday indices 0 (Sunday) to 6 (Saturday)")
    return sorted(set(days))


class ScheduleEventBase(BaseModel):
    title: str
    category_id: Optional[int] = None
    start_time: str   # 'HH:MM' or 'HH:MM:SS'
    end_time: str
    date: Optional[date_type] = None  # required unless is_recurring
    is_recurring: bool = False
    recurrence_days: Optional[list[int]] = None
    notes: Optional[str] = None

    @field_validator("recurrence_days")
    @classmethod
    def _valid_days(cls, v):
        return check_recurrence_days(v)


class ScheduleEventCreate(ScheduleEventBase):
    """Schema for creating an event. New events always start as pending."""
    pass


class ScheduleEventUpdate(BaseModel):
    """All fields optional; only the ones sent are changed."""

    title: Optional[str] = None
    category_id: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    date: Optional[date_type] = None
    is_recurring: Optional[bool] = None
    recurrence_days: Optional[list[int]] = None
    status: Optional[EventStatus] = None
    notes: Optional[str] = None

    # Be lenient with extra fields from clients
    model_config = ConfigDict(extra="ignore")

    @field_validator("recurrence_days")
    @classmethod
    def _valid_days(cls, v):
        return check_recurrence_days(v)


class ScheduleEventRead(BaseModel):
    id: int
    title: str
    category_id: Optional[int] = None
    start_time: time
    end_time: time
    date: Optional[date_type] = None
    is_recurring: bool
    recurrence_days: Optional[list[int]] = None
    status: EventStatus
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EventCategoryCreate(BaseModel):
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None


class EventCategoryRead(EventCategoryCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class EventPositionRead(BaseModel):
    event: ScheduleEventRead
    top: float
    height: float
    column: int
    totalColumns: int


class DayScheduleRead(BaseModel):
    date: date_type
    header: str
    isToday: bool
    events: list[EventPositionRead]
