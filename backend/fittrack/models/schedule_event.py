from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.sql import func
from fittrack.db import Base, JSONType


class EventCategory(Base):
    __tablename__ = "event_categories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    name = Column(String, nullable=False)
    color = Column(String(20), nullable=True)  # e.g. "#22c55e"
    icon = Column(String, nullable=True)


class ScheduleEvent(Base):
    __tablename__ = "schedule_events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    category_id = Column(
        Integer,
        ForeignKey("event_categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Time of day only; the day comes from `date` or the recurrence rule
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    # Set for one-time events, ignored for recurring ones
    date = Column(Date, nullable=True, index=True)

    is_recurring = Column(Boolean, nullable=False, default=False)
    # Weekday indices, 0 = Sunday .. 6 = Saturday. Empty/NULL = every day
    recurrence_days = Column(JSONType, nullable=True)

    status = Column(
        String(20),
        nullable=False,
        server_default="pending",  # pending, in_progress, completed, cancelled
    )
    notes = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
