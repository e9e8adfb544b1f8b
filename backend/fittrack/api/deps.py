from datetime import date
from typing import Optional

from fastapi import Header

from fittrack.core.config import settings
from fittrack.core.exceptions import UnauthorizedError, ValidationError
from fittrack.core.time_utils import local_today, parse_local_date
from fittrack.services.schedule import LayoutConfig
from fittrack.services.strength import StatsConfig


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """User id forwarded by the auth layer in front of this service."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError()
    return x_user_id.strip()


def get_today() -> date:
    return local_today(settings.timezone)


def get_layout_config() -> LayoutConfig:
    return LayoutConfig(
        hour_height=settings.hour_height,
        day_start_hour=settings.day_start_hour,
        min_event_minutes=settings.min_event_minutes,
    )


def get_stats_config() -> StatsConfig:
    return StatsConfig(
        weight_unit=settings.weight_unit,
        recent_pr_days=settings.recent_pr_days,
        max_prs=settings.max_prs,
        max_recent_prs=settings.max_recent_prs,
    )


def parse_date_param(value: Optional[str], default: date, field: str = "date") -> date:
    """Query-string date as 'YYYY-MM-DD'; 422 when malformed."""
    if value is None or value == "":
        return default
    try:
        return parse_local_date(value)
    except ValueError as e:
        raise ValidationError(str(e), field=field)
