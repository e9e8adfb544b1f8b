import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fittrack.api.deps import get_current_user_id, get_stats_config, get_today
from fittrack.api.queries import completed_sessions
from fittrack.db import get_db
from fittrack.services.strength import StatsConfig, build_pr_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prs", tags=["prs"])


@router.get("")
def get_personal_records(
    exercise: Optional[str] = Query(None, description="Name fragment, '-' for spaces"),
    type: Optional[str] = Query(None, description="1rm | weight | reps | volume"),
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    config: StatsConfig = Depends(get_stats_config),
    db: Session = Depends(get_db),
):
    """
    Personal records per exercise plus PRs broken recently:
      GET /prs?exercise=bench-press&type=1rm
    """
    sessions = completed_sessions(db, user_id)
    logger.debug("Computing PRs over %d sessions for user %s", len(sessions), user_id)
    return build_pr_report(
        sessions,
        today,
        config,
        exercise_filter=exercise,
        type_filter=type,
    )
