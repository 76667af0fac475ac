from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from papertrade.core.auth import get_current_user
from papertrade.core.config import settings
from papertrade.core.database import get_db
from papertrade.models.user import User
from papertrade.schemas.activity import ActivityResponse
from papertrade.services import trades as trade_service
from papertrade.services.filters import ActivityCriteria, filter_and_sort_activities

router = APIRouter(prefix="/api/trade-activities", tags=["activities"])


@router.get("", response_model=list[ActivityResponse])
def list_activities(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    type: Optional[str] = None,
    search: str = "",
    sort: str = "newest",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The caller's activity journal, filtered first and then cut to ``limit``."""
    activities = trade_service.list_activities(db, current_user)
    criteria = ActivityCriteria(
        from_date=from_date,
        to_date=to_date,
        activity_type=type,
        search=search,
        sort=sort,
    )
    filtered = filter_and_sort_activities(activities, criteria)
    return [ActivityResponse.model_validate(a) for a in filtered[: limit or settings.ACTIVITY_LIMIT_DEFAULT]]
