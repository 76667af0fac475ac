"""
Filter / sort pipeline for trade and activity lists.

Each call copies its input, applies the criteria and returns a new list.
Sorting is stable, so records with equal keys keep their incoming order.
Unknown sort keys leave the filtered order untouched.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional, Union

from papertrade.services.metrics import to_number

DateBound = Union[date, datetime]

_EPOCH = datetime.min


@dataclass
class TradeCriteria:
    active_only: bool = False
    closed_only: bool = False
    position: Optional[str] = None   # "long" / "short"; None or "all" disables
    search: str = ""                 # symbol or venue label
    from_date: Optional[DateBound] = None
    to_date: Optional[DateBound] = None
    sort: str = "newest"


@dataclass
class ActivityCriteria:
    from_date: Optional[DateBound] = None
    to_date: Optional[DateBound] = None
    activity_type: Optional[str] = None   # substring of type; None or "all" disables
    search: str = ""                      # symbol, type or status
    sort: str = "newest"


@dataclass
class Page:
    items: list
    page: int
    page_count: int
    total: int


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _lower_bound(bound: DateBound) -> datetime:
    if not isinstance(bound, datetime):
        bound = datetime.combine(bound, time.min)
    return _naive_utc(bound)


def _upper_bound(bound: DateBound) -> datetime:
    """Exclusive upper bound: one day past ``bound`` so the whole end day is kept."""
    return _lower_bound(bound) + timedelta(days=1)


def _timestamp(value: Optional[datetime]) -> datetime:
    return _naive_utc(value) if value is not None else _EPOCH


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def _in_range(stamp: datetime, from_date: Optional[DateBound], to_date: Optional[DateBound]) -> bool:
    if from_date is not None and stamp < _lower_bound(from_date):
        return False
    if to_date is not None and not stamp < _upper_bound(to_date):
        return False
    return True


def _profit(trade) -> float:
    return to_number(trade.profit_loss) or 0.0


def filter_and_sort_trades(trades: Iterable, criteria: Optional[TradeCriteria] = None) -> list:
    criteria = criteria or TradeCriteria()
    result = list(trades)

    if criteria.active_only:
        result = [t for t in result if t.is_active]
    if criteria.closed_only:
        result = [t for t in result if not t.is_active]

    position = (criteria.position or "").strip().lower()
    if position and position != "all":
        result = [t for t in result if (t.position or "").lower() == position]

    if criteria.from_date is not None or criteria.to_date is not None:
        # closed trades are placed in time by when they closed
        result = [
            t for t in result
            if _in_range(_timestamp(t.closed_at or t.created_at), criteria.from_date, criteria.to_date)
        ]

    term = (criteria.search or "").strip().lower()
    if term:
        result = [t for t in result if _contains(t.symbol, term) or _contains(t.api_used, term)]

    if criteria.sort == "newest":
        result.sort(key=lambda t: _timestamp(t.created_at), reverse=True)
    elif criteria.sort == "oldest":
        result.sort(key=lambda t: _timestamp(t.created_at))
    elif criteria.sort == "profitDesc":
        result.sort(key=_profit, reverse=True)
    elif criteria.sort == "profitAsc":
        result.sort(key=_profit)
    return result


def filter_and_sort_activities(activities: Iterable, criteria: Optional[ActivityCriteria] = None) -> list:
    criteria = criteria or ActivityCriteria()
    result = list(activities)

    if criteria.from_date is not None or criteria.to_date is not None:
        result = [
            a for a in result
            if _in_range(_timestamp(a.created_at), criteria.from_date, criteria.to_date)
        ]

    activity_type = (criteria.activity_type or "").strip().lower()
    if activity_type and activity_type != "all":
        result = [a for a in result if _contains(a.type, activity_type)]

    term = (criteria.search or "").strip().lower()
    if term:
        result = [
            a for a in result
            if _contains(a.symbol, term) or _contains(a.type, term) or _contains(a.status, term)
        ]

    if criteria.sort == "newest":
        result.sort(key=lambda a: _timestamp(a.created_at), reverse=True)
    elif criteria.sort == "oldest":
        result.sort(key=lambda a: _timestamp(a.created_at))
    return result


def paginate(items: list, page: int = 1, per_page: int = 3) -> Page:
    """Slice one page out of ``items``. Out-of-range pages clamp to the nearest valid page."""
    total = len(items)
    per_page = max(1, per_page)
    page_count = max(1, math.ceil(total / per_page))
    page = min(max(1, page), page_count)
    start = (page - 1) * per_page
    return Page(items=items[start:start + per_page], page=page, page_count=page_count, total=total)
