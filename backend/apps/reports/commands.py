from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from django.utils.dateparse import parse_date, parse_datetime

from apps.api.utils import parse_int


def _parse_day(raw: Any) -> Optional[date]:
    if raw in (None, ""):
        return None
    value = str(raw).strip()
    try:
        parsed = parse_datetime(value)
        if parsed is not None:
            return parsed.date()
        return parse_date(value)
    except ValueError:
        return None


@dataclass
class TransactionQuery:
    search: Optional[str] = None
    user_id: Optional[int] = None
    event_id: Optional[int] = None
    transaction_type: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @staticmethod
    def from_raw(params: Dict[str, Any]) -> "TransactionQuery":
        data = params or {}

        def _clean(key):
            value = data.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return TransactionQuery(
            search=_clean("search") or _clean("q"),
            user_id=parse_int(data.get("userId")),
            event_id=parse_int(data.get("eventId")),
            transaction_type=_clean("transactionType"),
            status=_clean("status"),
            start_date=_parse_day(data.get("startDate")),
            end_date=_parse_day(data.get("endDate")),
        )


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
