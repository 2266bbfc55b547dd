"""Calendar helpers shared by the engine.

All engine datetimes are naive local wall-clock times.
"""

import math
from datetime import date, datetime, time, timedelta
from typing import Any, Optional
from urllib.parse import quote

from dateutil import parser as date_parser

from studynext.models.constants import CHAT_PATH


def parse_task_date(value: Any) -> Optional[datetime]:
    """Parse a raw due/exam date into a naive local datetime.

    Returns None for missing values, the literal string "null", and anything that
    does not parse. Timezone-aware inputs are converted to local time.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text or text.lower() == "null":
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                parsed = date_parser.parse(text)
            except (ValueError, OverflowError):
                return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def days_until(when: datetime, now: datetime) -> int:
    """Whole days from now until `when`, rounded up."""
    return math.ceil((when - now).total_seconds() / 86400)


def week_start(when: datetime) -> date:
    """Sunday on or before `when` (weeks are Sunday-anchored)."""
    day = when.date()
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_tomorrow(now: datetime) -> datetime:
    return datetime.combine(now.date() + timedelta(days=1), time.min)


def week_label(start: date) -> str:
    return f"Week of {start.strftime('%b')} {start.day}"


def chat_link(chat_id: str, prefill: str) -> str:
    """Deep link into a course chat with a prefilled question."""
    return f"{CHAT_PATH}?tab={quote(chat_id, safe='')}&prefill={quote(prefill, safe='')}"
