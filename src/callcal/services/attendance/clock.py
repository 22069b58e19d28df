"""Attendance-day boundaries.

An attendance day starts at 04:00 in fixed UTC+8 and lasts 24 hours, so a
late-night session is not split across two calendar days. All functions are
pure; the current time is always passed in.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from callcal.config.constants import BOT_UTC_OFFSET_HOURS, CHECKPOINT_HOUR, MSG_INVALID_DAY
from callcal.core.exceptions import InvalidInputError

BOT_TZ = timezone(timedelta(hours=BOT_UTC_OFFSET_HOURS))
CHECKPOINT_TIME = time(CHECKPOINT_HOUR, 0, 0)
DAY = timedelta(days=1)


def ensure_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime; naive values are UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def to_local(instant: datetime) -> datetime:
    """Convert an instant to bot-local (UTC+8) time."""
    return ensure_utc(instant).astimezone(BOT_TZ)


def checkpoint_for_date(day: date) -> datetime:
    """Start of the attendance day ``day``, as a UTC instant."""
    local = datetime.combine(day, CHECKPOINT_TIME, tzinfo=BOT_TZ)
    return local.astimezone(timezone.utc)


def get_checkpoint(now: datetime) -> datetime:
    """Start of the attendance day containing ``now``.

    04:00 local today if the local time is at or past 04:00, otherwise
    04:00 local yesterday.
    """
    local_now = to_local(now)
    if local_now.time() >= CHECKPOINT_TIME:
        checkpoint_date = local_now.date()
    else:
        checkpoint_date = local_now.date() - DAY
    return checkpoint_for_date(checkpoint_date)


def day_window(checkpoint: datetime) -> tuple[datetime, datetime]:
    """Half-open ``[checkpoint, checkpoint + 1 day)``."""
    return checkpoint, checkpoint + DAY


def resolve_window(now: datetime, day: Optional[date] = None) -> tuple[datetime, datetime]:
    """Window for an explicit ``day``, or the one containing ``now``."""
    checkpoint = checkpoint_for_date(day) if day is not None else get_checkpoint(now)
    return day_window(checkpoint)


def parse_day(text: str) -> date:
    """Parse a requested report date in ``YYYY-MM-DD`` form, nothing else."""
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as e:
        raise InvalidInputError(f"{MSG_INVALID_DAY}：{text}", details={"value": text}) from e
