"""Absence scan over the last ten attendance days."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import and_, func, select

from callcal.config.constants import (
    MISSED_HEADER,
    MISSED_LOOKBACK_DAYS,
    MSG_NOBODY_SLACKING,
    NAME_SEPARATOR,
    WARNING_HEADER,
    WARNING_LOOKBACK_DAYS,
)
from callcal.db.models.checkin import CheckInEvent
from callcal.db.models.member import Member
from callcal.db.store import AttendanceStore
from callcal.services.attendance.clock import get_checkpoint
from callcal.services.attendance.models import ScanResult


def format_scan(result: ScanResult) -> str:
    """Chat message for a scan; a fixed reply when nobody is behind."""
    if result.is_empty:
        return MSG_NOBODY_SLACKING

    sections = []
    if result.missed:
        sections.append(f"{MISSED_HEADER}\n{NAME_SEPARATOR.join(result.missed)}")
    if result.warning:
        sections.append(f"{WARNING_HEADER}\n{NAME_SEPARATOR.join(result.warning)}")
    return "\n".join(sections).strip()


class AbsenceScanner:
    """Classifies members by their most recent check-in in the lookback."""

    def __init__(self, store: AttendanceStore) -> None:
        self.store = store

    async def scan(self, now: datetime) -> ScanResult:
        """Missed and warning cohorts as of ``now``.

        The lookback is ``[checkpoint - 10 days, checkpoint)``; today does
        not count. ``missed`` has no check-in in it at all, ``warning`` last
        checked in before ``checkpoint - 7 days``. Both keep roster order.
        """
        window_end = get_checkpoint(now)
        window_start = window_end - timedelta(days=MISSED_LOOKBACK_DAYS)
        warning_boundary = window_end - timedelta(days=WARNING_LOOKBACK_DAYS)

        last_check_in = (
            select(
                CheckInEvent.member_id,
                func.max(CheckInEvent.created_at).label("last_at"),
            )
            .where(
                and_(
                    CheckInEvent.created_at >= window_start,
                    CheckInEvent.created_at < window_end,
                )
            )
            .group_by(CheckInEvent.member_id)
            .subquery()
        )
        stmt = (
            select(Member.nickname, Member.group_nickname, last_check_in.c.last_at)
            .outerjoin(last_check_in, last_check_in.c.member_id == Member.id)
            .order_by(Member.sort_key.asc(), Member.id.asc())
        )

        async with self.store.transaction("scan absences") as db:
            result = await db.execute(stmt)
            rows = result.all()

        missed = []
        warning = []
        for row in rows:
            name = row.group_nickname or row.nickname
            if row.last_at is None:
                missed.append(name)
            elif row.last_at < warning_boundary:
                warning.append(name)

        return ScanResult(missed=missed, warning=warning)
