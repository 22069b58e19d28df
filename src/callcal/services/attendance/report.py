"""Daily report: who checked in during one attendance day, and who did not."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import and_, func, select

from callcal.config.constants import (
    ABSENT_GLYPH,
    MSG_NOBODY_CHECKED_IN,
    NAME_SEPARATOR,
    PRESENT_GLYPH,
)
from callcal.db.models.checkin import CheckInEvent
from callcal.db.models.member import Member
from callcal.db.store import AttendanceStore
from callcal.services.attendance.clock import resolve_window, to_local
from callcal.services.attendance.models import DayEntry


def _name_line(entries: list[DayEntry], glyph: str) -> str:
    if not entries:
        return ""
    return f"{NAME_SEPARATOR.join(entry.name for entry in entries)} {glyph}"


def format_report(checkpoint: datetime, entries: list[DayEntry]) -> str:
    """Render a day listing as the chat report.

    Header ``M/D`` of the local checkpoint, then the present line and the
    absent line. The absent line is empty when everybody checked in.
    """
    present = [entry for entry in entries if entry.present]
    absent = [entry for entry in entries if not entry.present]
    if not present:
        return MSG_NOBODY_CHECKED_IN

    local = to_local(checkpoint)
    return "\n".join(
        [
            f"{local.month}/{local.day}",
            _name_line(present, PRESENT_GLYPH),
            _name_line(absent, ABSENT_GLYPH),
        ]
    )


class DailyReportBuilder:
    """Joins the roster with one attendance day's check-ins."""

    def __init__(self, store: AttendanceStore) -> None:
        self.store = store

    async def list_day(self, now: datetime, day: Optional[date] = None) -> list[DayEntry]:
        """Every member with their check-in time for the day, if any.

        Members who checked in come first, by check-in time; then the rest.
        Ties fall back to ``sort_key``, then member id.
        """
        start, end = resolve_window(now, day)
        first_check_in = (
            select(
                CheckInEvent.member_id,
                func.min(CheckInEvent.created_at).label("checked_in_at"),
            )
            .where(
                and_(
                    CheckInEvent.created_at >= start,
                    CheckInEvent.created_at < end,
                )
            )
            .group_by(CheckInEvent.member_id)
            .subquery()
        )
        stmt = (
            select(
                Member.id,
                Member.nickname,
                Member.group_nickname,
                first_check_in.c.checked_in_at,
            )
            .outerjoin(first_check_in, first_check_in.c.member_id == Member.id)
            .order_by(
                first_check_in.c.checked_in_at.is_(None),
                first_check_in.c.checked_in_at.asc(),
                Member.sort_key.asc(),
                Member.id.asc(),
            )
        )

        async with self.store.transaction("list day") as db:
            result = await db.execute(stmt)
            rows = result.all()

        return [
            DayEntry(
                member_id=row.id,
                name=row.group_nickname or row.nickname,
                checked_in_at=row.checked_in_at,
            )
            for row in rows
        ]

    async def build_report(self, now: datetime, day: Optional[date] = None) -> str:
        """Formatted report for ``day``, or for the day containing ``now``."""
        start, _ = resolve_window(now, day)
        entries = await self.list_day(now, day)
        return format_report(start, entries)
