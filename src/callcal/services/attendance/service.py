"""Attendance service: the single facade used by the bot and the API."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import structlog

from callcal.config.constants import CheckInOutcome, UndoOutcome
from callcal.db.store import AttendanceStore
from callcal.services.attendance.directory import MemberDirectory
from callcal.services.attendance.ledger import CheckInLedger
from callcal.services.attendance.models import (
    DayEntry,
    GroupMember,
    MemberRecord,
    ScanResult,
)
from callcal.services.attendance.report import DailyReportBuilder
from callcal.services.attendance.scanner import AbsenceScanner, format_scan

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttendanceService:
    """Service for member registration, check-ins, reports and absence scans.

    Every operation is one locked unit of work against ``store``. ``now``
    defaults to the wall clock; pass it explicitly for deterministic results.
    """

    def __init__(self, store: AttendanceStore) -> None:
        self.store = store
        self.directory = MemberDirectory(store)
        self.ledger = CheckInLedger(store)
        self.reports = DailyReportBuilder(store)
        self.scanner = AbsenceScanner(store)

    async def upsert_member(
        self,
        external_uid: str,
        external_uin: int,
        nickname: str,
        group_nickname: Optional[str] = None,
    ) -> int:
        """Register a member or refresh its nicknames. Returns the member id."""
        return await self.directory.upsert(
            external_uid, external_uin, nickname, group_nickname
        )

    async def register(self, member: GroupMember) -> int:
        """Upsert a member as reported by a chat transport."""
        return await self.upsert_member(
            member.uid, member.uin, member.nickname, member.group_nickname
        )

    async def get_member(self, member_id: int) -> Optional[MemberRecord]:
        return await self.directory.get(member_id)

    async def check_in(
        self, member_id: int, now: Optional[datetime] = None
    ) -> CheckInOutcome:
        return await self.ledger.check_in(member_id, now or _utcnow())

    async def undo_check_in(
        self, member_id: int, now: Optional[datetime] = None
    ) -> UndoOutcome:
        return await self.ledger.undo_check_in(member_id, now or _utcnow())

    async def build_report(
        self, day: Optional[date] = None, now: Optional[datetime] = None
    ) -> str:
        """Daily report text for ``day`` (default: the current attendance day)."""
        return await self.reports.build_report(now or _utcnow(), day)

    async def list_day(
        self, day: Optional[date] = None, now: Optional[datetime] = None
    ) -> list[DayEntry]:
        return await self.reports.list_day(now or _utcnow(), day)

    async def scan(self, now: Optional[datetime] = None) -> ScanResult:
        return await self.scanner.scan(now or _utcnow())

    async def scan_message(self, now: Optional[datetime] = None) -> str:
        """Absence scan rendered for chat."""
        return format_scan(await self.scan(now))

    async def find_by_external_uin(self, uin: int) -> Optional[tuple[int, Optional[str]]]:
        return await self.directory.find_by_external_uin(uin)

    async def get_credential(self, member_id: int) -> Optional[str]:
        return await self.directory.get_credential(member_id)

    async def set_credential(self, member_id: int, credential: str) -> bool:
        updated = await self.directory.set_credential(member_id, credential)
        if updated:
            logger.info("Member credential updated", member_id=member_id)
        return updated
