"""Check-in ledger: at most one live check-in per member per attendance day."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, delete, insert, literal, select
import structlog

from callcal.config.constants import CheckInOutcome, UndoOutcome
from callcal.db.models.base import UTCDateTime
from callcal.db.models.checkin import CheckInEvent
from callcal.db.store import AttendanceStore
from callcal.services.attendance.clock import ensure_utc, get_checkpoint

logger = structlog.get_logger()

events = CheckInEvent.__table__


class CheckInLedger:
    """Idempotent check-in and undo against the current attendance day."""

    def __init__(self, store: AttendanceStore) -> None:
        self.store = store

    async def check_in(self, member_id: int, now: datetime) -> CheckInOutcome:
        """Record a check-in unless one exists since the current checkpoint.

        A single ``INSERT ... SELECT ... WHERE NOT EXISTS``; zero affected
        rows means the member is already present.
        """
        now = ensure_utc(now)
        checkpoint = get_checkpoint(now)

        already_present = (
            select(events.c.id)
            .where(
                and_(
                    events.c.member_id == member_id,
                    events.c.created_at >= checkpoint,
                )
            )
            .exists()
        )
        stmt = insert(events).from_select(
            ["member_id", "created_at"],
            select(
                literal(member_id),
                literal(now, UTCDateTime()),
            ).where(~already_present),
        )

        async with self.store.transaction("check in") as db:
            result = await db.execute(stmt)

        if result.rowcount == 0:
            logger.debug("Member already checked in", member_id=member_id, checkpoint=checkpoint)
            return CheckInOutcome.ALREADY_PRESENT

        logger.info("Check-in recorded", member_id=member_id, checkpoint=checkpoint)
        return CheckInOutcome.RECORDED

    async def undo_check_in(self, member_id: int, now: datetime) -> UndoOutcome:
        """Delete every check-in of the member since the current checkpoint."""
        checkpoint = get_checkpoint(now)
        stmt = delete(events).where(
            and_(
                events.c.member_id == member_id,
                events.c.created_at >= checkpoint,
            )
        )

        async with self.store.transaction("undo check in") as db:
            result = await db.execute(stmt)

        if result.rowcount == 0:
            return UndoOutcome.NOTHING_TO_UNDO

        logger.info(
            "Check-in removed",
            member_id=member_id,
            checkpoint=checkpoint,
            removed=result.rowcount,
        )
        return UndoOutcome.REMOVED
