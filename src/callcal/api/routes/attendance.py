"""Attendance API endpoints."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel
import structlog

from callcal.api.deps import CurrentMemberID, Service
from callcal.config.constants import (
    MSG_ALREADY_CHECKED_IN,
    MSG_NOTHING_TO_UNDO,
    MSG_REPORT_FAILED,
    MSG_UNDONE,
    CheckInOutcome,
    UndoOutcome,
)
from callcal.core.exceptions import MemberNotFoundError, StorageError
from callcal.services.attendance.clock import parse_day, resolve_window, to_local
from callcal.services.attendance.report import format_report
from callcal.services.attendance.scanner import format_scan

logger = structlog.get_logger()
router = APIRouter()


class DayEntryResponse(BaseModel):
    """One roster line of a day listing."""

    name: str
    checked_in_at: Optional[str]


class RecordsResponse(BaseModel):
    """Daily report plus the raw listing it was built from."""

    day: date
    report: str
    entries: list[DayEntryResponse]


class AbsenceResponse(BaseModel):
    """Absence scan cohorts."""

    missed: list[str]
    warning: list[str]
    message: str


class CheckInPayload(BaseModel):
    """Target member of a check-in or undo."""

    qq_uin: int


class CheckInResponse(BaseModel):
    """Outcome of a check-in or undo."""

    ok: bool
    outcome: str
    message: str


async def _member_id_for(service, uin: int) -> int:
    found = await service.find_by_external_uin(uin)
    if found is None:
        raise MemberNotFoundError("member not found", details={"qq_uin": uin})
    return found[0]


@router.get("/records")
async def get_records(
    member_id: CurrentMemberID,
    service: Service,
    day: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
) -> RecordsResponse:
    """Daily report for ``day`` (default: the current attendance day)."""
    requested = parse_day(day) if day else None
    now = datetime.now(timezone.utc)
    checkpoint, _ = resolve_window(now, requested)

    entries = await service.list_day(requested, now=now)

    return RecordsResponse(
        day=to_local(checkpoint).date(),
        report=format_report(checkpoint, entries),
        entries=[
            DayEntryResponse(name=entry.name, checked_in_at=entry.time_label)
            for entry in entries
        ],
    )


@router.get("/absences")
async def get_absences(member_id: CurrentMemberID, service: Service) -> AbsenceResponse:
    """Members missing for 10 days, and members missing for 7."""
    now = datetime.now(timezone.utc)
    result = await service.scan(now)
    return AbsenceResponse(
        missed=result.missed,
        warning=result.warning,
        message=format_scan(result),
    )


@router.post("/check-in")
async def create_check_in(
    payload: CheckInPayload,
    member_id: CurrentMemberID,
    service: Service,
) -> CheckInResponse:
    """Check in an existing member. Unknown uins are not registered here."""
    target_id = await _member_id_for(service, payload.qq_uin)
    now = datetime.now(timezone.utc)
    outcome = await service.check_in(target_id, now=now)

    if outcome is CheckInOutcome.ALREADY_PRESENT:
        message = MSG_ALREADY_CHECKED_IN
    else:
        try:
            message = await service.build_report(now=now)
        except StorageError as e:
            logger.error("Report after check-in failed", member_id=target_id, error=e.message)
            message = MSG_REPORT_FAILED

    logger.info(
        "Check-in via API",
        member_id=target_id,
        requested_by=member_id,
        outcome=outcome.value,
    )
    return CheckInResponse(ok=True, outcome=outcome.value, message=message)


@router.delete("/check-in")
async def delete_check_in(
    payload: CheckInPayload,
    member_id: CurrentMemberID,
    service: Service,
) -> CheckInResponse:
    """Undo today's check-in of an existing member."""
    target_id = await _member_id_for(service, payload.qq_uin)
    outcome = await service.undo_check_in(target_id)

    message = MSG_NOTHING_TO_UNDO if outcome is UndoOutcome.NOTHING_TO_UNDO else MSG_UNDONE
    logger.info(
        "Undo check-in via API",
        member_id=target_id,
        requested_by=member_id,
        outcome=outcome.value,
    )
    return CheckInResponse(ok=True, outcome=outcome.value, message=message)
