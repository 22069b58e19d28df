"""Tests for the daily report."""

from datetime import date, datetime, timezone

import pytest

from callcal.config.constants import MSG_NOBODY_CHECKED_IN
from callcal.services.attendance.models import DayEntry
from callcal.services.attendance.report import format_report

from tests.conftest import local


WINDOW_START = local(2026, 10, 19, 4)
NOW = local(2026, 10, 19, 22)


@pytest.mark.asyncio
async def test_nobody_checked_in(service, add_member):
    await add_member("alice")
    assert await service.build_report(now=NOW) == MSG_NOBODY_CHECKED_IN


@pytest.mark.asyncio
async def test_empty_roster(service):
    assert await service.build_report(now=NOW) == MSG_NOBODY_CHECKED_IN
    assert await service.list_day(now=NOW) == []


@pytest.mark.asyncio
async def test_present_and_absent_lines(service, add_member):
    await add_member("A", sort_key=1)
    b = await add_member("B", sort_key=2)
    await service.check_in(b, now=WINDOW_START)

    report = await service.build_report(now=NOW)

    assert report == "10/19\nB ✅\nA ❌"


@pytest.mark.asyncio
async def test_everybody_present_leaves_absent_line_empty(service, add_member):
    for name in ("A", "B"):
        member_id = await add_member(name)
        await service.check_in(member_id, now=NOW)

    lines = (await service.build_report(now=NOW)).split("\n")

    assert lines[1] == "A　B ✅"
    assert lines[2] == ""


@pytest.mark.asyncio
async def test_present_ordered_by_check_in_time(service, add_member):
    a = await add_member("A", sort_key=1)
    await add_member("B", sort_key=2)
    c = await add_member("C", sort_key=3)
    await service.check_in(c, now=local(2026, 10, 19, 6))
    await service.check_in(a, now=local(2026, 10, 19, 7))

    report = await service.build_report(now=NOW)

    assert report == "10/19\nC　A ✅\nB ❌"


@pytest.mark.asyncio
async def test_ties_broken_by_sort_key_then_id(service, add_member):
    first = await add_member("first", sort_key=5)
    second = await add_member("second", sort_key=1)
    third = await add_member("third", sort_key=1)
    for member_id in (first, second, third):
        await service.check_in(member_id, now=NOW)

    entries = await service.list_day(now=NOW)

    assert [entry.name for entry in entries] == ["second", "third", "first"]


@pytest.mark.asyncio
async def test_absent_ordered_by_roster(service, add_member):
    await add_member("late", sort_key=9)
    await add_member("early", sort_key=0)
    present = await add_member("here", sort_key=5)
    await service.check_in(present, now=NOW)

    report = await service.build_report(now=NOW)

    assert report.split("\n")[2] == "early　late ❌"


@pytest.mark.asyncio
async def test_group_nickname_preferred(service, add_member):
    member_id = await add_member("alice", group_nickname="Alice (group)")
    await service.check_in(member_id, now=NOW)

    assert "Alice (group) ✅" in await service.build_report(now=NOW)


@pytest.mark.asyncio
async def test_report_for_explicit_day(service, add_member, add_event):
    a = await add_member("A", sort_key=1)
    await add_member("B", sort_key=2)
    await add_event(a, local(2026, 10, 16, 23, 59))

    report = await service.build_report(date(2026, 10, 16), now=NOW)

    assert report == "10/16\nA ✅\nB ❌"
    assert await service.build_report(now=NOW) == MSG_NOBODY_CHECKED_IN


@pytest.mark.asyncio
async def test_report_window_excludes_next_cutover(service, add_member, add_event):
    a = await add_member("A")
    await add_event(a, local(2026, 10, 17, 4))

    assert await service.build_report(date(2026, 10, 16), now=NOW) == MSG_NOBODY_CHECKED_IN


@pytest.mark.asyncio
async def test_list_day_time_labels(service, add_member):
    a = await add_member("A", sort_key=1)
    await add_member("B", sort_key=2)
    await service.check_in(a, now=local(2026, 10, 19, 8, 5))

    entries = await service.list_day(now=NOW)

    assert [(entry.name, entry.time_label) for entry in entries] == [
        ("A", "08:05"),
        ("B", None),
    ]


@pytest.mark.asyncio
async def test_report_is_repeatable(service, add_member):
    member_id = await add_member("A")
    await service.check_in(member_id, now=NOW)

    assert await service.build_report(now=NOW) == await service.build_report(now=NOW)


def test_format_report_header_uses_local_date():
    # 2026-10-18 20:00 UTC is 10/19 04:00 in UTC+8
    checkpoint = datetime(2026, 10, 18, 20, tzinfo=timezone.utc)
    entries = [DayEntry(member_id=1, name="A", checked_in_at=checkpoint)]

    assert format_report(checkpoint, entries) == "10/19\nA ✅\n"
