"""Records exchanged between the attendance engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from callcal.services.attendance.clock import to_local


@dataclass(frozen=True)
class GroupMember:
    """A chat user as seen by a transport, before it is registered."""

    uid: str
    uin: int
    member_name: Optional[str] = None
    member_card: Optional[str] = None

    @property
    def nickname(self) -> str:
        return self.member_name or ""

    @property
    def group_nickname(self) -> str:
        return self.member_card or self.nickname


@dataclass(frozen=True)
class MemberRecord:
    id: int
    external_uid: str
    external_uin: int
    nickname: str
    group_nickname: Optional[str]
    sort_key: int

    @property
    def display_name(self) -> str:
        return self.group_nickname or self.nickname


@dataclass(frozen=True)
class DayEntry:
    """One roster line of a day listing."""

    member_id: int
    name: str
    checked_in_at: Optional[datetime] = None

    @property
    def present(self) -> bool:
        return self.checked_in_at is not None

    @property
    def time_label(self) -> Optional[str]:
        """Local check-in time as ``HH:MM``, or None when absent."""
        if self.checked_in_at is None:
            return None
        return to_local(self.checked_in_at).strftime("%H:%M")


@dataclass(frozen=True)
class ScanResult:
    """Members missing for the whole lookback, and those only partly missing."""

    missed: list[str] = field(default_factory=list)
    warning: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.missed and not self.warning
