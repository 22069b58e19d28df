"""Database models."""

from __future__ import annotations

from callcal.db.models.base import Base, UTCDateTime
from callcal.db.models.checkin import CheckInEvent
from callcal.db.models.member import Member

__all__ = [
    "Base",
    "UTCDateTime",
    "Member",
    "CheckInEvent",
]
