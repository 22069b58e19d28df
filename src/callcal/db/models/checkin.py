"""Check-in event model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from callcal.db.models.base import Base, UTCDateTime

if TYPE_CHECKING:
    from callcal.db.models.member import Member


class CheckInEvent(Base):
    """A single check-in. Created once per member per attendance day."""

    __tablename__ = "check_in_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, index=True
    )

    # Relationships
    member: Mapped["Member"] = relationship("Member", back_populates="check_ins")

    def __repr__(self) -> str:
        return f"<CheckInEvent member={self.member_id} at {self.created_at}>"
