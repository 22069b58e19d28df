"""Group member model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from callcal.db.models.base import Base

if TYPE_CHECKING:
    from callcal.db.models.checkin import CheckInEvent


class Member(Base):
    """Group member, keyed by the chat platform's stable user id."""

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Chat identity
    external_uid: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    external_uin: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    # Display
    nickname: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    group_nickname: Mapped[Optional[str]] = mapped_column(String(255))

    # Roster ordering among members with no check-in
    sort_key: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Password hash for the web login; never interpreted here
    credential: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    check_ins: Mapped[list["CheckInEvent"]] = relationship(
        "CheckInEvent", back_populates="member", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        """Group nickname, falling back to the account nickname."""
        return self.group_nickname or self.nickname

    def __repr__(self) -> str:
        return f"<Member {self.display_name} ({self.external_uid})>"
