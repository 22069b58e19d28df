"""Member directory: the only write path into the member roster."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
import structlog

from callcal.db.models.member import Member
from callcal.db.store import AttendanceStore
from callcal.services.attendance.models import MemberRecord

logger = structlog.get_logger()


def _to_record(member: Member) -> MemberRecord:
    return MemberRecord(
        id=member.id,
        external_uid=member.external_uid,
        external_uin=member.external_uin,
        nickname=member.nickname,
        group_nickname=member.group_nickname,
        sort_key=member.sort_key,
    )


class MemberDirectory:
    """Upsert-only registry of members keyed by ``external_uid``."""

    def __init__(self, store: AttendanceStore) -> None:
        self.store = store

    async def upsert(
        self,
        external_uid: str,
        external_uin: int,
        nickname: str,
        group_nickname: Optional[str],
    ) -> int:
        """Create the member or overwrite its nicknames; return its id."""
        async with self.store.transaction("upsert member") as db:
            result = await db.execute(
                select(Member).where(Member.external_uid == external_uid)
            )
            member = result.scalar_one_or_none()

            if member:
                member.nickname = nickname
                member.group_nickname = group_nickname
            else:
                member = Member(
                    external_uid=external_uid,
                    external_uin=external_uin,
                    nickname=nickname,
                    group_nickname=group_nickname,
                )
                db.add(member)
                await db.flush()
                logger.info(
                    "Registered new member",
                    member_id=member.id,
                    external_uin=external_uin,
                )

            return member.id

    async def get(self, member_id: int) -> Optional[MemberRecord]:
        async with self.store.transaction("get member") as db:
            member = await db.get(Member, member_id)
            return _to_record(member) if member else None

    async def find_by_external_uin(self, uin: int) -> Optional[tuple[int, Optional[str]]]:
        """Member id and stored credential for ``uin``, or None."""
        async with self.store.transaction("find member by uin") as db:
            result = await db.execute(
                select(Member.id, Member.credential)
                .where(Member.external_uin == uin)
                .order_by(Member.id)
                .limit(1)
            )
            row = result.first()
            return (row.id, row.credential) if row else None

    async def get_credential(self, member_id: int) -> Optional[str]:
        async with self.store.transaction("get credential") as db:
            result = await db.execute(
                select(Member.credential).where(Member.id == member_id)
            )
            return result.scalar_one_or_none()

    async def set_credential(self, member_id: int, credential: str) -> bool:
        """Replace the stored credential. False if the member does not exist."""
        async with self.store.transaction("set credential") as db:
            result = await db.execute(
                update(Member)
                .where(Member.id == member_id)
                .values(credential=credential)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0
