"""Group check-in commands."""

from __future__ import annotations

from typing import Optional

import discord
from discord.ext import commands
import structlog

from callcal.config.constants import (
    MSG_ALREADY_CHECKED_IN,
    MSG_CHECK_IN_FAILED,
    MSG_MEMBER_UPDATE_FAILED,
    MSG_NOTHING_TO_UNDO,
    MSG_REPORT_FAILED,
    MSG_SCAN_FAILED,
    MSG_UNDO_FAILED,
    MSG_UNDONE,
    CheckInOutcome,
    UndoOutcome,
)
from callcal.core.exceptions import InvalidInputError, StorageError
from callcal.services.attendance import AttendanceService, GroupMember
from callcal.services.attendance.clock import parse_day

logger = structlog.get_logger()


def group_member_from(author: discord.abc.User) -> GroupMember:
    """Map a Discord author to the identity the engine registers."""
    return GroupMember(
        uid=str(author.id),
        uin=author.id,
        member_name=author.name,
        member_card=getattr(author, "nick", None),
    )


class AttendanceCog(commands.Cog):
    """Check in, undo, daily report and absence scan."""

    def __init__(self, bot: commands.Bot) -> None:
        self.bot = bot

    @property
    def service(self) -> AttendanceService:
        return self.bot.service

    async def _reply(self, ctx: commands.Context, message: str) -> None:
        await ctx.send(f"{ctx.author.mention} {message}")

    async def _register(self, ctx: commands.Context) -> Optional[int]:
        member = group_member_from(ctx.author)
        try:
            return await self.service.register(member)
        except StorageError as e:
            logger.error("Failed to upsert member", uin=member.uin, error=e.message)
            await ctx.send(MSG_MEMBER_UPDATE_FAILED)
            return None

    @commands.command(name="daka", aliases=["打卡"])
    async def check_in(self, ctx: commands.Context) -> None:
        """Check in for today. Replies with the daily report on success."""
        logger.debug("Handling check-in command", user=ctx.author.id)
        member_id = await self._register(ctx)
        if member_id is None:
            return

        try:
            outcome = await self.service.check_in(member_id)
        except StorageError:
            await self._reply(ctx, MSG_CHECK_IN_FAILED)
            return

        if outcome is CheckInOutcome.ALREADY_PRESENT:
            message = MSG_ALREADY_CHECKED_IN
        else:
            # The event is committed; only the report can still fail.
            try:
                message = await self.service.build_report()
            except StorageError:
                message = MSG_REPORT_FAILED

        await self._reply(ctx, message)

    @commands.command(name="undaka", aliases=["我没打卡"])
    async def undo_check_in(self, ctx: commands.Context) -> None:
        """Take back today's check-in."""
        logger.debug("Handling undo check-in command", user=ctx.author.id)
        member_id = await self._register(ctx)
        if member_id is None:
            return

        try:
            outcome = await self.service.undo_check_in(member_id)
            message = MSG_NOTHING_TO_UNDO if outcome is UndoOutcome.NOTHING_TO_UNDO else MSG_UNDONE
        except StorageError:
            message = MSG_UNDO_FAILED

        await self._reply(ctx, message)

    @commands.command(name="today", aliases=["今日"])
    async def today(self, ctx: commands.Context, day: Optional[str] = None) -> None:
        """Daily report, for today or for a given YYYY-MM-DD."""
        try:
            requested = parse_day(day) if day else None
            message = await self.service.build_report(requested)
        except InvalidInputError as e:
            message = e.message
        except StorageError:
            message = MSG_REPORT_FAILED

        await ctx.send(message)

    @commands.command(name="gu", aliases=["咕"])
    async def absences(self, ctx: commands.Context) -> None:
        """Who has not checked in for 10 days, and who for 7."""
        logger.debug("Handling absence scan command", user=ctx.author.id)
        try:
            message = await self.service.scan_message()
        except StorageError:
            message = MSG_SCAN_FAILED

        await ctx.send(message)


async def setup(bot: commands.Bot) -> None:
    """Load the AttendanceCog."""
    await bot.add_cog(AttendanceCog(bot))
