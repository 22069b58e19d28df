"""Main Discord bot class."""

from __future__ import annotations

import discord
from discord.ext import commands
import structlog

from callcal.config.settings import settings
from callcal.services.attendance import AttendanceService

logger = structlog.get_logger()


class CallCalBot(commands.Bot):
    """Group check-in bot."""

    def __init__(self, service: AttendanceService, command_prefix: str | None = None) -> None:
        """Initialize the bot with required intents."""
        intents = discord.Intents.default()
        intents.message_content = True  # Prefix commands
        intents.guilds = True
        intents.members = True  # For guild nicknames

        super().__init__(
            command_prefix=command_prefix or settings.discord_command_prefix,
            intents=intents,
            help_command=None,
        )

        self.service = service
        self._ready_logged = False

    async def setup_hook(self) -> None:
        """Called when the bot is starting up."""
        logger.info("Setting up call-cal-bot...")
        await self.load_extension("callcal.integrations.discord.cogs.attendance")
        logger.info("Bot setup complete")

    async def on_ready(self) -> None:
        """Called when bot is connected and ready."""
        if self._ready_logged:
            return

        self._ready_logged = True
        logger.info(
            "Bot online",
            user=str(self.user),
            guilds=len(self.guilds),
        )

    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        """Global error handler for commands."""
        if isinstance(error, commands.CommandNotFound):
            pass  # Ignore unknown commands
        else:
            logger.error(
                "Command error",
                command=str(ctx.command),
                error=str(error),
                guild_id=ctx.guild.id if ctx.guild else None,
            )
            await ctx.send("An error occurred while processing your command.")
