"""
Settings cog: display settings for StrikeGuard's spam notices.

This cog exposes two slash commands:
- /settings: Interactive panel with buttons to toggle the icon and creator
  footer and to cycle the notice colour
- /settings-dump: Export current settings as JSON for debugging

All settings changes require the Manage Server permission.
Responses are ephemeral to avoid leaking configuration in public channels.
"""

import asyncio
import io
import json

import discord
from discord.ext import commands

from strikeguard.configuration.display_settings import DisplaySettingsStore, display_settings_store
from strikeguard.ui.settings_ui import DisplaySettingsView, build_settings_embed
from strikeguard.util.logger import get_logger

logger = get_logger("settings_cog")

SETTINGS_DUMP_FILENAME = "strikeguard_settings.json"


class SettingsCog(commands.Cog):
    """Display settings panel and JSON dump."""

    def __init__(self, discord_bot_instance, settings_store: DisplaySettingsStore | None = None):
        self.discord_bot_instance = discord_bot_instance
        self.settings_store = settings_store or display_settings_store
        logger.info("Settings cog loaded")

    async def _ensure_guild_context(self, ctx: discord.ApplicationContext) -> bool:
        if not ctx.guild_id:
            await ctx.respond("This command can only be used in a server.", ephemeral=True)
            return False
        return True

    def _has_manage_permission(self, ctx: discord.ApplicationContext) -> bool:
        member = ctx.user
        permissions = getattr(member, "guild_permissions", None)
        return bool(getattr(permissions, "manage_guild", False))

    @commands.slash_command(name="settings", description="Configure how StrikeGuard's spam notices look.")
    async def settings_panel(self, ctx: discord.ApplicationContext):
        """Present the settings panel backed by interactive buttons."""
        if not await self._ensure_guild_context(ctx):
            return

        if not self._has_manage_permission(ctx):
            await ctx.respond(
                "You need the Manage Server permission to configure StrikeGuard.",
                ephemeral=True,
            )
            return

        settings = await asyncio.to_thread(self.settings_store.load)
        view = DisplaySettingsView(self.settings_store, settings=settings)
        embed = build_settings_embed(settings)

        await ctx.respond(embed=embed, view=view, ephemeral=True)
        try:
            view.message = await ctx.interaction.original_response()
        except discord.NotFound:
            view.message = None

    @commands.slash_command(name="settings-dump", description="Show the current display settings as raw JSON.")
    async def settings_dump(self, ctx: discord.ApplicationContext):
        """Return the display settings as an ephemeral JSON attachment."""
        if not await self._ensure_guild_context(ctx):
            return

        settings = await asyncio.to_thread(self.settings_store.load)
        settings_json_string = json.dumps(settings.as_dict(), ensure_ascii=False, indent=2)
        file_obj = io.BytesIO(settings_json_string.encode("utf-8"))

        try:
            await ctx.respond(file=discord.File(fp=file_obj, filename=SETTINGS_DUMP_FILENAME), ephemeral=True)
        except discord.InteractionResponded:
            file_obj.seek(0)
            await ctx.followup.send(file=discord.File(fp=file_obj, filename=SETTINGS_DUMP_FILENAME), ephemeral=True)


def setup(discord_bot_instance):
    """Add the settings cog to the supplied Discord bot instance."""
    discord_bot_instance.add_cog(SettingsCog(discord_bot_instance))
