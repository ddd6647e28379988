import asyncio
import datetime
from typing import Optional

import discord

from strikeguard.configuration.display_settings import DisplaySettings, DisplaySettingsStore


def build_settings_embed(settings: DisplaySettings, *, title: str = "⚙️ Settings Panel") -> discord.Embed:
    """Create an embed summarizing the current display settings."""
    description = (
        "Adjust how StrikeGuard's spam notices look.\n\n"
        f"**Color:** {settings.color}\n"
        f"**Show Icon:** {settings.show_icon}\n"
        f"**Show Creator:** {settings.show_creator}"
    )
    embed = discord.Embed(
        title=title,
        description=description,
        color=discord.Color(settings.color_value()),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    embed.set_footer(text="Only members with Manage Server can change these settings.")
    return embed


class DisplaySettingsView(discord.ui.View):
    """Interactive view exposing the display settings via buttons."""

    def __init__(
        self,
        store: DisplaySettingsStore,
        *,
        settings: Optional[DisplaySettings] = None,
        timeout_seconds: int = 300,
    ):
        super().__init__(timeout=timeout_seconds)
        self.store = store
        self._message: Optional[discord.Message] = None
        self.refresh_items(settings if settings is not None else store.load())

    @property
    def message(self) -> Optional[discord.Message]:
        return self._message

    @message.setter
    def message(self, value: Optional[discord.Message]) -> None:
        self._message = value

    def refresh_items(self, settings: DisplaySettings) -> None:
        """Rebuild the button set so labels reflect ``settings``."""
        self.clear_items()
        self.add_item(ToggleIconButton(settings.show_icon))
        self.add_item(ToggleCreatorButton(settings.show_creator))
        self.add_item(ChangeColorButton())

    def can_manage(self, member: Optional[discord.abc.Snowflake]) -> bool:
        """Check whether the interacting user can manage guild settings."""
        if member is None:
            return False
        permissions = getattr(member, "guild_permissions", None)
        return bool(getattr(permissions, "manage_guild", False))

    async def apply(self, interaction: discord.Interaction, operation) -> None:
        """Run a store operation for a button press and refresh the panel."""
        if not self.can_manage(interaction.user):
            await interaction.response.send_message(
                "You need the Manage Server permission to change settings.",
                ephemeral=True,
            )
            return

        settings = await asyncio.to_thread(operation)
        self.refresh_items(settings)
        embed = build_settings_embed(settings, title="✅ Settings Updated")
        try:
            await interaction.response.edit_message(embed=embed, view=self)
        except discord.InteractionResponded:
            try:
                await interaction.edit_original_response(embed=embed, view=self)
            except discord.HTTPException:
                pass
        except discord.HTTPException:
            pass

    async def on_timeout(self) -> None:  # pragma: no cover - relies on Discord timers
        for child in self.children:
            if isinstance(child, discord.ui.Button):
                child.disabled = True
        if self._message is not None:
            try:
                await self._message.edit(view=self)
            except discord.HTTPException:
                pass


class ToggleIconButton(discord.ui.Button):
    def __init__(self, enabled: bool):
        label = "🟢 Hide Icon" if enabled else "⚪ Show Icon"
        super().__init__(label=label, style=discord.ButtonStyle.secondary, custom_id="toggle_icon")

    async def callback(self, interaction: discord.Interaction) -> None:
        view: DisplaySettingsView = self.view  # type: ignore[assignment]
        await view.apply(interaction, view.store.toggle_icon)


class ToggleCreatorButton(discord.ui.Button):
    def __init__(self, enabled: bool):
        label = "🟢 Hide Creator" if enabled else "⚪ Show Creator"
        super().__init__(label=label, style=discord.ButtonStyle.secondary, custom_id="toggle_creator")

    async def callback(self, interaction: discord.Interaction) -> None:
        view: DisplaySettingsView = self.view  # type: ignore[assignment]
        await view.apply(interaction, view.store.toggle_creator)


class ChangeColorButton(discord.ui.Button):
    def __init__(self):
        super().__init__(label="🎨 Change Color", style=discord.ButtonStyle.primary, custom_id="change_color")

    async def callback(self, interaction: discord.Interaction) -> None:
        view: DisplaySettingsView = self.view  # type: ignore[assignment]
        await view.apply(interaction, view.store.cycle_color)
