"""Message listener Cog for StrikeGuard.

This cog feeds every guild message into the per-guild spam detector and,
when a violation is declared, applies the timeout, DM and public notice.
"""

import asyncio
from typing import Dict

import discord
from discord.ext import commands

from strikeguard.configuration.app_configuration import app_config
from strikeguard.configuration.display_settings import DisplaySettingsStore, display_settings_store
from strikeguard.configuration.spam_settings import SpamDetectionSettings
from strikeguard.datatypes.spam_datatypes import Verdict
from strikeguard.spam.spam_detector import SpamDetector
from strikeguard.util import discord_utils
from strikeguard.util.logger import get_logger

logger = get_logger("message_listener_cog")


def message_timestamp_ms(message: discord.Message) -> int:
    """Return the message creation time in epoch milliseconds."""
    return int(message.created_at.timestamp() * 1000)


class MessageListenerCog(commands.Cog):
    """Cog responsible for spam detection on incoming messages."""

    def __init__(
        self,
        discord_bot_instance,
        spam_settings: SpamDetectionSettings | None = None,
        settings_store: DisplaySettingsStore | None = None,
    ):
        """
        Initialize the message listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        spam_settings:
            Detector constants; read from the app config when omitted.
        settings_store:
            Display settings used for spam notices; the shared store when omitted.
        """
        self.bot = discord_bot_instance
        self.spam_settings = spam_settings or app_config.spam_detection
        self.settings_store = settings_store or display_settings_store
        # One detector per guild so activity never leaks between servers
        self.detectors: Dict[int, SpamDetector] = {}
        logger.info(
            "Message listener cog loaded (window=%dms, threshold=%d, base=%dmin, multiplier=%d)",
            self.spam_settings.window_ms,
            self.spam_settings.threshold,
            self.spam_settings.base_minutes,
            self.spam_settings.multiplier,
        )

    def detector_for(self, guild_id: int) -> SpamDetector:
        """Return the detector for ``guild_id``, creating it on first use."""
        detector = self.detectors.get(guild_id)
        if detector is None:
            detector = SpamDetector(self.spam_settings)
            self.detectors[guild_id] = detector
        return detector

    def _should_process_message(self, message: discord.Message) -> bool:
        # Ignore DMs
        if message.guild is None:
            return False

        if discord_utils.is_ignored_author(message.author):
            return False

        # Moderators are never rate limited
        if discord_utils.has_elevated_permissions(message.author):
            return False

        return True

    @commands.Cog.listener(name='on_message')
    async def on_message(self, message: discord.Message):
        """
        Record the message with the guild's detector and punish on violation.

        Parameters
        ----------
        message:
            The Discord message that was created.
        """
        if not self._should_process_message(message):
            return

        detector = self.detector_for(message.guild.id)
        verdict: Verdict = detector.record_event(message.author.id, message_timestamp_ms(message))
        if not verdict.is_violation:
            return

        logger.info(
            "Spam detected from %s in guild %s: strike %d, %d minute timeout",
            message.author, message.guild.id, verdict.strikes, verdict.penalty_minutes,
        )

        try:
            settings = await asyncio.to_thread(self.settings_store.load)
            await discord_utils.apply_spam_penalty(
                message.author,
                verdict,
                message.channel,
                settings,
                bot_user=getattr(self.bot, "user", None),
            )
        except Exception as e:
            logger.error(f"Error enforcing spam penalty for {message.author.id}: {e}", exc_info=True)


def setup(discord_bot_instance):
    """
    Register the MessageListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    """
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance))
