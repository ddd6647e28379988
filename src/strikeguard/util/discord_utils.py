"""
discord_utils.py
================

Low-level Discord helpers for StrikeGuard.

This module provides stateless helpers for permission checks, duration
formatting, spam notice embeds, and applying the timeout/DM/notice sequence
that follows a spam violation. Nothing here keeps state.
"""

import datetime
from typing import Union

import discord

from strikeguard.configuration.display_settings import DisplaySettings
from strikeguard.datatypes.spam_datatypes import Violation
from strikeguard.util.logger import get_logger

logger = get_logger("discord_utils")

# Discord refuses timeouts longer than 28 days.
MAX_TIMEOUT_MINUTES = 28 * 24 * 60

SPAM_REASON = "Sending messages too quickly (spam)"


def is_ignored_author(author: Union[discord.User, discord.Member]) -> bool:
    """
    Check if an author should be ignored by moderation handlers (bots or non-members).

    Args:
        author (discord.User | discord.Member): The user or member to check.

    Returns:
        bool: True if the author is a bot or not a member, False otherwise.
    """
    return author.bot or not isinstance(author, discord.Member)


def has_elevated_permissions(member: Union[discord.User, discord.Member]) -> bool:
    """
    Check if a member has moderator-level privileges (administrator, manage guild, or moderate members).

    Args:
        member (discord.User | discord.Member): The member to evaluate.

    Returns:
        bool: True if the member has elevated permissions, False otherwise.
    """
    if not isinstance(member, discord.Member):
        return False

    perms = member.guild_permissions
    return any(
        getattr(perms, attr, False)
        for attr in (
            "administrator",
            "manage_guild",
            "moderate_members",
        )
    )


def format_duration(seconds: int) -> str:
    """
    Convert a duration in seconds to a human-readable string.

    Args:
        seconds (int): Duration in seconds.

    Returns:
        str: Human-readable duration string.
    """
    if seconds < 60:
        return f"{seconds} secs"
    elif seconds < 3600:
        mins = seconds // 60
        return f"{mins} min{'s' if mins != 1 else ''}"
    elif seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''}"
    else:
        days = seconds // 86400
        return f"{days} day{'s' if days != 1 else ''}"


def clamp_timeout_minutes(minutes: int) -> int:
    """Limit a penalty to what the Discord API accepts for a timeout."""
    return max(0, min(minutes, MAX_TIMEOUT_MINUTES))


def create_spam_notice_embed(
    user: discord.User | discord.Member,
    violation: Violation,
    duration_minutes: int,
    settings: DisplaySettings,
    bot_user: discord.ClientUser | None = None,
) -> discord.Embed:
    """
    Build the embed used for both the DM and the public spam notice.

    Args:
        user (discord.User | discord.Member): The muted user.
        violation (Violation): The detector verdict being enforced.
        duration_minutes (int): Timeout length actually applied.
        settings (DisplaySettings): Colour and optional thumbnail/footer toggles.
        bot_user (discord.ClientUser | None): Bot user named in the footer when enabled.

    Returns:
        discord.Embed: The constructed embed object.
    """
    duration_label = format_duration(duration_minutes * 60)
    expires = discord.utils.utcnow() + datetime.timedelta(minutes=duration_minutes)

    embed = discord.Embed(
        title="⏱️ Spam Timeout Issued",
        color=discord.Color(settings.color_value()),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    embed.add_field(name="User", value=f"{user.mention} (`{user.id}`)", inline=True)
    embed.add_field(name="Strike", value=str(violation.strikes), inline=True)
    embed.add_field(name="Reason", value=SPAM_REASON, inline=False)
    embed.add_field(
        name="Duration",
        value=f"{duration_label} (Expires: <t:{int(expires.timestamp())}:R>)",
        inline=False,
    )

    avatar = getattr(user, "display_avatar", None)
    if settings.show_icon and avatar is not None:
        embed.set_thumbnail(url=avatar.url)
    if settings.show_creator and bot_user is not None:
        embed.set_footer(text=f"By {bot_user.name}")
    return embed


async def apply_spam_penalty(
    member: discord.Member,
    violation: Violation,
    channel: discord.abc.Messageable | None,
    settings: DisplaySettings,
    bot_user: discord.ClientUser | None = None,
) -> bool:
    """
    Enforce a spam violation: timeout the member, DM them, and post a notice.

    The three steps are independent and best-effort. A failure in one is
    logged and does not stop the others or undo a timeout already applied.

    Args:
        member (discord.Member): The offending member.
        violation (Violation): Verdict carrying strikes and penalty minutes.
        channel (discord.abc.Messageable | None): Where to post the public notice.
        settings (DisplaySettings): Display toggles for the notice embed.
        bot_user (discord.ClientUser | None): Bot user for the embed footer.

    Returns:
        bool: True if the timeout itself was applied, False otherwise.
    """
    duration_minutes = clamp_timeout_minutes(violation.penalty_minutes)
    if duration_minutes != violation.penalty_minutes:
        logger.info(
            "Penalty of %d minutes for %s exceeds the Discord limit; timing out for %d minutes",
            violation.penalty_minutes, member.id, duration_minutes,
        )

    timed_out = False
    try:
        until = discord.utils.utcnow() + datetime.timedelta(minutes=duration_minutes)
        await member.timeout(until, reason=f"StrikeGuard: {SPAM_REASON} (strike {violation.strikes})")
        timed_out = True
        logger.info(
            "Timed out %s (%s) for %d minutes, strike %d",
            member.display_name, member.id, duration_minutes, violation.strikes,
        )
    except discord.Forbidden:
        logger.warning("Missing permission to timeout %s (%s)", member.display_name, member.id)
    except Exception as exc:
        logger.error("Failed to timeout user %s: %s", member.id, exc)

    try:
        embed = create_spam_notice_embed(member, violation, duration_minutes, settings, bot_user)
    except Exception as exc:
        logger.error("Failed to build spam notice embed for %s: %s", member.id, exc)
        return timed_out

    try:
        await member.send(embed=embed)
    except discord.Forbidden:
        logger.debug("Could not DM %s about spam timeout: DMs disabled", member.display_name)
    except Exception as exc:
        logger.debug("Failed to DM user %s about spam timeout: %s", member.id, exc)

    if channel is not None:
        try:
            await channel.send(embed=embed)
        except Exception as exc:
            logger.error("Failed to send spam notice to channel: %s", exc)

    return timed_out
