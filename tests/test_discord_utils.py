"""Tests for discord_utils helpers and the spam penalty sequence."""

import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from strikeguard.configuration.display_settings import DisplaySettings
from strikeguard.datatypes.spam_datatypes import Violation
from strikeguard.util import discord_utils
from strikeguard.util.discord_utils import (
    MAX_TIMEOUT_MINUTES,
    apply_spam_penalty,
    clamp_timeout_minutes,
    create_spam_notice_embed,
    format_duration,
    has_elevated_permissions,
    is_ignored_author,
)


def http_error(cls, status: int, reason: str):
    response = MagicMock()
    response.status = status
    response.reason = reason
    return cls(response, "error")


def make_member(**permissions) -> MagicMock:
    member = MagicMock(spec=discord.Member)
    member.bot = False
    member.id = 1234
    member.display_name = "spammer"
    member.mention = "<@1234>"
    member.display_avatar = SimpleNamespace(url="https://cdn.example/avatar.png")
    member.guild_permissions = SimpleNamespace(
        administrator=permissions.get("administrator", False),
        manage_guild=permissions.get("manage_guild", False),
        moderate_members=permissions.get("moderate_members", False),
    )
    member.timeout = AsyncMock()
    member.send = AsyncMock()
    return member


@pytest.fixture()
def member() -> MagicMock:
    return make_member()


@pytest.fixture()
def channel() -> SimpleNamespace:
    return SimpleNamespace(send=AsyncMock())


BOT_USER = SimpleNamespace(name="StrikeGuard")


class TestAuthorChecks:
    def test_member_is_not_ignored(self, member):
        assert is_ignored_author(member) is False

    def test_bot_is_ignored(self, member):
        member.bot = True
        assert is_ignored_author(member) is True

    def test_plain_user_is_ignored(self):
        assert is_ignored_author(SimpleNamespace(bot=False)) is True

    @pytest.mark.parametrize("permission", ["administrator", "manage_guild", "moderate_members"])
    def test_elevated_permissions(self, permission):
        assert has_elevated_permissions(make_member(**{permission: True})) is True

    def test_regular_member_not_elevated(self, member):
        assert has_elevated_permissions(member) is False

    def test_non_member_not_elevated(self):
        assert has_elevated_permissions(SimpleNamespace(guild_permissions=None)) is False


class TestFormatting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (30, "30 secs"),
            (60, "1 min"),
            (300, "5 mins"),
            (3600, "1 hour"),
            (7200, "2 hours"),
            (86400, "1 day"),
            (28 * 86400, "28 days"),
        ],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_clamp_timeout_minutes(self):
        assert clamp_timeout_minutes(5) == 5
        assert clamp_timeout_minutes(MAX_TIMEOUT_MINUTES * 4) == MAX_TIMEOUT_MINUTES


class TestNoticeEmbed:
    def test_embed_uses_display_settings(self, member):
        settings = DisplaySettings(color="#00bfff", show_creator=True, show_icon=True)

        embed = create_spam_notice_embed(member, Violation(2, 10), 10, settings, BOT_USER)

        assert embed.color.value == 0x00BFFF
        payload = embed.to_dict()
        assert payload["thumbnail"]["url"] == "https://cdn.example/avatar.png"
        assert payload["footer"]["text"] == "By StrikeGuard"
        fields = {field.name: field.value for field in embed.fields}
        assert fields["Strike"] == "2"
        assert fields["Duration"].startswith("10 mins")
        assert "<@1234>" in fields["User"]

    def test_embed_hides_icon_and_creator(self, member):
        settings = DisplaySettings(show_creator=False, show_icon=False)

        embed = create_spam_notice_embed(member, Violation(1, 5), 5, settings, BOT_USER)

        payload = embed.to_dict()
        assert "thumbnail" not in payload
        assert "footer" not in payload


class TestApplySpamPenalty:
    @pytest.mark.asyncio
    async def test_success_runs_all_steps(self, member, channel):
        result = await apply_spam_penalty(member, Violation(1, 5), channel, DisplaySettings(), BOT_USER)

        assert result is True
        member.timeout.assert_awaited_once()
        until = member.timeout.await_args.args[0]
        remaining = until - discord.utils.utcnow()
        assert datetime.timedelta(minutes=4) < remaining <= datetime.timedelta(minutes=5)
        member.send.assert_awaited_once()
        channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout_forbidden_still_notifies(self, member, channel):
        member.timeout.side_effect = http_error(discord.Forbidden, 403, "Forbidden")

        result = await apply_spam_penalty(member, Violation(1, 5), channel, DisplaySettings())

        assert result is False
        member.send.assert_awaited_once()
        channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dm_disabled_still_posts_notice(self, member, channel):
        member.send.side_effect = http_error(discord.Forbidden, 403, "Forbidden")

        result = await apply_spam_penalty(member, Violation(1, 5), channel, DisplaySettings())

        assert result is True
        channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_notice_failure_is_swallowed(self, member, channel):
        channel.send.side_effect = RuntimeError("channel gone")

        result = await apply_spam_penalty(member, Violation(1, 5), channel, DisplaySettings())

        assert result is True
        member.timeout.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_channel_skips_notice(self, member):
        result = await apply_spam_penalty(member, Violation(1, 5), None, DisplaySettings())

        assert result is True
        member.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_penalty_clamped_to_platform_limit(self, member, channel, monkeypatch):
        captured = {}
        original = discord_utils.create_spam_notice_embed

        def spy(user, violation, duration_minutes, settings, bot_user=None):
            captured["duration"] = duration_minutes
            return original(user, violation, duration_minutes, settings, bot_user)

        monkeypatch.setattr(discord_utils, "create_spam_notice_embed", spy)

        await apply_spam_penalty(member, Violation(20, 5 * 2 ** 19), channel, DisplaySettings())

        assert captured["duration"] == MAX_TIMEOUT_MINUTES
        until = member.timeout.await_args.args[0]
        assert until - discord.utils.utcnow() <= datetime.timedelta(days=28)
