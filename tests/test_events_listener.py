from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from strikeguard.bot.cogs import events_listener


class FakeStatus:
    online = "online"


class FakeActivityType:
    watching = "watching"


class FakeActivity:
    def __init__(self, *, type, name):
        self.type = type
        self.name = name


class FakeInteractionResponded(Exception):
    pass


@pytest.fixture(autouse=True)
def patch_discord(monkeypatch):
    monkeypatch.setattr(events_listener.discord, "Status", FakeStatus, raising=False)
    monkeypatch.setattr(events_listener.discord, "ActivityType", FakeActivityType, raising=False)
    monkeypatch.setattr(events_listener.discord, "Activity", FakeActivity, raising=False)
    monkeypatch.setattr(events_listener.discord, "InteractionResponded", FakeInteractionResponded, raising=False)
    yield


@pytest.fixture
def fake_bot():
    return SimpleNamespace(
        user=SimpleNamespace(id=999),
        change_presence=AsyncMock(),
        add_cog=MagicMock(),
    )


def test_setup_adds_cog(fake_bot):
    events_listener.setup(fake_bot)

    fake_bot.add_cog.assert_called_once()
    assert isinstance(fake_bot.add_cog.call_args.args[0], events_listener.EventsListenerCog)


@pytest.mark.asyncio
async def test_on_ready_sets_presence(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)

    await cog.on_ready()

    fake_bot.change_presence.assert_awaited_once()
    kwargs = fake_bot.change_presence.await_args.kwargs
    assert kwargs["status"] == FakeStatus.online
    assert kwargs["activity"].type == FakeActivityType.watching
    assert kwargs["activity"].name == events_listener.PRESENCE_TEXT


@pytest.mark.asyncio
async def test_on_ready_without_user_skips_presence(fake_bot):
    fake_bot.user = None
    cog = events_listener.EventsListenerCog(fake_bot)

    await cog.on_ready()

    fake_bot.change_presence.assert_not_awaited()


@pytest.mark.asyncio
async def test_command_error_responds_ephemerally(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)
    ctx = SimpleNamespace(
        command=SimpleNamespace(name="settings"),
        respond=AsyncMock(),
        followup=SimpleNamespace(send=AsyncMock()),
    )

    await cog.on_application_command_error(ctx, RuntimeError("boom"))

    ctx.respond.assert_awaited_once_with("A :bug: showed up while running this command.", ephemeral=True)
    ctx.followup.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_command_error_falls_back_to_followup(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot)
    ctx = SimpleNamespace(
        command=SimpleNamespace(name="settings"),
        respond=AsyncMock(side_effect=FakeInteractionResponded()),
        followup=SimpleNamespace(send=AsyncMock()),
    )

    await cog.on_application_command_error(ctx, RuntimeError("boom"))

    ctx.followup.send.assert_awaited_once_with("A :bug: showed up while running this command.", ephemeral=True)
