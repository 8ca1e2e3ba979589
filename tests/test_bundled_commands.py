"""Tests for the example command modules shipped in commands/."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from cybernaut.command_loader import build_registry

COMMANDS_DIR = Path(__file__).parent.parent / "commands"


@pytest.fixture
def registry():
    return build_registry(COMMANDS_DIR)


@pytest.fixture
def client(registry):
    return SimpleNamespace(registry=registry, latency=0.042)


@pytest.fixture
def config():
    return SimpleNamespace(prefix="!", ignore_bots=True)


def _message():
    message = MagicMock()
    message.reply = AsyncMock()
    return message


@pytest.mark.asyncio
async def test_ping_reports_latency(registry, client, config):
    message = _message()
    await registry.resolve("ping").execute(message, [], client, config)
    message.reply.assert_awaited_once_with("Pong! 🏓 (42 ms)")


@pytest.mark.asyncio
async def test_ping_before_first_heartbeat(registry, config):
    message = _message()
    client = SimpleNamespace(latency=float("nan"))
    await registry.resolve("ping").execute(message, [], client, config)
    assert "(0 ms)" in message.reply.await_args.args[0]


@pytest.mark.asyncio
async def test_echo_repeats_args(registry, client, config):
    message = _message()
    await registry.resolve("say").execute(message, ["hello", "there"], client, config)
    message.reply.assert_awaited_once_with("hello there")


@pytest.mark.asyncio
async def test_echo_without_args_shows_usage(registry, client, config):
    message = _message()
    await registry.resolve("echo").execute(message, [], client, config)
    message.reply.assert_awaited_once_with("Usage: !echo <text>")


@pytest.mark.asyncio
async def test_help_lists_all_commands(registry, client, config):
    message = _message()
    await registry.resolve("help").execute(message, [], client, config)
    text = message.reply.await_args.args[0]
    for name in ("!ping", "!echo (say)", "!help (commands)"):
        assert name in text


@pytest.mark.asyncio
async def test_help_for_single_command(registry, client, config):
    message = _message()
    await registry.resolve("commands").execute(message, ["say"], client, config)
    text = message.reply.await_args.args[0]
    assert text.startswith("**!echo**")
    assert "Usage: `!echo <text>`" in text


@pytest.mark.asyncio
async def test_help_for_unknown_command(registry, client, config):
    message = _message()
    await registry.resolve("help").execute(message, ["nope"], client, config)
    message.reply.assert_awaited_once_with("No command named `nope`.")
