"""Replies with the gateway latency."""

import math

name = "ping"
description = "Check that the bot is alive"
usage = "ping"


async def execute(message, args, client, config):
    latency = client.latency
    # discord.py reports nan before the first heartbeat
    latency_ms = 0 if math.isnan(latency) else round(latency * 1000)
    await message.reply(f"Pong! 🏓 ({latency_ms} ms)")
