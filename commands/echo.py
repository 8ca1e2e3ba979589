"""Repeats the caller's words back to them."""

name = "echo"
aliases = ["say"]
description = "Repeats your words"
usage = "echo <text>"


async def execute(message, args, client, config):
    if not args:
        await message.reply(f"Usage: {config.prefix}{usage}")
        return
    await message.reply(" ".join(args))
