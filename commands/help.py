"""Lists every loaded command, or details for one."""

name = "help"
aliases = ["commands"]
description = "List available commands"
usage = "help [command]"


async def execute(message, args, client, config):
    registry = client.registry
    prefix = config.prefix

    if args:
        command = registry.resolve(args[0])
        if command is None:
            await message.reply(f"No command named `{args[0]}`.")
            return
        lines = [f"**{prefix}{command.name}**"]
        if command.description:
            lines.append(command.description)
        if command.aliases:
            lines.append("Aliases: " + ", ".join(f"`{a}`" for a in command.aliases))
        if command.usage:
            lines.append(f"Usage: `{prefix}{command.usage}`")
        await message.reply("\n".join(lines))
        return

    lines = ["**Commands**"]
    lines.extend(f"• {line}" for line in registry.help_lines(prefix))
    await message.reply("\n".join(lines))
