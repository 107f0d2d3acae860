"""Session and introspection commands."""

from __future__ import annotations

from ..common import CommandContext, ExitRequest, encode_text
from ..registry import COMMAND_REGISTRY


@COMMAND_REGISTRY.command("pwd", description="Print working directory")
def pwd(ctx: CommandContext, _: list[str]) -> int:
    ctx.stdout.write(encode_text(f"{ctx.cwd}\n"))
    return 0


@COMMAND_REGISTRY.command("exit", description="Leave the shell")
def exit_(ctx: CommandContext, args: list[str]) -> ExitRequest:
    if not args:
        return ExitRequest(0)
    try:
        status = int(args[0])
    except ValueError:
        ctx.error(f"{args[0]}: numeric argument required")
        return ExitRequest(0)
    return ExitRequest(status & 0xFF)


@COMMAND_REGISTRY.command("help", description="Show available commands")
def help(ctx: CommandContext, _: list[str]) -> int:  # noqa: A001
    registry = ctx.registry or COMMAND_REGISTRY
    lines = ["Available commands:"]
    for name in registry.names():
        desc = registry.describe(name)
        if desc:
            lines.append(f"  {name} - {desc}")
        else:
            lines.append(f"  {name}")
    lines.append("Any other name runs a program found on PATH.")
    ctx.stdout.write(encode_text("\n".join(lines) + "\n"))
    return 0
