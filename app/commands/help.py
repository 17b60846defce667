"""Usage and help text generated from command definitions."""

from typing import Iterable, List

from commands.models import Argument, ArgumentKind, ArgumentType, Command
from commands.registry import CommandRegistry


def _describe(arg: Argument) -> str:
    if arg.is_reply:
        return "(reply)"
    if arg.kind == ArgumentKind.NAMED:
        if arg.type == ArgumentType.BOOLEAN:
            token = f"-{arg.name}"
        else:
            token = f"-{arg.name} <{arg.type.value}>"
    elif arg.kind == ArgumentKind.REST:
        token = f"{arg.name}..."
    else:
        token = arg.name
    return f"<{token}>" if arg.required and arg.kind != ArgumentKind.NAMED else f"[{token}]"


def format_usage(command: Command, prefix: str = ".") -> str:
    """Usage line for a command.

    The command's own usage string wins; otherwise one is built from the
    argument definitions, e.g. `.ban [user] [-duration <duration>] [reason...]`.
    """
    prefix = command.prefix or prefix
    if command.usage:
        return f"{prefix}{command.usage}"
    parts = [f"{prefix}{command.name}"]
    parts.extend(_describe(arg) for arg in command.args if not arg.is_reply)
    return " ".join(parts)


def generate_help(registries: Iterable[CommandRegistry], prefix: str = ".") -> str:
    """Help text for every visible command, grouped by registry."""
    lines: List[str] = []
    for registry in registries:
        commands = [cmd for cmd in registry.list_commands() if not cmd.hidden]
        if not commands:
            continue

        header = f"*{registry.namespace}*"
        if registry.description:
            header = f"{header} - {registry.description}"
        lines.append(header)

        for cmd in commands:
            lines.append(f"`{format_usage(cmd, prefix)}`")
            if cmd.description:
                lines.append(f"  {cmd.description}")
            if cmd.aliases:
                lines.append(f"  Aliases: {', '.join(cmd.aliases)}")
            for arg in cmd.args:
                if not arg.description:
                    continue
                label = "required" if arg.required else "optional"
                lines.append(f"  `{arg.name}` ({label}) - {arg.description}")
        lines.append("")

    return "\n".join(lines).rstrip()
