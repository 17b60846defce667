"""Route chat messages to registered commands."""

from typing import Any, List, Optional, Protocol, Tuple

from core.logging import get_module_logger
from commands.errors import ArgumentError
from commands.models import Command
from commands.parser import CommandParser
from commands.registry import CommandRegistry

logger = get_module_logger()


class IncomingMessage(Protocol):
    """The parts of a chat message the dispatcher reads.

    Attributes:
        text: Message text
        out: True when the message was sent by the account itself
        reply_to: The message this one replies to, or None
    """

    text: str
    out: bool
    reply_to: Any


class CommandDispatcher:
    """Match messages against registered commands and invoke handlers.

    A command matches when the message text starts with its prefix followed
    by its name or an alias, and the name is followed by a space or the end
    of the text. Handlers are called as handler(message, arguments).

    Args:
        prefix: Default prefix for commands that do not set one
        parser: CommandParser shared by all commands

    Example:
        dispatcher = CommandDispatcher.from_settings(settings.commands)
        dispatcher.add_registry(user_registry)
        dispatcher.dispatch(message)
    """

    def __init__(self, prefix: str = ".", parser: Optional[CommandParser] = None):
        self.prefix = prefix
        self.parser = parser or CommandParser()
        self._registries: List[CommandRegistry] = []

    @classmethod
    def from_settings(cls, commands_settings) -> "CommandDispatcher":
        return cls(
            prefix=commands_settings.prefix,
            parser=CommandParser.from_settings(commands_settings),
        )

    @property
    def registries(self) -> List[CommandRegistry]:
        return list(self._registries)

    def add_registry(self, registry: CommandRegistry) -> None:
        self._registries.append(registry)

    def commands(self) -> List[Command]:
        return [
            command
            for registry in self._registries
            for command in registry.list_commands()
        ]

    def match(self, message: IncomingMessage) -> Optional[Tuple[Command, str]]:
        """Find the command a message invokes.

        Returns:
            (command, argument text) or None when no command matches
        """
        text = message.text or ""
        for command in self.commands():
            if command.handler is None:
                continue
            if message.out and not command.outgoing:
                continue
            if not message.out and not command.incoming:
                continue

            prefix = command.prefix or self.prefix
            for name in command.names:
                invocation = prefix + name
                if not text.startswith(invocation):
                    continue
                if len(text) > len(invocation) and text[len(invocation)] != " ":
                    continue
                return command, text[len(invocation) :].strip()
        return None

    def dispatch(self, message: IncomingMessage) -> Any:
        """Parse and run the command a message invokes.

        Returns:
            The handler's return value, or None when nothing matched

        Raises:
            ArgumentError: If the argument text does not fit the command
        """
        found = self.match(message)
        if found is None:
            return None
        command, text = found

        try:
            arguments = self.parser.parse_command(
                command, text, reply=getattr(message, "reply_to", None)
            )
        except ArgumentError as e:
            logger.warning(
                "command_dispatch_failed",
                command=command.name,
                argument=e.argument,
                error=str(e),
            )
            raise

        logger.info("command_dispatched", command=command.name)
        return command.handler(message, arguments)
