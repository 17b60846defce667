"""Command registry for registration and discovery."""

from typing import Callable, Dict, List, Optional

from core.logging import get_module_logger
from commands.models import Argument, Command

logger = get_module_logger()


class CommandRegistry:
    """A named module of related commands.

    Attributes:
        namespace: Module name (e.g., "user", "misc")
        description: Module description for help listings
        _commands: Dict of registered commands by name

    Example:
        registry = CommandRegistry("user", "User management")

        @registry.command(
            name="ban",
            aliases=["b"],
            description="Ban a user",
            args=[
                Argument("user", type=ArgumentType.ENTITY),
                Argument("duration", type=ArgumentType.DURATION, kind=ArgumentKind.NAMED),
            ],
        )
        def ban(message, args: Arguments):
            ...
    """

    def __init__(self, namespace: str, description: str = ""):
        """Initialize registry.

        Args:
            namespace: Module name
            description: Module description
        """
        self.namespace = namespace
        self.description = description
        self._commands: Dict[str, Command] = {}

    def command(
        self,
        name: str,
        description: str = "",
        args: List[Argument] = None,
        aliases: List[str] = None,
        usage: str = "",
        prefix: str = "",
        hidden: bool = False,
        outgoing: bool = True,
        incoming: bool = False,
    ) -> Callable:
        """Decorator to register a command with handler.

        Args:
            name: Command name
            description: Human-readable description
            args: List of Argument definitions
            aliases: Alternative command names
            usage: Usage string; derived from args when empty
            prefix: Command prefix overriding the dispatcher default
            hidden: Hide from help listings
            outgoing: Respond to the account's own messages
            incoming: Respond to messages from others

        Returns:
            Decorator function that registers the handler
        """

        def decorator(handler: Callable) -> Callable:
            self.add_command(
                Command(
                    name=name,
                    handler=handler,
                    aliases=aliases or [],
                    usage=usage,
                    description=description,
                    prefix=prefix,
                    hidden=hidden,
                    outgoing=outgoing,
                    incoming=incoming,
                    args=args or [],
                )
            )
            return handler

        return decorator

    def add_command(self, command: Command) -> None:
        """Register a command definition.

        Raises:
            ValueError: If the name or an alias is already taken
        """
        for name in command.names:
            if self.get_command(name) is not None:
                raise ValueError(
                    f"Command name '{name}' already registered in {self.namespace}"
                )
        self._commands[command.name] = command
        logger.debug(
            "registered_command",
            namespace=self.namespace,
            name=command.name,
            aliases=command.aliases,
        )

    def get_command(self, name: str) -> Optional[Command]:
        """Get command by name or alias.

        Args:
            name: Command name or alias

        Returns:
            Command object or None if not found
        """
        command = self._commands.get(name)
        if command is not None:
            return command
        for command in self._commands.values():
            if name in command.aliases:
                return command
        return None

    def list_commands(self) -> List[Command]:
        """Get all registered commands in registration order."""
        return list(self._commands.values())
