"""Command framework for chat-bot commands typed as free-form text.

This framework provides:
- CommandParser: Bind command text to typed argument definitions
- Arguments: Immutable, typed result handed to handlers
- CommandRegistry: Group commands into modules
- CommandDispatcher: Match messages to commands and run handlers

Example:
    from commands import (
        Argument, ArgumentKind, ArgumentType, CommandDispatcher, CommandRegistry
    )

    registry = CommandRegistry("user")

    @registry.command(
        name="mute",
        args=[
            Argument("user", type=ArgumentType.ENTITY),
            Argument("duration", type=ArgumentType.DURATION, kind=ArgumentKind.NAMED),
            Argument("reply", type=ArgumentType.REPLY),
        ],
    )
    def mute(message, args):
        duration = args.get_duration("duration")  # None means permanent
        ...

    dispatcher = CommandDispatcher(prefix=".")
    dispatcher.add_registry(registry)
    dispatcher.dispatch(message)
"""

from commands.models import (
    Argument,
    ArgumentKind,
    ArgumentType,
    ArgumentValue,
    Command,
    ParsedArgument,
    validate_schema,
)
from commands.errors import (
    ArgumentAccessError,
    ArgumentError,
    DurationError,
    EntityNotFoundError,
    MissingFlagValueError,
    MissingRequiredArgumentError,
    SchemaError,
    TypeCoercionError,
    UnknownNamedFlagError,
)
from commands.durations import Duration, DurationParser, parse_duration
from commands.entities import EntityRef, EntityResolver, resolve_entity
from commands.arguments import Arguments
from commands.coercion import coerce_value
from commands.tokenizer import Token, TokenKind, Tokenizer
from commands.parser import CommandParser, parse_arguments
from commands.registry import CommandRegistry
from commands.dispatcher import CommandDispatcher, IncomingMessage
from commands.help import format_usage, generate_help

__all__ = [
    # Models
    "Argument",
    "ArgumentKind",
    "ArgumentType",
    "ArgumentValue",
    "Command",
    "ParsedArgument",
    "validate_schema",
    # Errors
    "ArgumentAccessError",
    "ArgumentError",
    "DurationError",
    "EntityNotFoundError",
    "MissingFlagValueError",
    "MissingRequiredArgumentError",
    "SchemaError",
    "TypeCoercionError",
    "UnknownNamedFlagError",
    # Values
    "Duration",
    "DurationParser",
    "parse_duration",
    "EntityRef",
    "EntityResolver",
    "resolve_entity",
    # Parsing
    "Arguments",
    "coerce_value",
    "Token",
    "TokenKind",
    "Tokenizer",
    "CommandParser",
    "parse_arguments",
    # Framework
    "CommandRegistry",
    "CommandDispatcher",
    "IncomingMessage",
    "format_usage",
    "generate_help",
]
