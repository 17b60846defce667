"""Command framework data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from commands.durations import Duration
from commands.entities import EntityRef
from commands.errors import SchemaError

# Every value a bound argument can hold. Tuples only appear on variadic Rest.
ArgumentValue = Union[str, int, float, bool, Duration, EntityRef, Tuple[Any, ...], None]


class ArgumentType(Enum):
    """Supported argument types."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ENTITY = "entity"
    REPLY = "reply"
    DURATION = "duration"


class ArgumentKind(Enum):
    """How an argument is located in the command text."""

    POSITIONAL = "positional"
    NAMED = "named"
    REST = "rest"


@dataclass(frozen=True)
class Argument:
    """Command argument definition.

    Attributes:
        name: Argument name; for named arguments this is the flag without
            its leading "-"
        type: ArgumentType for coercion
        kind: ArgumentKind; ignored for REPLY arguments
        required: Whether the argument must be supplied
        default: Value bound when the argument is not supplied
        description: Human-readable description
        collects_multiple: For REST arguments, collect each remaining token as
            a separately coerced value instead of one trailing string

    Examples:
        Positional: Argument("user", type=ArgumentType.ENTITY)
        Flag: Argument("silent", type=ArgumentType.BOOLEAN, kind=ArgumentKind.NAMED)
        Trailing text: Argument("reason", kind=ArgumentKind.REST)
        Reply: Argument("reply", type=ArgumentType.REPLY)
    """

    name: str
    type: ArgumentType = ArgumentType.STRING
    kind: ArgumentKind = ArgumentKind.POSITIONAL
    required: bool = False
    default: Any = None
    description: str = ""
    collects_multiple: bool = False

    def __post_init__(self):
        """Validate argument configuration."""
        if not self.name:
            raise SchemaError("Argument name cannot be empty")
        if self.kind == ArgumentKind.NAMED and self.name.startswith("-"):
            raise SchemaError(
                f"Named argument names are declared without '-': {self.name}"
            )
        if self.collects_multiple and self.kind != ArgumentKind.REST:
            raise SchemaError(
                f"Only rest arguments can collect multiple values: {self.name}"
            )

    @property
    def is_reply(self) -> bool:
        return self.type == ArgumentType.REPLY

    @property
    def kind_label(self) -> str:
        return "reply" if self.is_reply else self.kind.value


def validate_schema(args: Sequence[Argument]) -> None:
    """Check a list of definitions can be bound unambiguously.

    Raises:
        SchemaError: On more than one REST definition or duplicate names
            within the same kind
    """
    rest = [arg.name for arg in args if arg.kind == ArgumentKind.REST and not arg.is_reply]
    if len(rest) > 1:
        raise SchemaError(f"At most one rest argument allowed, got: {', '.join(rest)}")

    seen = set()
    for arg in args:
        key = (arg.kind_label, arg.name)
        if key in seen:
            raise SchemaError(f"Duplicate {arg.kind_label} argument: {arg.name}")
        seen.add(key)


@dataclass(frozen=True)
class ParsedArgument:
    """A bound argument.

    Attributes:
        name: Definition name
        value: Coerced value
        raw_text: Text before coercion (decoded for quoted values)
    """

    name: str
    value: ArgumentValue
    raw_text: str


@dataclass
class Command:
    """Command definition.

    Attributes:
        name: Command name without prefix (e.g. "ban")
        handler: Callable invoked as handler(message, arguments)
        aliases: Alternative names (e.g. ["b"])
        usage: Short usage string; derived from args when empty
        description: Human-readable description
        prefix: Command prefix; the dispatcher default is used when empty
        hidden: Hide from help listings
        outgoing: Respond to messages sent by the account itself
        incoming: Respond to messages sent by others
        args: List of Argument definitions

    Example:
        Command(
            name="ban",
            handler=ban_user,
            args=[
                Argument("user", type=ArgumentType.ENTITY),
                Argument("duration", type=ArgumentType.DURATION, kind=ArgumentKind.NAMED),
                Argument("reply", type=ArgumentType.REPLY),
            ],
        )
    """

    name: str
    handler: Optional[Callable] = None
    aliases: List[str] = field(default_factory=list)
    usage: str = ""
    description: str = ""
    prefix: str = ""
    hidden: bool = False
    outgoing: bool = True
    incoming: bool = False
    args: List[Argument] = field(default_factory=list)

    def __post_init__(self):
        validate_schema(self.args)

    @property
    def names(self) -> List[str]:
        """Name followed by aliases."""
        return [self.name, *self.aliases]

    def get_positional_args(self) -> List[Argument]:
        return [
            arg
            for arg in self.args
            if arg.kind == ArgumentKind.POSITIONAL and not arg.is_reply
        ]

    def get_named_args(self) -> List[Argument]:
        return [
            arg for arg in self.args if arg.kind == ArgumentKind.NAMED and not arg.is_reply
        ]

    def get_rest_arg(self) -> Optional[Argument]:
        for arg in self.args:
            if arg.kind == ArgumentKind.REST and not arg.is_reply:
                return arg
        return None
