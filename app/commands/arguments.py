"""Parsed argument bag handed to command handlers."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Tuple, Type

from commands.durations import Duration
from commands.entities import EntityRef, EntityResolver, resolve_entity
from commands.errors import ArgumentAccessError, ArgumentError
from commands.models import ArgumentValue, ParsedArgument


def _expect(
    parsed: Optional[ParsedArgument],
    expected: Type,
    label: str,
    default: Any,
) -> Any:
    if parsed is None or parsed.value is None:
        return default
    value = parsed.value
    # bool is an int subclass; never hand one out where the other was asked
    if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
        raise ArgumentAccessError(
            f"argument '{parsed.name}' holds {type(value).__name__}, not {label}"
        )
    return value


@dataclass(frozen=True)
class Arguments:
    """Immutable result of one parse.

    Attributes:
        raw: Argument text as given to the parser
        positional: Positional arguments in declaration order
        named: Named arguments by definition name
        rest: Trailing capture; its value is a tuple for variadic definitions
        rest_items: Individual variadic values, empty for a single-string rest
        reply: Reply-context supplied by the caller, if any

    Example:
        args = parser.parse("@spammer -duration 3d", ban_args, reply=None)
        args.get_positional_entity(0)   # "@spammer"
        args.get_duration("duration")   # Duration(days=3)
        args.get_duration("missing")    # None (permanent)
    """

    raw: str = ""
    positional: Tuple[ParsedArgument, ...] = ()
    named: Mapping[str, ParsedArgument] = field(
        default_factory=lambda: MappingProxyType({})
    )
    rest: Optional[ParsedArgument] = None
    rest_items: Tuple[ParsedArgument, ...] = ()
    reply: Any = None

    def __post_init__(self):
        if not isinstance(self.named, MappingProxyType):
            object.__setattr__(self, "named", MappingProxyType(dict(self.named)))

    # Named arguments

    def has(self, name: str) -> bool:
        return name in self.named

    def get(self, name: str, default: Any = None) -> ArgumentValue:
        parsed = self.named.get(name)
        return default if parsed is None else parsed.value

    def get_string(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return _expect(self.named.get(name), str, "string", default)

    def get_int(self, name: str, default: Optional[int] = None) -> Optional[int]:
        return _expect(self.named.get(name), int, "integer", default)

    def get_float(self, name: str, default: Optional[float] = None) -> Optional[float]:
        return _expect(self.named.get(name), float, "float", default)

    def get_bool(self, name: str, default: Optional[bool] = None) -> Optional[bool]:
        return _expect(self.named.get(name), bool, "boolean", default)

    def get_duration(
        self, name: str, default: Optional[Duration] = None
    ) -> Optional[Duration]:
        """Duration value, or `default` (None means permanent) when absent."""
        return _expect(self.named.get(name), Duration, "duration", default)

    def get_entity(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Raw text of a named entity argument."""
        parsed = self.named.get(name)
        if parsed is None:
            return default
        _expect(parsed, EntityRef, "entity", default)
        return parsed.raw_text

    # Positional arguments

    def _positional(self, index: int) -> Optional[ParsedArgument]:
        if 0 <= index < len(self.positional):
            return self.positional[index]
        return None

    def get_positional(self, index: int, default: Any = None) -> ArgumentValue:
        parsed = self._positional(index)
        return default if parsed is None or parsed.value is None else parsed.value

    def get_positional_string(
        self, index: int, default: Optional[str] = None
    ) -> Optional[str]:
        return _expect(self._positional(index), str, "string", default)

    def get_positional_int(
        self, index: int, default: Optional[int] = None
    ) -> Optional[int]:
        return _expect(self._positional(index), int, "integer", default)

    def get_positional_float(
        self, index: int, default: Optional[float] = None
    ) -> Optional[float]:
        return _expect(self._positional(index), float, "float", default)

    def get_positional_bool(
        self, index: int, default: Optional[bool] = None
    ) -> Optional[bool]:
        return _expect(self._positional(index), bool, "boolean", default)

    def get_positional_duration(
        self, index: int, default: Optional[Duration] = None
    ) -> Optional[Duration]:
        return _expect(self._positional(index), Duration, "duration", default)

    def get_positional_entity(
        self, index: int, default: Optional[str] = None
    ) -> Optional[str]:
        parsed = self._positional(index)
        if parsed is None:
            return default
        _expect(parsed, EntityRef, "entity", default)
        return parsed.raw_text

    # Rest

    def get_rest(self, default: Optional[str] = None) -> Optional[str]:
        """Raw trailing text (variadic items joined by a space)."""
        return default if self.rest is None else self.rest.raw_text

    def get_rest_values(self) -> Tuple[ArgumentValue, ...]:
        """Coerced rest values in order; a single-string rest yields one item."""
        if self.rest is None:
            return ()
        if self.rest_items:
            return tuple(item.value for item in self.rest_items)
        return (self.rest.value,)

    # Entity resolution, on demand only

    def resolve_entity(self, name: str, resolver: EntityResolver) -> Any:
        raw = self.get_entity(name)
        if not raw:
            raise ArgumentError(name, "entity argument not provided")
        return resolve_entity(raw, resolver, argument=name)

    def resolve_positional_entity(self, index: int, resolver: EntityResolver) -> Any:
        raw = self.get_positional_entity(index)
        if not raw:
            raise ArgumentError(str(index), "entity argument not provided")
        parsed = self.positional[index]
        return resolve_entity(raw, resolver, argument=parsed.name)

    def resolve_rest_entity(self, resolver: EntityResolver) -> Any:
        """Resolve the whole trailing text as one entity; None without rest."""
        if self.rest is None:
            return None
        return resolve_entity(self.rest.raw_text, resolver, argument=self.rest.name)

    def resolve_rest_entities(self, resolver: EntityResolver) -> List[Any]:
        """Resolve every variadic item, in order."""
        return [
            resolve_entity(item.raw_text, resolver, argument=item.name)
            for item in self.rest_items
        ]
