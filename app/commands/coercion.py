"""Conversion of raw argument text into typed values."""

import math
import re
from typing import Optional

from commands.durations import DurationParser
from commands.entities import EntityRef
from commands.errors import DurationError, TypeCoercionError
from commands.models import ArgumentType, ArgumentValue

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

TRUE_LITERALS = frozenset({"true", "1", "yes", "on"})
FALSE_LITERALS = frozenset({"false", "0", "no", "off"})

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_default_duration_parser = DurationParser()


def parse_bool(value: str) -> Optional[bool]:
    """Return the boolean a literal stands for, or None (case-insensitive)."""
    lowered = value.strip().lower()
    if lowered in TRUE_LITERALS:
        return True
    if lowered in FALSE_LITERALS:
        return False
    return None


def coerce_value(
    value: str,
    arg_type: ArgumentType,
    name: str = "",
    duration_parser: Optional[DurationParser] = None,
) -> ArgumentValue:
    """Coerce raw text to an argument type.

    Coercion is a pure function of its inputs.

    Args:
        value: Raw text to coerce
        arg_type: Target ArgumentType
        name: Argument name (for error reporting)
        duration_parser: Parser for DURATION values; default units if omitted

    Returns:
        Coerced value. REPLY always yields None.

    Raises:
        TypeCoercionError: If the text does not parse as `arg_type`
    """
    if arg_type == ArgumentType.STRING:
        return value
    elif arg_type == ArgumentType.INTEGER:
        if not _INTEGER.fullmatch(value):
            raise TypeCoercionError(name, value, arg_type, "not a base-10 integer")
        number = int(value)
        if not INT_MIN <= number <= INT_MAX:
            raise TypeCoercionError(name, value, arg_type, "out of range")
        return number
    elif arg_type == ArgumentType.FLOAT:
        if not _FLOAT.fullmatch(value):
            raise TypeCoercionError(name, value, arg_type, "not a decimal number")
        number = float(value)
        if not math.isfinite(number):
            raise TypeCoercionError(name, value, arg_type, "out of range")
        return number
    elif arg_type == ArgumentType.BOOLEAN:
        parsed = parse_bool(value)
        if parsed is None:
            raise TypeCoercionError(name, value, arg_type, "use true/false")
        return parsed
    elif arg_type == ArgumentType.ENTITY:
        return EntityRef(value)
    elif arg_type == ArgumentType.REPLY:
        return None
    elif arg_type == ArgumentType.DURATION:
        parser = duration_parser or _default_duration_parser
        try:
            return parser.parse(value)
        except DurationError as e:
            raise TypeCoercionError(name, value, arg_type, str(e)) from e
    raise TypeCoercionError(name, value, arg_type, "unsupported argument type")
