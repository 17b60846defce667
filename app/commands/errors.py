"""Errors raised while parsing and reading command arguments.

Every parse failure is an :class:`ArgumentError` carrying structured data
(argument name, cause and kind-specific fields). Nothing here formats
user-facing text; callers translate errors into replies.
"""

from typing import Any, Optional


class SchemaError(ValueError):
    """Invalid list of argument definitions."""

    pass


class DurationError(ValueError):
    """Malformed human-readable duration text."""

    pass


class ArgumentAccessError(TypeError):
    """A typed accessor was used on an argument holding another type."""

    pass


class ArgumentError(Exception):
    """Error that occurred while binding a single argument.

    Attributes:
        argument: Name of the offending argument (or flag)
        message: Immediate cause, without the argument name
    """

    def __init__(self, argument: str, message: str):
        self.argument = argument
        self.message = message
        super().__init__(f"argument '{argument}': {message}")


class UnknownNamedFlagError(ArgumentError):
    """Flag-shaped token that matches no declared named argument."""

    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(flag, "unknown flag")


class MissingFlagValueError(ArgumentError):
    """Non-boolean named argument with nothing after it."""

    def __init__(self, argument: str):
        super().__init__(argument, "flag requires a value")


class TypeCoercionError(ArgumentError):
    """Raw text does not parse as the declared argument type."""

    def __init__(
        self,
        argument: str,
        raw_text: str,
        expected_type: Any,
        reason: Optional[str] = None,
    ):
        self.raw_text = raw_text
        self.expected_type = expected_type
        type_name = getattr(expected_type, "value", expected_type)
        message = f"cannot convert {raw_text!r} to {type_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(argument, message)


class MissingRequiredArgumentError(ArgumentError):
    """Required argument absent from the input with no default.

    Attributes:
        kind: "positional", "named", "rest" or "reply"
    """

    def __init__(self, argument: str, kind: str):
        self.kind = kind
        super().__init__(argument, f"required {kind} argument missing")


class EntityNotFoundError(ArgumentError):
    """Entity reference that the resolver could not find."""

    def __init__(self, raw_text: str, argument: str = ""):
        self.raw_text = raw_text
        super().__init__(argument, f"could not resolve entity: {raw_text}")
