"""Command argument parsing and binding."""

import re
from typing import Any, Dict, List, Optional, Sequence

from core.logging import get_module_logger
from commands.arguments import Arguments
from commands.coercion import coerce_value, parse_bool
from commands.durations import DurationParser
from commands.errors import (
    ArgumentError,
    MissingFlagValueError,
    MissingRequiredArgumentError,
    UnknownNamedFlagError,
)
from commands.models import (
    Argument,
    ArgumentKind,
    ArgumentType,
    Command,
    ParsedArgument,
    validate_schema,
)
from commands.tokenizer import Token, Tokenizer

logger = get_module_logger()

# Flag-shaped tokens that are really numbers ("-5", "-1.5e3")
_NUMERIC_FLAG_NAME = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class CommandParser:
    """Bind free-form command text to argument definitions in one pass.

    Handles:
    - Positional arguments, bound strictly in declaration order
    - Named flags (-flag value, -flag=value), boolean flags by presence
    - Quoted values with backslash escapes
    - A trailing rest capture, as one string or as typed variadic values
    - Reply-context binding, defaults and required-argument validation

    The parser keeps no state between calls; one instance can be shared by
    any number of callers.

    Args:
        inline_bool_values: Let a boolean flag consume a following true/false
            literal (`-silent false`). Off means presence-only flags.
        strict_flags: Raise UnknownNamedFlagError for undeclared flags instead
            of reading them as values. Negative numbers are never flags.
        duration_parser: Parser for DURATION arguments

    Example:
        parser = CommandParser()

        args = parser.parse(
            'pos1 -flag1 "a value" pos2 tail text',
            [
                Argument("first"),
                Argument("flag1", kind=ArgumentKind.NAMED),
                Argument("second"),
                Argument("tail", kind=ArgumentKind.REST),
            ],
        )
        # args.get_positional_string(0) == "pos1"
        # args.get_string("flag1") == "a value"
        # args.get_rest() == "tail text"
    """

    def __init__(
        self,
        inline_bool_values: bool = False,
        strict_flags: bool = False,
        duration_parser: Optional[DurationParser] = None,
    ):
        self.inline_bool_values = inline_bool_values
        self.strict_flags = strict_flags
        self.duration_parser = duration_parser or DurationParser()

    @classmethod
    def from_settings(cls, commands_settings) -> "CommandParser":
        """Build a parser from CommandsSettings."""
        return cls(
            inline_bool_values=commands_settings.inline_bool_values,
            strict_flags=commands_settings.strict_flags,
            duration_parser=DurationParser(commands_settings.duration_units),
        )

    def parse_command(
        self, command: Command, text: str, reply: Any = None
    ) -> Arguments:
        """Parse argument text for a command definition."""
        return self.parse(text, command.args, reply=reply)

    def parse(
        self,
        text: str,
        definitions: Sequence[Argument],
        reply: Any = None,
    ) -> Arguments:
        """Parse argument text.

        Args:
            text: Everything after the command name
            definitions: Argument definitions in declaration order
            reply: Opaque reply-context, present when the command message
                was itself a reply

        Returns:
            Arguments bag

        Raises:
            SchemaError: If the definitions are invalid
            ArgumentError: On the first binding failure; no partial result
        """
        validate_schema(definitions)

        try:
            return _Binding(self, text, definitions, reply).run()
        except ArgumentError as e:
            logger.warning(
                "command_parse_error",
                argument=e.argument,
                error_type=type(e).__name__,
                raw_text=text,
                error=str(e),
            )
            raise

    def coerce(self, value: str, definition: Argument) -> Any:
        return coerce_value(
            value,
            definition.type,
            name=definition.name,
            duration_parser=self.duration_parser,
        )


class _Binding:
    """State of a single parse."""

    def __init__(
        self,
        parser: CommandParser,
        text: str,
        definitions: Sequence[Argument],
        reply: Any,
    ):
        self.parser = parser
        self.text = text
        self.reply = reply
        self.tokens = Tokenizer(text)

        self.positional_defs: List[Argument] = []
        self.named_defs: Dict[str, Argument] = {}
        self.rest_def: Optional[Argument] = None
        self.reply_defs: List[Argument] = []
        for definition in definitions:
            if definition.is_reply:
                self.reply_defs.append(definition)
            elif definition.kind == ArgumentKind.POSITIONAL:
                self.positional_defs.append(definition)
            elif definition.kind == ArgumentKind.NAMED:
                self.named_defs[definition.name] = definition
            else:
                self.rest_def = definition

        self.positional: List[ParsedArgument] = []
        self.named: Dict[str, ParsedArgument] = {}
        self.rest: Optional[ParsedArgument] = None
        self.rest_items: List[ParsedArgument] = []

    def run(self) -> Arguments:
        self._scan()
        self._apply_defaults()
        self._check_reply()

        if self.rest_items:
            self.rest = ParsedArgument(
                name=self.rest_def.name,
                value=tuple(item.value for item in self.rest_items),
                raw_text=" ".join(item.raw_text for item in self.rest_items),
            )

        return Arguments(
            raw=self.text,
            positional=tuple(self.positional),
            named=self.named,
            rest=self.rest,
            rest_items=tuple(self.rest_items),
            reply=self.reply,
        )

    def _scan(self) -> None:
        tokens = self.tokens
        while True:
            tokens.skip_whitespace()
            if tokens.exhausted:
                return

            flag = tokens.peek_flag()
            if flag is not None:
                definition = self.named_defs.get(flag.text)
                if definition is not None:
                    tokens.advance(flag)
                    self._bind_flag(definition)
                    continue
                self._check_unknown_flag(flag)
                # not ours: read the same position again as a value

            if len(self.positional) < len(self.positional_defs):
                definition = self.positional_defs[len(self.positional)]
                self.positional.append(self._bind(definition, tokens.read_value()))
                continue

            if self.rest_def is None:
                logger.debug(
                    "trailing_input_discarded", discarded=tokens.remainder()
                )
                return

            if not self.rest_def.collects_multiple:
                remainder = tokens.remainder().strip()
                if remainder:
                    self.rest = self._bind_text(self.rest_def, remainder)
                return

            self.rest_items.append(self._bind(self.rest_def, tokens.read_value()))

    def _bind_flag(self, definition: Argument) -> None:
        tokens = self.tokens
        if definition.type == ArgumentType.BOOLEAN:
            value = True
            if self.parser.inline_bool_values:
                tokens.skip_whitespace()
                candidate = tokens.peek_value()
                inline = parse_bool(candidate.text) if candidate else None
                if inline is not None:
                    tokens.advance(candidate)
                    value = inline
            self.named[definition.name] = ParsedArgument(
                name=definition.name,
                value=value,
                raw_text="true" if value else "false",
            )
            return

        tokens.skip_whitespace()
        token = tokens.read_value()
        if token is None:
            raise MissingFlagValueError(definition.name)
        self.named[definition.name] = self._bind(definition, token)

    def _check_unknown_flag(self, flag: Token) -> None:
        if not self.parser.strict_flags:
            return
        if flag.text and not _NUMERIC_FLAG_NAME.fullmatch(flag.text):
            raise UnknownNamedFlagError(flag.text)

    def _bind(self, definition: Argument, token: Token) -> ParsedArgument:
        return self._bind_text(definition, token.text)

    def _bind_text(self, definition: Argument, raw: str) -> ParsedArgument:
        return ParsedArgument(
            name=definition.name,
            value=self.parser.coerce(raw, definition),
            raw_text=raw,
        )

    def _default(self, definition: Argument) -> ParsedArgument:
        default = definition.default
        if isinstance(default, str) and definition.type != ArgumentType.STRING:
            return self._bind_text(definition, default)
        return ParsedArgument(name=definition.name, value=default, raw_text=str(default))

    def _apply_defaults(self) -> None:
        # Unfilled positional slots are always a suffix of the declaration
        # list. Defaults are bound only while they keep indexes aligned.
        contiguous = True
        for definition in self.positional_defs[len(self.positional) :]:
            if definition.default is not None:
                if contiguous:
                    self.positional.append(self._default(definition))
                continue
            if definition.required:
                raise MissingRequiredArgumentError(definition.name, "positional")
            contiguous = False

        for name, definition in self.named_defs.items():
            if name in self.named:
                continue
            if definition.default is not None:
                self.named[name] = self._default(definition)
            elif definition.required:
                raise MissingRequiredArgumentError(name, "named")

        definition = self.rest_def
        if definition is not None and self.rest is None and not self.rest_items:
            if definition.default is not None:
                self._apply_rest_default(definition)
            elif definition.required:
                raise MissingRequiredArgumentError(definition.name, "rest")

    def _apply_rest_default(self, definition: Argument) -> None:
        default = definition.default
        if definition.collects_multiple and isinstance(default, (list, tuple)):
            self.rest_items = [
                ParsedArgument(name=definition.name, value=item, raw_text=str(item))
                for item in default
            ]
            return
        self.rest = ParsedArgument(
            name=definition.name, value=default, raw_text=str(default)
        )

    def _check_reply(self) -> None:
        if self.reply is not None:
            return
        for definition in self.reply_defs:
            if definition.required:
                raise MissingRequiredArgumentError(definition.name, "reply")


def parse_arguments(
    text: str,
    definitions: Sequence[Argument],
    reply: Any = None,
    **options: Any,
) -> Arguments:
    """Parse `text` with a one-off CommandParser built from `options`."""
    return CommandParser(**options).parse(text, definitions, reply=reply)
