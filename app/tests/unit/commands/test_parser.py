"""Unit tests for CommandParser."""

import pytest
from commands.durations import Duration
from commands.entities import EntityRef
from commands.errors import (
    MissingFlagValueError,
    MissingRequiredArgumentError,
    SchemaError,
    TypeCoercionError,
    UnknownNamedFlagError,
)
from commands.models import ArgumentKind, ArgumentType
from commands.parser import CommandParser, parse_arguments

NAMED = ArgumentKind.NAMED
REST = ArgumentKind.REST


class TestCommandParserPositional:
    """Tests for parsing positional arguments."""

    def test_parse_multiple_positional_arguments(
        self, command_parser, argument_factory
    ):
        """Parser binds positionals left to right."""
        args = [argument_factory(name="first"), argument_factory(name="second")]

        result = command_parser.parse("arg1 arg2", args)

        assert len(result.positional) == 2
        assert result.get_positional_string(0) == "arg1"
        assert result.get_positional_string(1) == "arg2"
        assert result.positional[0].name == "first"

    def test_positionals_bind_in_declaration_order_not_by_type(
        self, command_parser, argument_factory
    ):
        """A value is never moved to a later slot that fits its type better."""
        args = [
            argument_factory(name="count", arg_type=ArgumentType.INTEGER),
            argument_factory(name="label"),
        ]

        with pytest.raises(TypeCoercionError) as exc_info:
            command_parser.parse("abc 42", args)

        assert exc_info.value.argument == "count"

    def test_extra_trailing_words_are_discarded(self, command_parser, argument_factory):
        """Without a rest slot, words past the last positional are ignored."""
        args = [argument_factory(name="only")]

        result = command_parser.parse("a b c", args)

        assert result.get_positional_string(0) == "a"
        assert result.rest is None
        assert result.raw == "a b c"

    def test_dash_inside_word_is_positional(self, command_parser, argument_factory):
        """foo-bar is a plain value."""
        args = [argument_factory(name="word")]

        result = command_parser.parse("foo-bar", args)

        assert result.get_positional_string(0) == "foo-bar"

    def test_negative_number_is_positional(self, command_parser, argument_factory):
        """An undeclared flag-shaped token is re-read as a value."""
        args = [argument_factory(name="delta", arg_type=ArgumentType.INTEGER)]

        result = command_parser.parse("-5", args)

        assert result.get_positional_int(0) == -5

    def test_undeclared_flag_becomes_positional_string(
        self, command_parser, argument_factory
    ):
        args = [argument_factory(name="text")]

        result = command_parser.parse("-verbose please", args)

        assert result.get_positional_string(0) == "-verbose"

    def test_entity_positional_keeps_raw_reference(
        self, command_parser, argument_factory
    ):
        args = [argument_factory(name="user", arg_type=ArgumentType.ENTITY)]

        result = command_parser.parse("@spammer", args)

        assert result.get_positional(0) == EntityRef("@spammer")
        assert result.get_positional_entity(0) == "@spammer"


class TestCommandParserQuotedStrings:
    """Tests for quoted string handling."""

    def test_quoted_value_spans_spaces(self, command_parser, argument_factory):
        args = [argument_factory(name="first"), argument_factory(name="second")]

        result = command_parser.parse('"a b" c', args)

        assert result.get_positional_string(0) == "a b"
        assert result.get_positional_string(1) == "c"

    def test_escaped_quote_inside_quotes(self, command_parser, argument_factory):
        args = [argument_factory(name="text")]

        result = command_parser.parse(r'"a\"b"', args)

        assert result.get_positional_string(0) == 'a"b'

    def test_mixed_quoted_and_escaped(self, command_parser, argument_factory):
        args = [
            argument_factory(name="first"),
            argument_factory(name="second"),
            argument_factory(name="third"),
        ]

        result = command_parser.parse(r'"quoted arg" normal "escaped \"quote\""', args)

        assert result.get_positional_string(0) == "quoted arg"
        assert result.get_positional_string(1) == "normal"
        assert result.get_positional_string(2) == 'escaped "quote"'

    def test_raw_text_is_decoded_value(self, command_parser, argument_factory):
        args = [argument_factory(name="text")]

        result = command_parser.parse('"two words"', args)

        assert result.positional[0].raw_text == "two words"


class TestCommandParserNamedFlags:
    """Tests for named flag handling."""

    def test_named_string_flags(self, command_parser, argument_factory):
        args = [
            argument_factory(name="flag1", kind=NAMED),
            argument_factory(name="flag2", kind=NAMED),
        ]

        result = command_parser.parse("-flag1 value1 -flag2 value2", args)

        assert result.get_string("flag1") == "value1"
        assert result.get_string("flag2") == "value2"

    def test_flag_with_equals_value(self, command_parser, argument_factory):
        args = [argument_factory(name="lang", kind=NAMED)]

        result = command_parser.parse("-lang=en", args)

        assert result.get_string("lang") == "en"

    def test_flag_with_quoted_value(self, command_parser, argument_factory):
        args = [argument_factory(name="reason", kind=NAMED)]

        result = command_parser.parse('-reason "spam bot"', args)

        assert result.get_string("reason") == "spam bot"

    def test_flag_value_after_extra_spaces(self, command_parser, argument_factory):
        args = [argument_factory(name="reason", kind=NAMED)]

        result = command_parser.parse("-reason    spam", args)

        assert result.get_string("reason") == "spam"

    def test_flag_value_may_start_with_dash(self, command_parser, argument_factory):
        args = [
            argument_factory(name="offset", arg_type=ArgumentType.INTEGER, kind=NAMED),
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
        ]

        result = command_parser.parse("-offset -5", args)

        assert result.get_int("offset") == -5

    def test_flag_name_must_match_exactly(self, command_parser, argument_factory):
        args = [
            argument_factory(name="flag", kind=NAMED),
            argument_factory(name="text"),
        ]

        result = command_parser.parse("-flags value", args)

        assert not result.has("flag")
        assert result.get_positional_string(0) == "-flags"

    def test_repeated_flag_last_wins(self, command_parser, argument_factory):
        args = [argument_factory(name="lang", kind=NAMED)]

        result = command_parser.parse("-lang en -lang fr", args)

        assert result.get_string("lang") == "fr"

    def test_missing_flag_value_raises(self, command_parser, argument_factory):
        args = [argument_factory(name="reason", kind=NAMED)]

        with pytest.raises(MissingFlagValueError) as exc_info:
            command_parser.parse("-reason   ", args)

        assert exc_info.value.argument == "reason"

    def test_strict_mode_rejects_unknown_flag(self, strict_parser, argument_factory):
        args = [argument_factory(name="text")]

        with pytest.raises(UnknownNamedFlagError) as exc_info:
            strict_parser.parse("-nope", args)

        assert exc_info.value.flag == "nope"

    def test_strict_mode_still_reads_negative_numbers(
        self, strict_parser, argument_factory
    ):
        args = [argument_factory(name="value", arg_type=ArgumentType.FLOAT)]

        result = strict_parser.parse("-1.5", args)

        assert result.get_positional_float(0) == -1.5


class TestCommandParserBooleanFlags:
    """Tests for presence-only and inline boolean flags."""

    def test_presence_sets_true(self, command_parser, argument_factory):
        args = [
            argument_factory(name="bool1", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="bool2", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
        ]

        result = command_parser.parse("-bool1 -bool2", args)

        assert result.get_bool("bool1") is True
        assert result.get_bool("bool2") is True

    def test_presence_flag_does_not_consume_next_token(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="user"),
        ]

        result = command_parser.parse("-silent alice", args)

        assert result.get_bool("silent") is True
        assert result.get_positional_string(0) == "alice"

    def test_presence_only_ignores_literal_after_flag(
        self, command_parser, argument_factory
    ):
        """`-silent false` still means present; the literal is the next value."""
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="word"),
        ]

        result = command_parser.parse("-silent false", args)

        assert result.get_bool("silent") is True
        assert result.get_positional_string(0) == "false"

    def test_stray_word_without_slot_ends_scanning(
        self, command_parser, argument_factory
    ):
        """With no positional or rest slot left, later flags are not bound."""
        args = [
            argument_factory(name="bool2", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="bool3", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
        ]

        result = command_parser.parse("-bool2 true -bool3 false", args)

        assert result.get_bool("bool2") is True
        assert not result.has("bool3")

    def test_inline_value_mode_reads_literals(
        self, inline_bool_parser, argument_factory
    ):
        args = [
            argument_factory(name="bool1", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="bool2", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="bool3", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
        ]

        result = inline_bool_parser.parse("-bool1 -bool2 true -bool3 false", args)

        assert result.get_bool("bool1") is True
        assert result.get_bool("bool2") is True
        assert result.get_bool("bool3") is False

    def test_inline_value_mode_with_equals(self, inline_bool_parser, argument_factory):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED)
        ]

        result = inline_bool_parser.parse("-silent=off", args)

        assert result.get_bool("silent") is False

    def test_inline_value_mode_falls_back_to_presence(
        self, inline_bool_parser, argument_factory
    ):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="user"),
        ]

        result = inline_bool_parser.parse("-silent alice", args)

        assert result.get_bool("silent") is True
        assert result.get_positional_string(0) == "alice"


class TestCommandParserRest:
    """Tests for trailing rest capture."""

    def test_mixed_interleaving_with_rest(self, command_parser, argument_factory):
        args = [
            argument_factory(name="first"),
            argument_factory(name="flag1", kind=NAMED),
            argument_factory(name="second"),
            argument_factory(name="tail", kind=REST),
        ]

        result = command_parser.parse("pos1 -flag1 value1 pos2 tail text", args)

        assert result.get_positional_string(0) == "pos1"
        assert result.get_string("flag1") == "value1"
        assert result.get_positional_string(1) == "pos2"
        assert result.get_rest() == "tail text"

    def test_mixed_interleaving_without_rest_discards_tail(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="first"),
            argument_factory(name="flag1", kind=NAMED),
            argument_factory(name="second"),
        ]

        result = command_parser.parse("pos1 -flag1 value1 pos2 tail text", args)

        assert result.get_positional_string(1) == "pos2"
        assert result.get_rest() is None

    def test_rest_keeps_quotes_and_inner_spacing(
        self, command_parser, argument_factory
    ):
        args = [argument_factory(name="user"), argument_factory(name="reason", kind=REST)]

        result = command_parser.parse('bob  "posting  spam"  again  ', args)

        assert result.get_rest() == '"posting  spam"  again'

    def test_rest_swallows_later_flags(self, command_parser, argument_factory):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="text", kind=REST),
        ]

        result = command_parser.parse("hello -silent world", args)

        assert result.get_rest() == "hello -silent world"
        assert not result.has("silent")

    def test_flags_before_rest_are_bound(self, command_parser, argument_factory):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(name="text", kind=REST),
        ]

        result = command_parser.parse("-silent hello world", args)

        assert result.get_bool("silent") is True
        assert result.get_rest() == "hello world"

    def test_rest_entity_is_coerced(self, command_parser, argument_factory):
        args = [argument_factory(name="target", arg_type=ArgumentType.ENTITY, kind=REST)]

        result = command_parser.parse("  @someone ", args)

        assert result.rest.value == EntityRef("@someone")
        assert result.get_rest() == "@someone"

    def test_empty_rest_is_unbound(self, command_parser, argument_factory):
        args = [argument_factory(name="text", kind=REST)]

        result = command_parser.parse("   ", args)

        assert result.rest is None

    def test_variadic_collects_typed_values(self, command_parser, argument_factory):
        args = [
            argument_factory(
                name="ids",
                arg_type=ArgumentType.INTEGER,
                kind=REST,
                collects_multiple=True,
            )
        ]

        result = command_parser.parse("1 2 3", args)

        assert result.get_rest_values() == (1, 2, 3)
        assert result.rest.value == (1, 2, 3)
        assert result.get_rest() == "1 2 3"

    def test_variadic_items_are_quote_aware(self, command_parser, argument_factory):
        args = [argument_factory(name="words", kind=REST, collects_multiple=True)]

        result = command_parser.parse('one "two three" four', args)

        assert result.get_rest_values() == ("one", "two three", "four")

    def test_variadic_keeps_recognising_flags(self, command_parser, argument_factory):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
            argument_factory(
                name="ids",
                arg_type=ArgumentType.INTEGER,
                kind=REST,
                collects_multiple=True,
            ),
        ]

        result = command_parser.parse("1 -silent 2", args)

        assert result.get_rest_values() == (1, 2)
        assert result.get_bool("silent") is True

    def test_variadic_coercion_failure_aborts(self, command_parser, argument_factory):
        args = [
            argument_factory(
                name="ids",
                arg_type=ArgumentType.INTEGER,
                kind=REST,
                collects_multiple=True,
            )
        ]

        with pytest.raises(TypeCoercionError) as exc_info:
            command_parser.parse("1 two 3", args)

        assert exc_info.value.raw_text == "two"


class TestCommandParserRequiredAndDefaults:
    """Tests for required-argument validation and defaults."""

    def test_missing_required_positional_raises(self, command_parser, argument_factory):
        args = [argument_factory(name="required", required=True)]

        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            command_parser.parse("", args)

        assert exc_info.value.argument == "required"
        assert exc_info.value.kind == "positional"

    def test_missing_required_named_raises(self, command_parser, argument_factory):
        args = [argument_factory(name="lang", kind=NAMED, required=True)]

        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            command_parser.parse("hello", args)

        assert exc_info.value.kind == "named"

    def test_missing_required_rest_raises(self, command_parser, argument_factory):
        args = [argument_factory(name="text", kind=REST, required=True)]

        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            command_parser.parse("", args)

        assert exc_info.value.kind == "rest"

    def test_required_after_optional_positional_still_checked(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="maybe"),
            argument_factory(name="must", required=True),
        ]

        with pytest.raises(MissingRequiredArgumentError, match="must"):
            command_parser.parse("", args)

    def test_required_with_default_uses_default(self, command_parser, argument_factory):
        args = [
            argument_factory(
                name="limit",
                arg_type=ArgumentType.INTEGER,
                required=True,
                default="10",
            )
        ]

        result = command_parser.parse("", args)

        assert result.get_positional_int(0) == 10

    def test_optional_flag_default(self, command_parser, argument_factory):
        args = [
            argument_factory(
                name="mention",
                arg_type=ArgumentType.BOOLEAN,
                kind=NAMED,
                default=False,
            )
        ]

        result = command_parser.parse("", args)

        assert result.get_bool("mention") is False

    def test_string_default_for_duration_is_coerced(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(
                name="duration",
                arg_type=ArgumentType.DURATION,
                kind=NAMED,
                default="1w",
            )
        ]

        result = command_parser.parse("", args)

        assert result.get_duration("duration") == Duration(weeks=1)

    def test_rest_default_is_verbatim(self, command_parser, argument_factory):
        args = [
            argument_factory(
                name="ids",
                arg_type=ArgumentType.INTEGER,
                kind=REST,
                default="not coerced",
            )
        ]

        result = command_parser.parse("", args)

        assert result.rest.value == "not coerced"

    def test_supplied_value_beats_default(self, command_parser, argument_factory):
        args = [argument_factory(name="lang", kind=NAMED, default="en")]

        result = command_parser.parse("-lang de", args)

        assert result.get_string("lang") == "de"


class TestCommandParserReply:
    """Tests for reply-context binding."""

    def test_required_reply_without_context_raises(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="reply", arg_type=ArgumentType.REPLY, required=True)
        ]

        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            command_parser.parse("", args)

        assert exc_info.value.kind == "reply"

    def test_reply_context_is_bound(self, command_parser, argument_factory):
        replied = object()
        args = [
            argument_factory(name="reply", arg_type=ArgumentType.REPLY, required=True),
            argument_factory(name="user", arg_type=ArgumentType.ENTITY),
        ]

        result = command_parser.parse("@bob", args, reply=replied)

        assert result.reply is replied
        assert result.get_positional_entity(0) == "@bob"

    def test_reply_definition_does_not_take_a_positional_slot(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="reply", arg_type=ArgumentType.REPLY),
            argument_factory(name="word"),
        ]

        result = command_parser.parse("hello", args)

        assert result.get_positional_string(0) == "hello"
        assert result.reply is None


class TestCommandParserTypeCoercion:
    """Tests for coercion during binding."""

    def test_type_conversion(self, command_parser, argument_factory):
        args = [
            argument_factory(name="int", arg_type=ArgumentType.INTEGER, kind=NAMED),
            argument_factory(name="float", arg_type=ArgumentType.FLOAT, kind=NAMED),
            argument_factory(name="bool", arg_type=ArgumentType.BOOLEAN, kind=NAMED),
        ]

        result = command_parser.parse("-int 42 -float 3.14 -bool true", args)

        assert result.get_int("int") == 42
        assert result.get_float("float") == 3.14
        assert result.get_bool("bool") is True

    def test_coercion_failure_names_argument_and_text(
        self, command_parser, argument_factory
    ):
        args = [argument_factory(name="count", arg_type=ArgumentType.INTEGER, kind=NAMED)]

        with pytest.raises(TypeCoercionError) as exc_info:
            command_parser.parse("-count abc", args)

        assert exc_info.value.argument == "count"
        assert exc_info.value.raw_text == "abc"
        assert exc_info.value.expected_type == ArgumentType.INTEGER

    def test_absent_duration_is_distinct_from_zero(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="duration", arg_type=ArgumentType.DURATION, kind=NAMED)
        ]

        absent = command_parser.parse("", args)
        zero = command_parser.parse("-duration 0d", args)

        assert absent.get_duration("duration") is None
        assert zero.get_duration("duration") == Duration()
        assert zero.get_duration("duration").is_zero()

    def test_unapplicable_duration_fails_at_parse_time(
        self, command_parser, argument_factory
    ):
        args = [
            argument_factory(name="duration", arg_type=ArgumentType.DURATION, kind=NAMED)
        ]

        with pytest.raises(TypeCoercionError) as exc_info:
            command_parser.parse("-duration 99999999999d", args)

        assert exc_info.value.argument == "duration"

    def test_custom_duration_units(self, argument_factory):
        from commands.durations import DurationParser

        parser = CommandParser(duration_parser=DurationParser({"min": "minutes"}))
        args = [
            argument_factory(name="duration", arg_type=ArgumentType.DURATION, kind=NAMED)
        ]

        result = parser.parse("-duration 1h30min", args)

        assert result.get_duration("duration") == Duration(hours=1, minutes=30)


class TestCommandParserSchema:
    """Tests for schema validation and edge cases."""

    @pytest.mark.parametrize("text", ["", "anything", '-x "y z" -- tail', "-"])
    def test_empty_schema_never_fails(self, command_parser, text):
        result = command_parser.parse(text, [])

        assert result.positional == ()
        assert dict(result.named) == {}
        assert result.rest is None

    def test_two_rest_definitions_rejected(self, command_parser, argument_factory):
        args = [
            argument_factory(name="a", kind=REST),
            argument_factory(name="b", kind=REST),
        ]

        with pytest.raises(SchemaError, match="At most one rest"):
            command_parser.parse("x", args)

    def test_parse_arguments_helper_accepts_options(self, argument_factory):
        args = [
            argument_factory(name="silent", arg_type=ArgumentType.BOOLEAN, kind=NAMED)
        ]

        result = parse_arguments("-silent no", args, inline_bool_values=True)

        assert result.get_bool("silent") is False

    def test_parse_command_uses_command_args(
        self, command_parser, command_factory, argument_factory
    ):
        cmd = command_factory(args=[argument_factory(name="word")])

        result = command_parser.parse_command(cmd, "hi")

        assert result.get_positional_string(0) == "hi"

    def test_parser_from_settings(self):
        from core.config import CommandsSettings

        commands_settings = CommandsSettings(
            COMMAND_INLINE_BOOL_VALUES=True,
            COMMAND_STRICT_FLAGS=True,
            COMMAND_DURATION_UNITS={"min": "minutes"},
        )

        parser = CommandParser.from_settings(commands_settings)

        assert parser.inline_bool_values is True
        assert parser.strict_flags is True
        assert parser.duration_parser.units["min"] == "minutes"
