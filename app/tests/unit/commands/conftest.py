"""Feature-level fixtures for command framework tests."""

from unittest.mock import MagicMock
import pytest

from commands.parser import CommandParser
from commands.dispatcher import CommandDispatcher
from tests.factories.commands import FakeResolver


@pytest.fixture
def command_parser():
    """CommandParser with default (presence-only, lenient) behavior."""
    return CommandParser()


@pytest.fixture
def inline_bool_parser():
    """CommandParser whose boolean flags accept an inline value."""
    return CommandParser(inline_bool_values=True)


@pytest.fixture
def strict_parser():
    """CommandParser that rejects undeclared flags."""
    return CommandParser(strict_flags=True)


@pytest.fixture
def resolver_factory():
    """Factory for in-memory entity resolvers.

    Returns:
        Callable taking username and id mappings
    """

    def _factory(usernames=None, ids=None):
        return FakeResolver(usernames=usernames, ids=ids)

    return _factory


@pytest.fixture
def dispatcher():
    """CommandDispatcher using the "." prefix."""
    return CommandDispatcher(prefix=".")


@pytest.fixture
def mock_handler():
    """Handler double returning a sentinel."""
    return MagicMock(return_value="handled")
