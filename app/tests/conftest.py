import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection regardless of
# the invocation directory.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402
from tests.factories.commands import (  # noqa: E402
    make_argument,
    make_command,
    make_message,
    make_registry,
)


@pytest.fixture
def argument_factory():
    """Factory for Argument definitions."""
    return make_argument


@pytest.fixture
def command_factory():
    """Factory for Command definitions."""
    return make_command


@pytest.fixture
def command_registry_factory():
    """Factory for CommandRegistry instances."""
    return make_registry


@pytest.fixture
def message_factory():
    """Factory for chat messages."""
    return make_message
