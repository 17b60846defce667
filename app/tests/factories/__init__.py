"""Test data factories for deterministic test data generation."""

from tests.factories.commands import (
    FakeMessage,
    FakeResolver,
    make_argument,
    make_command,
    make_message,
    make_registry,
)

__all__ = [
    "FakeMessage",
    "FakeResolver",
    "make_argument",
    "make_command",
    "make_message",
    "make_registry",
]
