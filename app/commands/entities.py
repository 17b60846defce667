"""Deferred entity references and the resolution contract.

Entity arguments are never looked up while parsing. The parser stores an
:class:`EntityRef` and handlers resolve it on demand through a resolver
backed by the chat client's peer directory.

Resolution order is fixed: the reference is first tried as a username (one
leading "@" removed), then, if it parses as an integer, as a numeric id.
All-digit usernames therefore still win over ids.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from core.logging import get_module_logger
from commands.errors import EntityNotFoundError

logger = get_module_logger()

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class EntityRef:
    """Unresolved reference to a user or chat (username, @handle or id)."""

    raw: str

    def __str__(self) -> str:
        return self.raw


class EntityResolver(Protocol):
    """Peer directory lookups supplied by the chat client.

    Both methods return the identity, or None when nothing matches. They may
    be called any number of times and must not mutate the reference.
    """

    def resolve_username(self, username: str) -> Optional[Any]:
        """Look up a user by username (without "@")."""
        ...  # pylint: disable=unnecessary-ellipsis

    def resolve_id(self, entity_id: int) -> Optional[Any]:
        """Look up a user by numeric id."""
        ...  # pylint: disable=unnecessary-ellipsis


def resolve_entity(raw: str, resolver: EntityResolver, argument: str = "") -> Any:
    """Resolve a raw entity reference.

    Args:
        raw: Reference as typed by the user
        resolver: Peer directory lookups
        argument: Argument name, for diagnostics

    Returns:
        Whatever the resolver returned for the first successful lookup

    Raises:
        EntityNotFoundError: If neither lookup finds anything
    """
    username = raw[1:] if raw.startswith("@") else raw
    if username:
        identity = resolver.resolve_username(username)
        if identity is not None:
            return identity

    if _INTEGER.fullmatch(raw):
        identity = resolver.resolve_id(int(raw))
        if identity is not None:
            return identity

    logger.info("entity_resolution_failed", argument=argument, raw_text=raw)
    raise EntityNotFoundError(raw, argument=argument)
