"""Perspective - a named registry of handlers for actions.

A perspective says how actions are carried out in one context: the same
``BookRoom`` task may be handled by a domain call in a "domain" perspective
and by clicking through the UI in a "web" perspective.

Handlers are registered as factories. A handler factory receives the
action's parameters and returns the concrete handler, which receives the
ability context:

    def define(register):
        register(BookRoom, lambda params: lambda ctx: ctx.hotel.book(params["room"]))

    domain = Perspective("domain", define)

Re-registering an identifier replaces the earlier handler (last write wins).
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from .actions import Action, ActionFactory
from .errors import ConfigurationError, ErrorCode, HandlerNotFoundError
from .identifiers import Identifier

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]
HandlerFactory = Callable[[Mapping[str, Any]], Handler]


def _call_site() -> str:
    """Location of the first frame outside this module, as ``file:line``."""
    this_file = Path(__file__).resolve()
    for frame in reversed(traceback.extract_stack()[:-1]):
        if Path(frame.filename).resolve() != this_file:
            return f"{frame.filename}:{frame.lineno}"
    return "<unknown>"


def _identifier_of(action: Any) -> Identifier | None:
    if isinstance(action, Identifier):
        return action or None
    if isinstance(action, str):
        return Identifier.parse(action) or None
    identifier = getattr(action, "identifier", None)
    if isinstance(identifier, (Identifier, str)) and str(identifier):
        return Identifier.coerce(identifier)
    return None


class Perspective:
    """Named mapping from action identifier to handler factory.

    Thread-safety: registration happens once, synchronously, during
    construction; lookups afterwards only read.
    """

    def __init__(
        self,
        name: str = "default",
        definition: Callable[[Callable[[Any, HandlerFactory], None]], Any] | None = None,
    ) -> None:
        """Build the perspective, running definition with the register function.

        Args:
            name: Shown in lookup errors and logs
            definition: Optional callback receiving register(action, handler_factory)
        """
        self.name = name
        self._handlers: dict[str, HandlerFactory] = {}
        if definition is not None:
            definition(self.register)

    def register(self, action: Any, handler_factory: HandlerFactory) -> None:
        """Register the handler factory for an action's identifier.

        Args:
            action: ActionFactory, Action, Identifier, dotted string, or any
                object with an ``identifier``
            handler_factory: Called with the action's parameters, returns the handler

        Raises:
            ConfigurationError: If action is None or has no identifier
        """
        identifier = _identifier_of(action)
        if identifier is None:
            site = _call_site()
            raise ConfigurationError(
                f"Cannot register a handler in '{self.name}' perspective at {site}: "
                f"{action!r} has no identifier",
                code=ErrorCode.MISSING_IDENTIFIER,
                perspective=self.name,
                call_site=site,
            )
        key = str(identifier)
        if key in self._handlers:
            logger.debug(f"Replacing handler for '{key}' in '{self.name}' perspective")
        self._handlers[key] = handler_factory

    def handler_for(self, action: Action | ActionFactory) -> Handler:
        """Resolve an action to its concrete handler.

        Raises:
            HandlerNotFoundError: If nothing is registered for the identifier.
                The message lists every registered identifier.
        """
        if isinstance(action, ActionFactory):
            action = action()
        key = str(action.identifier)
        handler_factory = self._handlers.get(key)
        if handler_factory is None:
            raise HandlerNotFoundError(
                key, self.name, self.identifiers, kind=action.kind.value
            )
        return handler_factory(action.parameters)

    @property
    def identifiers(self) -> list[str]:
        """Registered identifiers in registration order."""
        return list(self._handlers)

    def __contains__(self, action: object) -> bool:
        identifier = _identifier_of(action)
        return identifier is not None and str(identifier) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"Perspective({self.name!r}, handlers={len(self._handlers)})"
