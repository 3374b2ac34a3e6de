"""Composable, parameterised, self-describing actions.

An ActionFactory is a node in an explicit tree: it has an identifier, the
names its positional arguments bind to, and named children declared once
when the factory is built. Calling a factory produces a fresh, immutable
Action value that a perspective can resolve to a handler.

Usage:
    CreateUser = task("CreateUser", build_children=lambda define: define(
        "named", ["name"], lambda define: define("aged", ["age"])
    ))

    action = CreateUser.named("dave").aged(20)
    str(action.identifier)  # "CreateUser.named.aged"
    action.parameters       # {"name": "dave", "age": 20}
    action.description      # "Create user named 'dave' aged '20'"

Interactions are the other variant: terminal handlers that use abilities
directly and never go through a perspective.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Any, Union

from .description import Description
from .errors import ConfigurationError, ErrorCode
from .identifiers import Identifier


class ActionKind(str, Enum):
    """What an action is for; used in reports and error messages."""

    TASK = "task"
    QUESTION = "question"
    ASSERTION = "assertion"


ChildBuilder = Callable[[Callable[..., "ActionFactory"]], Any]


@dataclass(frozen=True)
class Action:
    """A single invocation of an ActionFactory.

    Attributes:
        identifier: Key used to find the handler in a perspective
        kind: Task, question or assertion
        parameters: Bound parameter values (read-only)
        description: Sentence describing this invocation
        factory: The node that produced this action (gives access to children)
    """

    identifier: Identifier
    kind: ActionKind
    parameters: Mapping[str, Any] = field(hash=False)
    description: str
    factory: ActionFactory | None = field(default=None, repr=False, compare=False)

    def child(self, name: str) -> Callable[..., Action]:
        """Factory for a nested action that inherits this action's parameters."""
        factory = self.__dict__.get("factory")
        if factory is None:
            raise AttributeError(f"{self.description or self.identifier} has no nested actions")
        return partial(factory.child(name).bind, self)

    def __getattr__(self, name: str) -> Callable[..., Action]:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.child(name)

    def __str__(self) -> str:
        return self.description


# Attributes of ActionFactory and Action that would shadow a nested action
RESERVED_KEYS = frozenset({
    "bind", "child", "children", "define", "description", "factory",
    "identifier", "key", "kind", "parameter_names", "parameters",
})


class ActionFactory:
    """Builds Actions of one kind for one identifier.

    Positional values bind to parameter_names by position. Extra values are
    ignored and missing ones are simply absent from the parameter map.

    Children declared through build_children are reachable from the factory
    itself (``Root.Child(x)``, no inherited parameters) and from every action
    it produces (``Root(a).Child(x)``, inheriting ``a``).
    """

    def __init__(
        self,
        kind: ActionKind,
        identifier: Identifier | str,
        parameter_names: Iterable[str] = (),
        build_children: ChildBuilder | None = None,
        description: Description | str | None = None,
    ) -> None:
        self.kind = kind
        self.identifier = Identifier.coerce(identifier)
        self.parameter_names: tuple[str, ...] = tuple(parameter_names)
        if description is None:
            self.description = Description.from_id(self.identifier)
        else:
            self.description = Description(str(description))
        self.children: dict[str, ActionFactory] = {}
        if build_children is not None:
            build_children(self.define)

    @property
    def key(self) -> str:
        return self.identifier.key

    def define(
        self,
        key: str,
        parameter_names: Iterable[str] = (),
        build_children: ChildBuilder | None = None,
    ) -> ActionFactory:
        """Declare a nested action under this one.

        Raises:
            ConfigurationError: If key would be shadowed by an attribute of
                the factory or of the actions it builds
        """
        if key in RESERVED_KEYS or key.startswith("_"):
            raise ConfigurationError(
                f"'{key}' cannot name a nested action of '{self.identifier}': "
                f"it is reserved ({', '.join(sorted(RESERVED_KEYS))})",
                code=ErrorCode.NOT_CONFIGURED,
                identifier=str(self.identifier),
                key=key,
            )
        nested = ActionFactory(
            self.kind,
            self.identifier.with_key(key),
            parameter_names,
            build_children,
            description=self.description.with_key(key),
        )
        self.children[key] = nested
        return nested

    def __call__(self, *values: Any) -> Action:
        return self.bind(None, *values)

    def bind(self, parent: Action | None, *values: Any) -> Action:
        """Create an action, optionally nested under an invoked parent."""
        own = dict(zip(self.parameter_names, values))
        if parent is None:
            parameters = own
            description = self.description.with_params(own)
        else:
            parameters = {**parent.parameters, **own}
            description = Description(parent.description).with_key(self.key).with_params(own)
        return Action(
            identifier=self.identifier,
            kind=self.kind,
            parameters=MappingProxyType(parameters),
            description=str(description),
            factory=self,
        )

    def child(self, name: str) -> ActionFactory:
        children = self.__dict__.get("children", {})
        try:
            return children[name]
        except KeyError:
            available = ", ".join(children) or "none"
            raise AttributeError(
                f"'{self.identifier}' has no nested action '{name}' (available: {available})"
            ) from None

    def __getattr__(self, name: str) -> ActionFactory:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.child(name)

    def __repr__(self) -> str:
        return f"ActionFactory({self.kind.value}, {str(self.identifier)!r})"


def task(
    identifier: Identifier | str,
    parameter_names: Iterable[str] = (),
    build_children: ChildBuilder | None = None,
    description: Description | str | None = None,
) -> ActionFactory:
    """Declare a task: something the actor does."""
    return ActionFactory(ActionKind.TASK, identifier, parameter_names, build_children, description)


def question(
    identifier: Identifier | str,
    parameter_names: Iterable[str] = (),
    build_children: ChildBuilder | None = None,
    description: Description | str | None = None,
) -> ActionFactory:
    """Declare a question: something the actor finds out."""
    return ActionFactory(ActionKind.QUESTION, identifier, parameter_names, build_children, description)


def assertion(
    identifier: Identifier | str,
    parameter_names: Iterable[str] = (),
    build_children: ChildBuilder | None = None,
    description: Description | str | None = None,
) -> ActionFactory:
    """Declare an assertion: something the actor checks."""
    return ActionFactory(ActionKind.ASSERTION, identifier, parameter_names, build_children, description)


@dataclass(frozen=True)
class Interaction:
    """A handler used directly, without a perspective."""

    handler: Callable[..., Any]
    description: str = ""

    def __post_init__(self) -> None:
        if not callable(self.handler):
            raise TypeError("An interaction must be callable")

    def __call__(self, context: Any) -> Any:
        return self.handler(context)

    def __str__(self) -> str:
        return self.description


Invocable = Union[Action, Interaction]


def as_invocable(value: Any) -> Invocable:
    """Normalise what an actor was asked to do.

    Uninvoked factories are invoked with no arguments; bare callables
    become interactions.
    """
    if isinstance(value, (Action, Interaction)):
        return value
    if isinstance(value, ActionFactory):
        return value()
    if callable(value):
        description = getattr(value, "description", "")
        return Interaction(value, description if isinstance(description, str) else "")
    raise TypeError(f"Cannot attempt {value!r}: expected an action or a callable")
