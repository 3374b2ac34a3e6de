"""Process-wide record of the current actor.

Collaborating code (step definitions, report hooks) sometimes needs "the actor
who just did something" without having it passed in. The context holds the
actor that most recently completed attempts_to successfully. It is never used
to decide how an action is dispatched.

Lifecycle: set when an actor finishes attempts_to / asserts_that, cleared by
reset() (call it between tests).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .actor import Actor


class ActorContext:
    """Holds the most recently successful actor."""

    def __init__(self) -> None:
        self._current: Actor | None = None

    @property
    def current(self) -> Actor | None:
        return self._current

    def record(self, actor: Actor) -> None:
        self._current = actor

    def reset(self) -> None:
        self._current = None


DEFAULT_CONTEXT = ActorContext()


def current_actor() -> Actor | None:
    """The actor that last completed attempts_to in the default context."""
    return DEFAULT_CONTEXT.current


def reset_current_actor() -> None:
    DEFAULT_CONTEXT.reset()
