"""Actor - performs actions with its abilities through a perspective.

Key behaviors:
- attempts_to runs actions strictly one after another and stops at the first failure
- asks resolves a question and returns the raw answer (possibly an Inquisitor)
- asks_for(...).and_verify checks answers, waiting for changing answers
  until they satisfy the verification or the timeout passes
- through returns an actor sharing the same abilities but another perspective

Usage:
    joe = Actor({"hotel": hotel_client}, domain)
    await joe.attempts_to(BookRoom("101"))
    await joe.asks_for(Bookings()).and_verify(lambda bookings: ...)
    await joe.through(web).attempts_to(BookRoom("102"))
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from ..config import get_validated_config
from .actions import Action, as_invocable
from .context import DEFAULT_CONTEXT, ActorContext
from .errors import ConfigurationError, ErrorCode, VerificationTimeoutError
from .inquisitor import Inquisitor, Subscription
from .perspective import Perspective

logger = logging.getLogger(__name__)


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AbilityContext(Mapping[str, Any]):
    """What a handler receives: the actor plus its abilities.

    Supports both ``context["browser"]`` and ``context.browser``.
    """

    def __init__(self, actor: Actor, abilities: Mapping[str, Any]) -> None:
        self._values: dict[str, Any] = {"actor": actor, **abilities}

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            known = ", ".join(k for k in self._values if k != "actor") or "none"
            raise AttributeError(
                f"The actor has no ability '{name}' (abilities: {known})"
            ) from None


class Actor:
    """Binds abilities to a perspective and drives actions.

    The ability dict is shared by reference: gains_abilities mutates it in
    place and actors created with through() see the same dict. No locking is
    done; don't mutate abilities while another call on the same actor runs.
    """

    def __init__(
        self,
        abilities: dict[str, Any] | None = None,
        perspective: Perspective | None = None,
        *,
        name: str | None = None,
        verify_timeout: float | None = None,
        context: ActorContext | None = None,
    ) -> None:
        """Create an actor.

        Args:
            abilities: Capabilities handed to every handler (kept by reference)
            perspective: Resolves actions to handlers
            name: Used in log lines
            verify_timeout: Seconds and_verify waits for changing answers.
                Defaults to verification.timeout_seconds from config.
            context: Where this actor records itself as current

        Raises:
            ConfigurationError: If no perspective is given
        """
        if perspective is None:
            raise ConfigurationError(
                "The actor needs a perspective", code=ErrorCode.NOT_CONFIGURED
            )
        self.abilities: dict[str, Any] = abilities if abilities is not None else {}
        self.perspective = perspective
        self.name = name
        self.verify_timeout = verify_timeout
        self.context = context if context is not None else DEFAULT_CONTEXT

    def __repr__(self) -> str:
        return f"Actor({self.name or 'unnamed'!r}, perspective={self.perspective.name!r})"

    # -------------------------------------------------------------------------
    # Abilities and perspectives
    # -------------------------------------------------------------------------

    def gains_abilities(self, extra: Mapping[str, Any] | None = None, **abilities: Any) -> Actor:
        """Add abilities in place; every actor sharing the dict sees them."""
        if extra:
            self.abilities.update(extra)
        self.abilities.update(abilities)
        return self

    def through(self, perspective: Perspective) -> Actor:
        """Same actor, same abilities, seen through another perspective."""
        return Actor(
            self.abilities,
            perspective,
            name=self.name,
            verify_timeout=self.verify_timeout,
            context=self.context,
        )

    def ability_context(self) -> AbilityContext:
        return AbilityContext(self, self.abilities)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    async def attempts_to(self, *actions: Any) -> Actor:
        """Perform actions in order, each finishing before the next starts.

        The first exception aborts the rest and propagates unchanged.

        Returns:
            This actor, once every action has completed
        """
        for action in actions:
            await self._perform(action, announce=True)
        self.context.record(self)
        return self

    async def asserts_that(self, *assertions: Any) -> Actor:
        """Perform assertion actions; same protocol as attempts_to."""
        return await self.attempts_to(*assertions)

    # -------------------------------------------------------------------------
    # Questions
    # -------------------------------------------------------------------------

    async def asks(self, question: Any) -> Any:
        """Resolve and invoke a question, returning its raw answer."""
        return await self._perform(question)

    def asks_for(self, *questions: Any) -> QuestionSet:
        """Start a verification: ``await actor.asks_for(Q).and_verify(fn)``."""
        return QuestionSet(self, questions)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def _perform(self, action: Any, announce: bool = False) -> Any:
        invocable = as_invocable(action)
        if announce:
            await self._announce(invocable.description)

        if isinstance(invocable, Action):
            handler = self.perspective.handler_for(invocable)
        else:
            handler = invocable
        return await _settle(handler(self.ability_context()))

    async def _announce(self, description: str) -> None:
        if not description:
            return
        logger.info(f"{self.name or 'Actor'} attempts to: {description}")
        ability_name = get_validated_config().logging.ability
        log = self.abilities.get(ability_name) if ability_name else None
        if callable(log):
            await _settle(log(description))

    async def _answers_for(self, questions: tuple[Any, ...]) -> list[Any]:
        """Start every question before awaiting any; keep the caller's order."""
        tasks = [asyncio.ensure_future(self._perform(q)) for q in questions]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise


class QuestionSet:
    """Questions waiting for a verification function."""

    def __init__(self, actor: Actor, questions: tuple[Any, ...]) -> None:
        self.actor = actor
        self.questions = questions

    async def and_verify(self, verify: Callable[..., Any], timeout: float | None = None) -> Actor:
        """Ask every question, then check the answers with verify.

        Plain answers are verified once and any error propagates at once.
        If any answer is an Inquisitor, verify is re-run on every new answer
        until it passes or the timeout passes; errors in between are kept and
        the last one is raised on timeout. The timeout covers the whole wait,
        so an async verify still running at the deadline is cancelled.

        Args:
            verify: Called with one answer per question, in order; may be async
            timeout: Seconds to wait for changing answers (defaults to the actor's)

        Returns:
            The actor

        Raises:
            VerificationTimeoutError: If no answer arrived before the timeout
        """
        answers = await self.actor._answers_for(self.questions)
        pending = [i for i, answer in enumerate(answers) if isinstance(answer, Inquisitor)]

        if not pending:
            await _settle(verify(*answers))
            return self.actor

        if timeout is None:
            timeout = self.actor.verify_timeout
        if timeout is None:
            timeout = get_validated_config().verification.timeout_seconds

        await self._verify_changing(answers, pending, verify, timeout)
        return self.actor

    async def _verify_changing(
        self,
        answers: list[Any],
        pending: list[int],
        verify: Callable[..., Any],
        timeout: float,
    ) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        updates: asyncio.Queue[tuple[int, Any]] = asyncio.Queue()
        current = [a.placeholder if isinstance(a, Inquisitor) else a for a in answers]
        subscriptions: list[Subscription] = []
        last_error: Exception | None = None
        attempts = 0

        def observer(index: int) -> Callable[[Any], None]:
            def notify(value: Any) -> None:
                # Notifications may come from other threads
                if not loop.is_closed():
                    loop.call_soon_threadsafe(updates.put_nowait, (index, value))
            return notify

        try:
            for index in pending:
                subscriptions.append(answers[index].subscribe(observer(index)))

            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                try:
                    index, value = await asyncio.wait_for(updates.get(), timeout=remaining)
                except asyncio.TimeoutError:
                    break

                current[index] = value
                attempts += 1
                remaining = deadline - loop.time()
                if remaining <= 0:
                    break
                try:
                    await asyncio.wait_for(_settle(verify(*current)), timeout=remaining)
                except asyncio.TimeoutError as e:
                    if loop.time() < deadline:
                        # Raised by verify itself
                        last_error = e
                        continue
                    logger.debug(f"Verification attempt {attempts} still running at the deadline, cancelled")
                    break
                except Exception as e:
                    last_error = e
                    logger.debug(f"Verification attempt {attempts} failed, waiting for new answers: {e}")
                    continue
                logger.debug(f"Verification passed after {attempts} attempt(s)")
                return
        finally:
            for subscription in subscriptions:
                subscription.cancel()

        if last_error is not None:
            logger.warning(f"Verification still failing after {timeout}s ({attempts} attempts)")
            raise last_error
        raise VerificationTimeoutError(
            [str(getattr(q, "description", q)) for q in self.questions], timeout
        )
