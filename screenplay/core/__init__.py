# Screenplay core package
from .identifiers import Identifier
from .description import Description, sentence_case
from .actions import (
    Action, ActionFactory, ActionKind, Interaction, Invocable,
    task, question, assertion, as_invocable,
)
from .perspective import Perspective
from .inquisitor import Inquisitor, Subscription
from .actor import Actor, AbilityContext, QuestionSet
from .context import ActorContext, current_actor, reset_current_actor
from .errors import (
    ErrorCategory, ErrorCode, ScreenplayError,
    ConfigurationError, HandlerNotFoundError, VerificationTimeoutError,
)

__all__ = [
    "Identifier",
    "Description", "sentence_case",
    "Action", "ActionFactory", "ActionKind", "Interaction", "Invocable",
    "task", "question", "assertion", "as_invocable",
    "Perspective",
    "Inquisitor", "Subscription",
    "Actor", "AbilityContext", "QuestionSet",
    "ActorContext", "current_actor", "reset_current_actor",
    "ErrorCategory", "ErrorCode", "ScreenplayError",
    "ConfigurationError", "HandlerNotFoundError", "VerificationTimeoutError",
]
