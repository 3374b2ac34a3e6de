"""Error types raised by the screenplay core.

Every error raised by the core itself carries a machine-readable code and
category so scenario tooling can switch on them. Errors raised by handlers
and verification functions are never wrapped: they propagate verbatim.

Usage:
    from screenplay.core.errors import HandlerNotFoundError, ErrorCode

    try:
        await actor.attempts_to(BookRoom("101"))
    except HandlerNotFoundError as e:
        assert e.code == ErrorCode.HANDLER_NOT_FOUND
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - CONFIGURATION: Perspective or actor set up wrongly
    - LOOKUP: No handler for an action in the current perspective
    - VERIFICATION: Answers never satisfied the verification
    """

    CONFIGURATION = "configuration"
    LOOKUP = "lookup"
    VERIFICATION = "verification"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Configuration errors
    MISSING_IDENTIFIER = "missing_identifier"
    NOT_CONFIGURED = "not_configured"

    # Lookup errors
    HANDLER_NOT_FOUND = "handler_not_found"

    # Verification errors
    TIMEOUT = "timeout"


class ScreenplayError(Exception):
    """Base class for errors raised by the core."""

    code: ErrorCode = ErrorCode.NOT_CONFIGURED
    category: ErrorCategory = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reports."""
        result: dict[str, Any] = {
            "error": self.message,
            "code": self.code.value,
            "category": self.category.value,
        }
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(ScreenplayError):
    """Raised when a perspective or actor is set up wrongly."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NOT_CONFIGURED,
        **details: Any,
    ) -> None:
        super().__init__(message, **details)
        self.code = code


class HandlerNotFoundError(ScreenplayError, LookupError):
    """Raised when a perspective has no handler for an action."""

    code = ErrorCode.HANDLER_NOT_FOUND
    category = ErrorCategory.LOOKUP

    def __init__(self, identifier: str, perspective: str, alternatives: list[str], kind: str = "action") -> None:
        self.identifier = identifier
        self.perspective = perspective
        self.alternatives = alternatives
        if alternatives:
            listing = "Alternatives:\n" + "\n".join(f"- {alt}" for alt in alternatives)
        else:
            listing = "No handlers registered."
        super().__init__(
            f"No handler found for {kind} '{identifier}' in '{perspective}' perspective."
            f"\n\n{listing}",
            identifier=identifier,
            perspective=perspective,
            alternatives=alternatives,
        )


class VerificationTimeoutError(ScreenplayError, TimeoutError):
    """Raised when no changing answer arrived before the deadline."""

    code = ErrorCode.TIMEOUT
    category = ErrorCategory.VERIFICATION

    def __init__(self, questions: list[str], timeout: float) -> None:
        self.questions = questions
        self.timeout = timeout
        asked = ", ".join(q for q in questions if q) or "the question"
        super().__init__(
            f"Timed out after {timeout}s waiting for an answer to {asked}",
            questions=questions,
            timeout=timeout,
        )
