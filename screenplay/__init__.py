"""Screenplay source package.

This package contains the screenplay-pattern core:
- config: Configuration loading and management
- core: Actions, perspectives, inquisitors and actors
"""

from __future__ import annotations

from .core import (
    Actor, Perspective, Inquisitor, Interaction,
    task, question, assertion, current_actor, reset_current_actor,
)

__all__: list[str] = [
    "Actor", "Perspective", "Inquisitor", "Interaction",
    "task", "question", "assertion", "current_actor", "reset_current_actor",
]
