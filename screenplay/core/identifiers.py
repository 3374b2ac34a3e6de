"""Dotted path identifiers for actions.

An identifier is the sole key a perspective uses to find a handler, so two
identifiers are equal exactly when their rendered strings are equal.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Identifier:
    """Immutable ordered sequence of path segments.

    Usage:
        root = Identifier().with_key("CreateUser")
        str(root.with_key("named"))  # "CreateUser.named"
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, value: str) -> Identifier:
        """Build an identifier from a dotted string."""
        return cls(tuple(part for part in value.split(".") if part))

    @classmethod
    def coerce(cls, value: Identifier | str) -> Identifier:
        if isinstance(value, Identifier):
            return value
        return cls.parse(value)

    def with_key(self, key: str) -> Identifier:
        """Return a new identifier with key appended."""
        return Identifier(self.segments + (key,))

    @property
    def key(self) -> str:
        """Last segment, or an empty string for the root."""
        return self.segments[-1] if self.segments else ""

    def __str__(self) -> str:
        return ".".join(self.segments)

    def __repr__(self) -> str:
        return f"Identifier({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Identifier, str)):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    def __bool__(self) -> bool:
        return bool(self.segments)
