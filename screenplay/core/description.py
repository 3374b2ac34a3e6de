"""Human-readable descriptions of actions.

Descriptions are derived from identifiers and parameters, so a test report
can say "Create user named 'dave' aged '20'" for
``CreateUser.named("dave").aged(20)``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

# Word boundaries: lower→Upper, Upper→Upper+lower (acronyms), letter↔digit
_CAMEL_BOUNDARY = re.compile(
    r"(?<=[a-z])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])|(?<=[A-Za-z])(?=\d)|(?<=\d)(?=[A-Za-z])"
)
_SEPARATORS = re.compile(r"[\s._\-]+")


def split_words(text: str) -> list[str]:
    """Split camelCase, dotted, snake_case and spaced text into words."""
    words: list[str] = []
    for chunk in _SEPARATORS.split(text):
        if chunk:
            words.extend(w for w in _CAMEL_BOUNDARY.split(chunk) if w)
    return words


def sentence_case(text: str) -> str:
    """Lower-case every word and capitalise the first one.

    Examples:
        sentence_case("CreateUser")  # "Create user"
        sentence_case("SignUp.as")   # "Sign up as"
    """
    words = [w.lower() for w in split_words(text)]
    if not words:
        return ""
    words[0] = words[0][:1].upper() + words[0][1:]
    return " ".join(words)


@dataclass(frozen=True)
class Description:
    """Immutable sentence fragment.

    Every operation returns a new Description.
    """

    value: str = ""

    @classmethod
    def from_id(cls, identifier: object) -> Description:
        return cls(sentence_case(str(identifier)))

    def with_words(self, words: Iterable[str]) -> Description:
        parts = [self.value] if self.value else []
        parts.extend(str(w) for w in words)
        return Description(" ".join(p for p in parts if p))

    def with_params(self, values: Mapping[str, Any] | Iterable[Any]) -> Description:
        if isinstance(values, Mapping):
            values = values.values()
        return self.with_words(f"'{value}'" for value in values)

    def with_method(self, name: str) -> Description:
        return self.with_words([sentence_case(name).lower()])

    def with_key(self, key: str) -> Description:
        """Noun phrase for Upper keys (roots), verb phrase for lower keys (methods)."""
        if key[:1].isupper():
            return self.with_words([sentence_case(key)])
        return self.with_method(key)

    def __str__(self) -> str:
        return self.value

    def __bool__(self) -> bool:
        return bool(self.value)
