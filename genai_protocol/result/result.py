"""Result type used by the parsing helpers.

Parsers that can meet malformed wire data (SSE frames, file URIs) return
``Ok(value)`` or ``Error(reason)`` instead of raising, and the caller decides
with ``match`` whether the failure becomes an exception.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar


_T = TypeVar("_T")
_E = TypeVar("_E")


@dataclass(frozen=True)
class Ok(Generic[_T]):  # noqa: UP046
    value: _T

    def __repr__(self):
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Error(Generic[_E]):  # noqa: UP046
    """Failure variant carrying the reason."""

    value: _E

    def __repr__(self):
        return f"Error({self.value!r})"


Result = Ok[_T] | Error[_E]
