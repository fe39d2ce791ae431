"""
Result envelope for adapter operations.

Every public adapter operation answers through exactly one ``Result``:
``Ok(value)`` on success or ``Err(error)`` on failure, never both and never
a partial value. This replaces the callback convention of the host
framework (``cb(err, result)``) with an explicit value.

Manifesto:
    - **Explicit over Implicit:** Failures are values the caller must look at
    - **Exactly once:** An operation produces a single Ok or Err
    - **Composable:** map/flat_map chain follow-up work without try/except

Examples:
    >>> from db2bridge.core.result import Ok, Err
    >>> Ok([{"ID": 1}]).map(len).unwrap()
    1
    >>> Err(ValueError("oops")).unwrap_or([])
    []

    Pattern matching:

    >>> match adapter.find("primary", "users", {"limit": 1}):
    ...     case Ok(rows):
    ...         print(rows)
    ...     case Err(error):
    ...         print(error)

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or() or pattern matching for safe extraction

Tags:
    result-pattern, error-handling, functional-programming, type-safety

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from db2bridge.core.errors import AdapterError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        return self

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map`` and ``flat_map`` pass an Err through unchanged, so a failed
    driver call short-circuits any follow-up row processing.
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return self  # type: ignore[return-value]

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return self  # type: ignore[return-value]

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with error for side effects, return self."""
        f(self.error)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, AdapterError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Run ``f`` and wrap its outcome in a Result.

    Only ``AdapterError`` is converted to ``Err``; anything else is a bug in
    the caller or in this package and propagates.

    Examples:
        >>> try_result(lambda: 42)
        Ok(42)
    """
    try:
        return Ok(f())
    except AdapterError as e:
        return Err(e)


__all__ = [
    "Result",
    "Ok",
    "Err",
    "try_result",
]
