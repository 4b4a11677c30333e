"""Result union for operations that fail with a typed error value.

Settings resolution returns ``Result[CompilerSettings, ConfigurationError]``
instead of raising, so the builder can map a failure to an ABORT outcome
with a plain ``isinstance`` check.

Example:
    >>> result = resolver.resolve(unit)
    >>> if isinstance(result, Err):
    ...     report(result.error)
    ... else:
    ...     settings = result.value
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result holding a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Return the held value."""
        return self.value

    def unwrap_err(self) -> Exception:
        """Raise, since an Ok holds no error."""
        raise ValueError(f"unwrap_err() called on Ok({self.value!r})")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result holding an exception instance (not raised)."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> object:
        """Raise the held error."""
        raise self.error

    def unwrap_err(self) -> E:
        """Return the held error."""
        return self.error


Result = Union[Ok[T], Err[E]]
"""Either ``Ok[T]`` or ``Err[E]``."""
