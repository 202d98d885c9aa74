"""Result type used to carry per-row outcomes through a batch without raising."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar('T')
E = TypeVar('E')


@dataclass(frozen=True)
class Success(Generic[T]):
    """A row (or any unit of work) that produced a value."""
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A unit of work that failed; ``error`` is usually the raised exception."""
    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self):
        """Re-raise the stored error."""
        if isinstance(self.error, Exception):
            raise self.error
        raise Exception(str(self.error))


Result = Union[Success[T], Failure[E]]
