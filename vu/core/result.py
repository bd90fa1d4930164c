"""Result type for explicit error handling.

Every network-facing operation in vu returns ``Result[T, E]`` instead of
raising, so a failing service can be turned into a recorded value without
try/except blocks spread across the pipeline.

Usage:
    match resolver.resolve(source):
        case Ok(version):
            ...
        case Err(RateLimited()):
            ...
        case Err(error):
            log(str(error))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

__all__ = ["Ok", "Err", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result holding ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result holding ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
