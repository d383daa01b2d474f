# utils/results.py
"""
results.py

Small helpers shared by the service layer:

- Result: the outcome of a best-effort async operation. Callers get either a
  value or the error that stopped it, never a silently swallowed failure.
- RequestVersions: a monotonic counter per logical resource ("bags",
  "orders", ...). A response is only applied if no newer request for the same
  resource was issued while it was in flight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Exception] = None
    # True when the response arrived after a newer request superseded it
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Result[T]":
        return cls(error=error)

    @classmethod
    def discarded(cls, value: T = None) -> "Result[T]":
        return cls(value=value, stale=True)

    def unwrap(self) -> T:
        # Re-raise the stored failure for callers that prefer exceptions.
        if self.error is not None:
            raise self.error
        return self.value


class RequestVersions:
    def __init__(self):
        self._latest: dict[str, int] = {}

    def issue(self, resource: str) -> int:
        version = self._latest.get(resource, 0) + 1
        self._latest[resource] = version
        return version

    def is_current(self, resource: str, version: int) -> bool:
        return self._latest.get(resource, 0) == version

    def invalidate(self, resource: str) -> None:
        # Any response still in flight for this resource becomes stale.
        self.issue(resource)
