"""Abstract document store interface and bulk write result types.

Backends report bulk write outcomes as data. Nothing above this layer
inspects driver exceptions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

DUPLICATE_KEY_CODE = 11000


@dataclass(frozen=True)
class WriteFailure:
    """One position of a bulk write that the store did not persist."""

    index: int
    code: int | None
    message: str = ""

    def __str__(self) -> str:
        return f"index {self.index}: code {self.code}: {self.message}"


@dataclass(frozen=True)
class Inserted:
    index: int


@dataclass(frozen=True)
class Conflict:
    index: int


@dataclass(frozen=True)
class Failed:
    index: int
    cause: WriteFailure


@dataclass(frozen=True)
class BulkWriteResult:
    """Outcome of a single unordered bulk insert.

    `failures` lists per-position failures. `error` is set when the write
    failed in a way no single position accounts for (connectivity,
    timeouts, write concern).
    """

    submitted: int
    failures: tuple[WriteFailure, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return not self.failures and self.error is None

    def outcomes(
        self, is_conflict: Callable[[WriteFailure], bool]
    ) -> list[Inserted | Conflict | Failed]:
        """Per-item outcome list, in submission order."""
        by_index = {f.index: f for f in self.failures}
        items: list[Inserted | Conflict | Failed] = []
        for i in range(self.submitted):
            failure = by_index.get(i)
            if failure is None:
                items.append(Inserted(i))
            elif is_conflict(failure):
                items.append(Conflict(i))
            else:
                items.append(Failed(i, failure))
        return items


class DocumentStore(ABC):
    """Storage backend consumed by the write pipeline."""

    @abstractmethod
    def insert_unordered(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> BulkWriteResult:
        """Insert every document, continuing past individual failures. No retries."""

    def close(self) -> None:
        """Release backend resources."""
