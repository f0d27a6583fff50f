"""Failure reconciliation for unordered bulk writes.

Duplicate-key conflicts are expected: a client resubmitting records it
already sent. A batch whose only failures are conflicts is a success with
fewer inserted records. Any other failure rejects the whole batch, even
though some documents may have been persisted, because the response has no
way to report mixed outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from json_updates.interface import (
    DUPLICATE_KEY_CODE,
    BulkWriteResult,
    Failed,
    Inserted,
    WriteFailure,
)

ConflictPredicate = Callable[[WriteFailure], bool]


def is_duplicate_key(failure: WriteFailure) -> bool:
    """MongoDB signals a unique index violation with code 11000."""
    return failure.code == DUPLICATE_KEY_CODE


@dataclass(frozen=True)
class AllInserted:
    pass


@dataclass(frozen=True)
class PartiallyInserted:
    inserted_indexes: frozenset[int]


@dataclass(frozen=True)
class Rejected:
    cause: str


WriteOutcome = Union[AllInserted, PartiallyInserted, Rejected]


def reconcile(
    result: BulkWriteResult, is_conflict: ConflictPredicate = is_duplicate_key
) -> WriteOutcome:
    if result.ok:
        return AllInserted()
    if result.error is not None:
        return Rejected(result.error)

    items = result.outcomes(is_conflict)
    unexpected = [item.cause for item in items if isinstance(item, Failed)]
    if unexpected:
        return Rejected("; ".join(str(f) for f in unexpected))

    return PartiallyInserted(
        frozenset(item.index for item in items if isinstance(item, Inserted))
    )


def inserted_indexes(outcome: WriteOutcome, submitted: int) -> frozenset[int]:
    """Index set persisted by a non-rejected outcome."""
    if isinstance(outcome, AllInserted):
        return frozenset(range(submitted))
    if isinstance(outcome, PartiallyInserted):
        return outcome.inserted_indexes
    raise ValueError(f"rejected outcome has no inserted set: {outcome.cause}")
