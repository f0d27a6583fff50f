"""In-memory document store for tests and local runs.

Mirrors MongoDB's unordered insert semantics: every document is attempted,
duplicate `_id`s fail with code 11000, and the rest are kept.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Mapping, Optional, Sequence

from json_updates.interface import (
    DUPLICATE_KEY_CODE,
    BulkWriteResult,
    DocumentStore,
    WriteFailure,
)

# MongoDB BadValue
REJECTED_CODE = 2

Rejector = Callable[[Mapping[str, Any]], Optional[str]]


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store. `reject` may veto individual documents."""

    def __init__(self, reject: Rejector | None = None):
        self._collections: dict[str, dict[Any, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._reject = reject
        self.unavailable: str | None = None
        self.write_calls = 0

    def insert_unordered(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> BulkWriteResult:
        with self._lock:
            self.write_calls += 1
            if self.unavailable is not None:
                return BulkWriteResult(submitted=len(documents), error=self.unavailable)

            stored = self._collections.setdefault(collection, {})
            failures: list[WriteFailure] = []
            for index, doc in enumerate(documents):
                reason = self._reject(doc) if self._reject else None
                if reason is not None:
                    failures.append(WriteFailure(index, REJECTED_CODE, reason))
                    continue
                key = doc["_id"]
                if key in stored:
                    failures.append(
                        WriteFailure(
                            index,
                            DUPLICATE_KEY_CODE,
                            f"E11000 duplicate key error collection: {collection} "
                            f"dup key: {{ _id: {key!r} }}",
                        )
                    )
                    continue
                stored[key] = copy.deepcopy(dict(doc))
            return BulkWriteResult(submitted=len(documents), failures=tuple(failures))

    def find(self, collection: str, doc_id: Any) -> dict[str, Any] | None:
        with self._lock:
            return self._collections.get(collection, {}).get(doc_id)

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))
