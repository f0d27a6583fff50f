"""MongoDB document store.

One MongoClient per process. pymongo pools connections internally and
the client is safe to share across request threads.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from bson.errors import InvalidDocument
from pymongo import MongoClient
from pymongo.errors import BulkWriteError, PyMongoError

from json_updates.interface import BulkWriteResult, DocumentStore, WriteFailure

logger = logging.getLogger("json_updates.mongo")


def failures_from_details(details: Mapping[str, Any]) -> tuple[WriteFailure, ...]:
    """Convert BulkWriteError.details['writeErrors'] into WriteFailures."""
    return tuple(
        WriteFailure(
            index=err["index"],
            code=err.get("code"),
            message=err.get("errmsg", ""),
        )
        for err in details.get("writeErrors") or ()
    )


class MongoDocumentStore(DocumentStore):
    """DocumentStore over a pymongo database."""

    def __init__(
        self,
        uri: str,
        db_name: str,
        timeout_ms: int = 10000,
        client: MongoClient | None = None,
    ):
        self._client = client or MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            appname="json-updates",
        )
        self._db = self._client[db_name]

    def insert_unordered(
        self, collection: str, documents: Sequence[Mapping[str, Any]]
    ) -> BulkWriteResult:
        submitted = len(documents)
        if not submitted:
            # insert_many refuses an empty list
            return BulkWriteResult(submitted=0)

        try:
            self._db[collection].insert_many(list(documents), ordered=False)
        except BulkWriteError as exc:
            details = exc.details or {}
            concern_errors = details.get("writeConcernErrors") or []
            if concern_errors:
                return BulkWriteResult(
                    submitted=submitted,
                    failures=failures_from_details(details),
                    error=f"write concern error: {concern_errors[0].get('errmsg', '')}",
                )
            return BulkWriteResult(
                submitted=submitted, failures=failures_from_details(details)
            )
        except PyMongoError as exc:
            logger.warning("insert_many into %s failed: %r", collection, exc)
            return BulkWriteResult(submitted=submitted, error=str(exc) or repr(exc))
        except (InvalidDocument, OverflowError) as exc:
            # raised while encoding: oversized documents, NUL in keys, ints wider than 64 bits
            logger.warning("insert_many into %s could not encode batch: %r", collection, exc)
            return BulkWriteResult(submitted=submitted, error=str(exc) or repr(exc))
        return BulkWriteResult(submitted=submitted)

    def close(self) -> None:
        self._client.close()
