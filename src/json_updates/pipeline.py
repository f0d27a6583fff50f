"""The write pipeline: access check, preparation, bulk write, reconciliation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from json_updates.auth import AccessChecker
from json_updates.compose import success_payload
from json_updates.errors import WriteRejectedError
from json_updates.interface import DocumentStore
from json_updates.models import WriteRequest
from json_updates.prepare import prepare_records
from json_updates.reconcile import (
    ConflictPredicate,
    Rejected,
    inserted_indexes,
    is_duplicate_key,
    reconcile,
)

logger = logging.getLogger("json_updates")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WritePipeline:
    """Handles one POST /data body at a time. Holds no per-request state."""

    def __init__(
        self,
        store: DocumentStore,
        check_access: AccessChecker,
        is_conflict: ConflictPredicate = is_duplicate_key,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.check_access = check_access
        self.is_conflict = is_conflict
        self.clock = clock

    def run(self, request: WriteRequest) -> dict:
        """Return the success payload, or raise a GatewayError."""
        self.check_access(request.token, request.db_collection)

        now = self.clock()
        batch = prepare_records(request.data, request.id_field, now)
        logger.debug(
            "Preparing %d of %d records for %s",
            len(batch),
            len(request.data),
            request.db_collection,
        )

        result = self.store.insert_unordered(
            request.db_collection, [doc.to_document() for doc in batch.documents]
        )
        outcome = reconcile(result, self.is_conflict)
        if isinstance(outcome, Rejected):
            raise WriteRejectedError(outcome.cause)

        inserted = inserted_indexes(outcome, len(batch))
        logger.info(
            "Wrote %d/%d records to %s (%d already present)",
            len(inserted),
            len(batch),
            request.db_collection,
            len(batch) - len(inserted),
        )
        return success_payload(inserted, batch.pairs)
