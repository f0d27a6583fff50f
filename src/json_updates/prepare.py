"""Record preparation: identifier extraction and storage envelope."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from json_updates.models import PreparedBatch, PreparedDocument, Record


def extract_id(record: Record, id_field: str) -> str | None:
    """Return the record's identifier, or None if it has no string id."""
    value = record.get(id_field)
    if isinstance(value, str):
        return value
    return None


def prepare_records(
    records: Iterable[Record], id_field: str, now: datetime
) -> PreparedBatch:
    """Wrap every eligible record, in order. Ineligible records are dropped.

    All documents share `now` as their createdAt.
    """
    documents: list[PreparedDocument] = []
    pairs: list[tuple[str, Record]] = []
    for record in records:
        record_id = extract_id(record, id_field)
        if record_id is None:
            continue
        documents.append(PreparedDocument(id=record_id, data=record, created_at=now))
        pairs.append((record_id, record))
    return PreparedBatch(documents=tuple(documents), pairs=tuple(pairs))
