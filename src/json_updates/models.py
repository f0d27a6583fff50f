"""Request models and the storage envelope."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

Record = dict[str, Any]


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, list):
        return any(_has_non_finite(v) for v in value)
    return False


class WriteRequest(BaseModel):
    """Body of POST /data."""

    db_collection: str
    token: str
    data: list[Record]
    id_field: str

    @field_validator("data")
    @classmethod
    def finite_numbers_only(cls, records: list[Record]) -> list[Record]:
        # NaN and Infinity parse but cannot be echoed back as JSON
        if _has_non_finite(records):
            raise ValueError("NaN and Infinity are not valid JSON numbers")
        return records


@dataclass(frozen=True)
class PreparedDocument:
    """A record wrapped for storage. `id` becomes the store's `_id`."""

    id: str
    data: Record
    created_at: datetime

    def to_document(self) -> dict[str, Any]:
        return {"_id": self.id, "data": self.data, "createdAt": self.created_at}


@dataclass(frozen=True)
class PreparedBatch:
    """Prepared documents, index-aligned with (id, original record) pairs."""

    documents: tuple[PreparedDocument, ...]
    pairs: tuple[tuple[str, Record], ...]

    def __len__(self) -> int:
        return len(self.documents)
