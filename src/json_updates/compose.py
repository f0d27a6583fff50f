"""Response payloads for POST /data."""

from __future__ import annotations

from typing import AbstractSet, Any, Sequence

from json_updates.models import Record


def success_payload(
    inserted: AbstractSet[int], pairs: Sequence[tuple[str, Record]]
) -> dict[str, Any]:
    """Echo the original records at the inserted positions."""
    return {
        "type": "success",
        "data": [record for i, (_id, record) in enumerate(pairs) if i in inserted],
    }


def error_payload(message: str) -> dict[str, str]:
    return {"type": "error", "message": message}
