"""Write endpoint — batched insert-if-absent.

Responds with the records that were newly stored. Records already
present (duplicate id) are left out without error.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from json_updates.deps import get_pipeline
from json_updates.models import WriteRequest
from json_updates.pipeline import WritePipeline

router = APIRouter(tags=["data"])


@router.post("/data")
def write_data(
    body: WriteRequest,
    pipeline: WritePipeline = Depends(get_pipeline),
):
    return pipeline.run(body)
