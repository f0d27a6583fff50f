"""Meta endpoints — root redirect and health."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from json_updates import __version__
from json_updates.config import GatewayConfig
from json_updates.deps import get_config

router = APIRouter(tags=["meta"])


@router.get("/", include_in_schema=False)
def root(config: GatewayConfig = Depends(get_config)):
    return RedirectResponse(config.redirect_url)


@router.get("/health")
def health():
    return {"status": "ok", "service": "json-updates", "version": __version__}
