"""FastAPI dependencies for json-updates routes."""

from __future__ import annotations

from fastapi import Request

from json_updates.config import GatewayConfig
from json_updates.pipeline import WritePipeline


def get_pipeline(request: Request) -> WritePipeline:
    """Get the write pipeline from app state."""
    return request.app.state.pipeline


def get_config(request: Request) -> GatewayConfig:
    return request.app.state.config
