"""json-updates — FastAPI gateway application.

Accepts batches of JSON records and inserts the ones MongoDB does not
already hold. Clients only reach the database through POST /data.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from json_updates import __version__
from json_updates.auth import make_access_checker
from json_updates.backends.mongo import MongoDocumentStore
from json_updates.compose import error_payload
from json_updates.config import GatewayConfig, load_config
from json_updates.errors import (
    ForbiddenError,
    UnauthorizedError,
    WriteRejectedError,
)
from json_updates.interface import DocumentStore
from json_updates.pipeline import WritePipeline
from json_updates.routes import data, meta

logger = logging.getLogger("json_updates")
audit_logger = logging.getLogger("json_updates.audit")


def _mask_uri(uri: str) -> str:
    scheme, sep, rest = uri.partition("://")
    if not sep or "@" not in rest:
        return uri
    return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"


def build_pipeline(config: GatewayConfig, store: DocumentStore) -> WritePipeline:
    return WritePipeline(
        store=store,
        check_access=make_access_checker(config.access_token, config.collections_prefix),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: connect to MongoDB unless a store was injected. Shutdown: close it."""
    config: GatewayConfig = app.state.config
    owned = app.state.pipeline is None
    if owned:
        logger.info(
            "Connecting to MongoDB at %s (database: %s)",
            _mask_uri(config.mongo_uri),
            config.mongo_db_name,
        )
        store = MongoDocumentStore(
            uri=config.mongo_uri,
            db_name=config.mongo_db_name,
            timeout_ms=config.mongo_timeout_ms,
        )
        app.state.pipeline = build_pipeline(config, store)
    logger.info(
        "json-updates gateway ready (collections prefix: %r)",
        config.collections_prefix,
    )
    yield
    if owned:
        app.state.pipeline.store.close()
        app.state.pipeline = None
    logger.info("json-updates gateway shut down")


def create_app(
    config: GatewayConfig | None = None,
    store: DocumentStore | None = None,
) -> FastAPI:
    """Application factory.

    Without `store`, a MongoDB client is opened in the lifespan.
    """
    if config is None:
        config = load_config()

    app = FastAPI(
        title="json-updates",
        description="Write gateway — batched insert-if-absent into MongoDB",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.pipeline = build_pipeline(config, store) if store is not None else None

    # ── Exception handlers ────────────────────────────────────

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))

    @app.exception_handler(ForbiddenError)
    async def forbidden_handler(request: Request, exc: ForbiddenError):
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))

    @app.exception_handler(WriteRejectedError)
    async def write_rejected_handler(request: Request, exc: WriteRejectedError):
        logger.error("Mongo insertMany error, %s", exc.cause)
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        logger.debug("Rejected request body: %s", exc.errors())
        return JSONResponse(status_code=400, content=error_payload("Invalid request body"))

    # ── Audit middleware ──────────────────────────────────────

    @app.middleware("http")
    async def audit_log(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start
        audit_logger.info(
            "%s %s %d %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    # ── Routers ───────────────────────────────────────────────

    app.include_router(meta.router)
    app.include_router(data.router)

    return app
