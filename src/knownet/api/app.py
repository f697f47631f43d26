"""FastAPI application initialization and configuration."""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from knownet.api.dependencies import get_config, initialize_services
from knownet.api.routers import ai_router, graph_router, query_router, statements_router
from knownet.config.constants import APP_VERSION
from knownet.core.logging_config import get_logger
from knownet.errors import (
    DuplicateIdError,
    HasDependentsError,
    KnowNetError,
    NotFoundError,
    ValidationError,
)
from knownet.services.llm_service import LLMServiceError
from knownet.services.storage import StorageError
from knownet.services.theory_generator import TheoryGenerationError


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Load the graph before the first request."""
    initialize_services()
    config = get_config()
    get_logger(__name__).info(
        "knownet API ready (data file: %s)", config.storage.data_path
    )
    yield


app = FastAPI(
    title="KnowNet API",
    description="Personal knowledge network of axioms, theories and conclusions",
    version=APP_VERSION,
    lifespan=lifespan,
)


def _status_for(exc: KnowNetError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (DuplicateIdError, HasDependentsError)):
        return 409
    return 400


@app.exception_handler(KnowNetError)
async def knownet_error_handler(_request: Request, exc: KnowNetError) -> JSONResponse:
    return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
    get_logger(__name__).error("Storage failure: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(TheoryGenerationError)
@app.exception_handler(LLMServiceError)
async def llm_error_handler(_request: Request, exc: RuntimeError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.include_router(statements_router)
app.include_router(query_router)
app.include_router(graph_router)
app.include_router(ai_router)


def main(host: str | None = None, port: int | None = None) -> None:
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    from knownet.core.logging_config import setup_logging

    config = get_config()
    setup_logging(config.logging)
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_config=None,
    )
