from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from storehouse.database import STORAGE_BACKEND, LOG_PLAIN_KANBAN_EDITS
from storehouse.exceptions import NotFoundError, ValidationFailure, format_validation_errors
from storehouse.routers import positions, kanban, stats, history
from storehouse.services.warehouse import Warehouse
from storehouse.storage.base import StorageProvider
from storehouse.storage.memory import MemoryStorageProvider
from storehouse.storage.sql import SqlStorageProvider

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def provider_from_env(backend: str = STORAGE_BACKEND) -> StorageProvider:
    if backend == "memory":
        return MemoryStorageProvider()
    if backend == "database":
        return SqlStorageProvider()
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}', expected 'memory' or 'database'")


def create_app(
    storage_provider: Optional[StorageProvider] = None,
    log_plain_kanban_edits: bool = LOG_PLAIN_KANBAN_EDITS,
    clock: Optional[Callable[[], datetime]] = None
) -> FastAPI:
    provider = storage_provider or provider_from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        provider.initialize()
        with provider.open() as storage:
            created = Warehouse(storage).initialize()
        logger.info(f"Storehouse started with {type(provider).__name__} ({created} positions seeded)")
        yield

    app = FastAPI(
        title="Storehouse",
        description="Pallet rack positions, kanban expedition queue and movement history API",
        version=VERSION,
        lifespan=lifespan
    )
    app.state.storage_provider = provider
    app.state.log_plain_kanban_edits = log_plain_kanban_edits
    app.state.clock = clock

    # Global handler for Pydantic validation errors Formatting
    @app.exception_handler(RequestValidationError)
    async def fastapi_validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": format_validation_errors(exc.errors())}
        )

    @app.exception_handler(ValidationFailure)
    async def validation_failure_handler(request: Request, exc: ValidationFailure):
        return JSONResponse(status_code=422, content={"detail": exc.errors})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.get("/")
    def read_root():
        return {
            "message": "Storehouse API",
            "status": "running",
            "version": VERSION
        }

    app.include_router(positions.router)
    app.include_router(kanban.router)
    app.include_router(stats.router)
    app.include_router(history.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
