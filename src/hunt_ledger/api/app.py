"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hunt_ledger.api.sessions import router as sessions_router
from hunt_ledger.api.submissions import router as submissions_router
from hunt_ledger.api.teams import router as teams_router
from hunt_ledger.app_logging import configure_logging
from hunt_ledger.containers import AppContainer
from hunt_ledger.errors import LedgerError, StorageError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            reclaimed = await run_in_threadpool(
                app.state.container.submission_ledger.reclaim_orphans
            )
        except LedgerError:
            logger.exception("Failed to reclaim orphaned photos")
        else:
            logger.info("Startup photo sweep done", extra={"count": len(reclaimed)})
        yield

    app = FastAPI(title="Hunt Ledger", lifespan=lifespan)
    app.state.container = container

    app.include_router(sessions_router)
    app.include_router(teams_router)
    app.include_router(submissions_router)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        if isinstance(exc, StorageError):
            logger.error(
                "Storage failure",
                extra={"path": request.url.path, "error": exc.message},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": _detail(container, exc)},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_errors(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Reduce request validation errors to location and message."""
    return [
        {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]


def _detail(container: AppContainer, exc: LedgerError) -> str:
    """Hide storage internals outside local development."""
    if isinstance(exc, StorageError) and container.settings.environment != "local":
        return "Storage failure, please retry"
    return exc.message
