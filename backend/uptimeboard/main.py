"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .exceptions import (
    InvalidTransitionError,
    MonitorValidationError,
    SubmissionError,
    SubmissionInProgressError,
)
from .routers import intervals_router, monitor_types_router, monitors_router
from .store import close_store, init_store

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting UptimeBoard")

    init_store()
    logger.info(f"Store client ready for {settings.store_url}")

    yield

    await close_store()
    logger.info("Shutdown complete")


def register_exception_handlers(app: FastAPI):
    """Map core errors onto HTTP responses."""

    @app.exception_handler(MonitorValidationError)
    async def validation_error_handler(request: Request, exc: MonitorValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Validation failed",
                "errors": [error.to_dict() for error in exc.errors],
            },
        )

    @app.exception_handler(SubmissionInProgressError)
    async def submission_in_progress_handler(request: Request, exc: SubmissionInProgressError):
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(SubmissionError)
    async def submission_error_handler(request: Request, exc: SubmissionError):
        return JSONResponse(status_code=502, content={"detail": exc.message})

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="UptimeBoard",
        description="Define HTTP, ping, port and DNS monitors and their alerting",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware for the dashboard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict to your domain
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(monitor_types_router)
    app.include_router(intervals_router)
    app.include_router(monitors_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.web_port)
