"""FastAPI app factory for the MAI Scam dashboard API."""

from fastapi import FastAPI

from maiscam.api.dashboard import router as dashboard_router
from maiscam.observability import configure_logging


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance.
    """
    configure_logging()
    app = FastAPI(title="MAI Scam Dashboard API", version="0.1")
    app.include_router(dashboard_router)

    @app.get("/healthz", tags=["health"])
    def healthz():
        """Liveness probe."""
        return {"status": "ok"}

    return app


# For uvicorn, expose `app` at module level
app = create_app()

__all__ = ["app", "create_app"]
