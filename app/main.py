from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Response

from app.config import collect_settings_errors, get_logging_settings
from app.schemas.comparison import HealthResponse


def _validate_env() -> None:
    """
    Validate environment-driven settings at startup.

    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle.
    """

    errors = collect_settings_errors()
    if errors:
        raise RuntimeError(
            "Startup validation failed, invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=get_logging_settings().level_number,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Connectivity Comparison API",
        version="1.0.0",
    )

    from app.api.routers import indicators_router, upload_router

    application.include_router(indicators_router)
    application.include_router(upload_router)

    @application.get("/api/health", response_model=HealthResponse)
    def healthcheck(response: Response) -> HealthResponse:
        response.headers["Cache-Control"] = "no-store"
        return HealthResponse(ok=True, ts=int(time.time() * 1000))

    logging.getLogger(__name__).info("Connectivity Comparison API configured")
    return application


app = create_app()
