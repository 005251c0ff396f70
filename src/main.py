"""FastAPI application entry point with lifespan management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.estimate import router as estimate_router
from src.api.health import router as health_router
from src.api.middleware import RequestContextMiddleware
from src.core.config import settings
from src.core.logging import configure_logging, get_logger
from src.tax.year_config import SUPPORTED_TAX_YEARS

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    The estimator holds no connections or caches, so startup only configures
    logging and shutdown only logs.
    """
    configure_logging()
    logger.info(
        "Starting application",
        environment=settings.environment,
        tax_years=list(SUPPORTED_TAX_YEARS),
    )

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title="Form 106 Refund Estimator",
    description="Informational income-tax refund estimate from employer Form 106 reports",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware for the wizard frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request context middleware
app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health_router)
app.include_router(estimate_router)


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_config=None,
    )


if __name__ == "__main__":
    run()
