"""Health check endpoint for infrastructure verification."""

from fastapi import APIRouter
from pydantic import BaseModel

from src.core.config import settings
from src.tax.year_config import SUPPORTED_TAX_YEARS

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    environment: str
    tax_years: list[int]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report liveness and the tax years the estimator can price.

    Returns:
        HealthResponse with status and supported years.
    """
    return HealthResponse(
        status="ok",
        environment=settings.environment,
        tax_years=list(SUPPORTED_TAX_YEARS),
    )
