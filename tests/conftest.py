"""Pytest configuration and shared fixtures for tests."""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.estimator.models import (
    CalculatorInput,
    Form106Entry,
    QuestionnaireAnswers,
    ResidencyAnswer,
)
from src.main import app


@pytest.fixture
def resident_only() -> QuestionnaireAnswers:
    """Questionnaire with only full-year residency confirmed."""
    return QuestionnaireAnswers(is_israeli_resident_full_year=ResidencyAnswer.YES)


@pytest.fixture
def single_form_input(resident_only: QuestionnaireAnswers) -> CalculatorInput:
    """Partial-year employee: 60k income, 5.5k withheld, resident."""
    return CalculatorInput(
        year=2024,
        forms=(
            Form106Entry(
                taxable_income=Decimal("60000"),
                income_tax_withheld=Decimal("5500"),
                credit_points_granted=Decimal("0"),
            ),
        ),
        questionnaire=resident_only,
    )


@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async client bound to the ASGI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
