"""Tax year-specific parameter tables."""

from src.tax.year_config import (
    SUPPORTED_TAX_YEARS,
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_PARAMETERS,
    TaxBracket,
    UnsupportedTaxYearError,
    YearParameters,
    get_year_parameters,
)

__all__ = [
    "SUPPORTED_TAX_YEARS",
    "TAX_YEAR_2024",
    "TAX_YEAR_2025",
    "TAX_YEAR_PARAMETERS",
    "TaxBracket",
    "UnsupportedTaxYearError",
    "YearParameters",
    "get_year_parameters",
]
