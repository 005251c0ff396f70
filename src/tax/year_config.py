"""Tax year-specific parameters for Israeli income tax.

This module centralizes per-year constants (bracket schedule, surtax, credit
point value) so the estimator never hardcodes them. Adding a tax year means
adding a data row here, not changing calculation code.

Example:
    >>> from src.tax.year_config import get_year_parameters
    >>> params = get_year_parameters(2024)
    >>> print(f"Credit point value: {params.credit_point_value_annual}")
    Credit point value: 2904
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType


class UnsupportedTaxYearError(ValueError):
    """Raised when parameters are requested for a year with no data row."""

    def __init__(self, year: int, available: list[int]) -> None:
        self.year = year
        self.available = available
        super().__init__(
            f"No tax parameters for year {year}. Available years: {available}"
        )


@dataclass(frozen=True)
class TaxBracket:
    """Single band of the progressive schedule.

    Attributes:
        upper_limit: Inclusive upper bound of the band. None means unbounded.
        rate: Marginal rate applied inside the band (0.10 = 10%).
    """

    upper_limit: Decimal | None
    rate: Decimal


@dataclass(frozen=True)
class YearParameters:
    """Tax year-specific constants.

    All monetary values are Decimal for precision in tax calculations.
    This dataclass is frozen to prevent accidental modification.

    Attributes:
        tax_year: The tax year these values apply to.
        brackets: Ascending bracket schedule; the last band is unbounded.
        surtax_threshold: Annual income above which the flat surtax applies.
        surtax_rate: Surtax rate on income above the threshold.
        credit_point_value_annual: Currency value of one credit point.
    """

    tax_year: int
    brackets: tuple[TaxBracket, ...]
    surtax_threshold: Decimal
    surtax_rate: Decimal
    credit_point_value_annual: Decimal

    def __post_init__(self) -> None:
        if not self.brackets:
            raise ValueError(f"Tax year {self.tax_year} has no brackets")

        previous = Decimal("0")
        for index, bracket in enumerate(self.brackets):
            if not Decimal("0") <= bracket.rate <= Decimal("1"):
                raise ValueError(
                    f"Bracket {index} of {self.tax_year} has rate {bracket.rate} "
                    "outside [0, 1]"
                )
            is_last = index == len(self.brackets) - 1
            if bracket.upper_limit is None:
                if not is_last:
                    raise ValueError(
                        f"Only the last bracket of {self.tax_year} may be unbounded"
                    )
                continue
            if bracket.upper_limit <= previous:
                raise ValueError(
                    f"Brackets of {self.tax_year} must be strictly ascending "
                    f"({bracket.upper_limit} <= {previous})"
                )
            previous = bracket.upper_limit

        if self.brackets[-1].upper_limit is not None:
            raise ValueError(f"Top bracket of {self.tax_year} must be unbounded")


def _brackets(*limits: str) -> tuple[TaxBracket, ...]:
    """Build the standard six-band schedule from its five upper limits."""
    rates = ("0.10", "0.14", "0.20", "0.31", "0.35", "0.47")
    uppers: list[Decimal | None] = [Decimal(limit) for limit in limits]
    uppers.append(None)
    return tuple(
        TaxBracket(upper_limit=upper, rate=Decimal(rate))
        for upper, rate in zip(uppers, rates, strict=True)
    )


SURTAX_RATE = Decimal("0.03")

TAX_YEAR_2020 = YearParameters(
    tax_year=2020,
    brackets=_brackets("75960", "108960", "174960", "243120", "505920"),
    surtax_threshold=Decimal("651600"),
    surtax_rate=SURTAX_RATE,
    credit_point_value_annual=Decimal("2628"),
)

TAX_YEAR_2021 = YearParameters(
    tax_year=2021,
    brackets=_brackets("75480", "108360", "173880", "241680", "502920"),
    surtax_threshold=Decimal("647640"),
    surtax_rate=SURTAX_RATE,
    credit_point_value_annual=Decimal("2616"),
)

TAX_YEAR_2022 = YearParameters(
    tax_year=2022,
    brackets=_brackets("77400", "110880", "178080", "247440", "514920"),
    surtax_threshold=Decimal("663240"),
    surtax_rate=SURTAX_RATE,
    credit_point_value_annual=Decimal("2676"),
)

TAX_YEAR_2023 = YearParameters(
    tax_year=2023,
    brackets=_brackets("81480", "116760", "187440", "260520", "542160"),
    surtax_threshold=Decimal("698280"),
    surtax_rate=SURTAX_RATE,
    credit_point_value_annual=Decimal("2820"),
)

TAX_YEAR_2024 = YearParameters(
    tax_year=2024,
    brackets=_brackets("84120", "120720", "193800", "269280", "560280"),
    surtax_threshold=Decimal("721560"),
    surtax_rate=SURTAX_RATE,
    credit_point_value_annual=Decimal("2904"),
)

# 2025 values were unpublished when the table was built; reuse 2024 unchanged.
TAX_YEAR_2025 = TAX_YEAR_2024

# Registry of available tax year parameters
TAX_YEAR_PARAMETERS: Mapping[int, YearParameters] = MappingProxyType(
    {
        2020: TAX_YEAR_2020,
        2021: TAX_YEAR_2021,
        2022: TAX_YEAR_2022,
        2023: TAX_YEAR_2023,
        2024: TAX_YEAR_2024,
        2025: TAX_YEAR_2025,
    }
)

SUPPORTED_TAX_YEARS: tuple[int, ...] = tuple(sorted(TAX_YEAR_PARAMETERS))


def get_year_parameters(
    year: int, table: Mapping[int, YearParameters] | None = None
) -> YearParameters:
    """Get parameters for a specific tax year.

    Args:
        year: The tax year (e.g., 2024).
        table: Optional alternate year table. Defaults to TAX_YEAR_PARAMETERS.

    Returns:
        YearParameters for the specified year.

    Raises:
        UnsupportedTaxYearError: If no parameters exist for the requested year.

    Example:
        >>> params = get_year_parameters(2025)
        >>> params is get_year_parameters(2024)
        True
    """
    lookup = TAX_YEAR_PARAMETERS if table is None else table
    if year not in lookup:
        raise UnsupportedTaxYearError(year, sorted(lookup))
    return lookup[year]
