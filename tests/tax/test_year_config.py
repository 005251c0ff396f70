"""Tests for tax year parameter tables."""

from decimal import Decimal

import pytest

from src.tax.year_config import (
    SUPPORTED_TAX_YEARS,
    TAX_YEAR_2024,
    TAX_YEAR_PARAMETERS,
    TaxBracket,
    UnsupportedTaxYearError,
    YearParameters,
    get_year_parameters,
)


class TestGetYearParameters:
    """Tests for year lookup."""

    def test_supported_years_are_2020_through_2025(self) -> None:
        """Six consecutive years are available."""
        assert SUPPORTED_TAX_YEARS == (2020, 2021, 2022, 2023, 2024, 2025)

    def test_2024_values(self) -> None:
        """2024 row carries the published constants."""
        params = get_year_parameters(2024)
        assert params.credit_point_value_annual == Decimal("2904")
        assert params.surtax_threshold == Decimal("721560")
        assert params.surtax_rate == Decimal("0.03")
        assert params.brackets[0] == TaxBracket(Decimal("84120"), Decimal("0.10"))
        assert params.brackets[-1] == TaxBracket(None, Decimal("0.47"))

    def test_2025_reuses_2024(self) -> None:
        """2025 is the same record as 2024."""
        assert get_year_parameters(2025) is TAX_YEAR_2024

    def test_unsupported_year_raises(self) -> None:
        """Unknown years fail loudly with the available list."""
        with pytest.raises(UnsupportedTaxYearError) as exc_info:
            get_year_parameters(2019)
        assert exc_info.value.year == 2019
        assert exc_info.value.available == list(SUPPORTED_TAX_YEARS)
        assert "2019" in str(exc_info.value)

    def test_unsupported_year_is_value_error(self) -> None:
        """Callers catching ValueError still see lookup failures."""
        with pytest.raises(ValueError):
            get_year_parameters(2030)

    def test_alternate_table_is_used(self) -> None:
        """An injected table replaces the static one."""
        custom = YearParameters(
            tax_year=2099,
            brackets=(TaxBracket(None, Decimal("0.5")),),
            surtax_threshold=Decimal("1000000"),
            surtax_rate=Decimal("0"),
            credit_point_value_annual=Decimal("1"),
        )
        assert get_year_parameters(2099, {2099: custom}) is custom
        with pytest.raises(UnsupportedTaxYearError):
            get_year_parameters(2024, {2099: custom})

    def test_table_is_read_only(self) -> None:
        """The static table cannot be modified at runtime."""
        with pytest.raises(TypeError):
            TAX_YEAR_PARAMETERS[2030] = TAX_YEAR_2024  # type: ignore[index]


class TestYearParametersInvariants:
    """Bracket schedules must be contiguous and ascending."""

    @pytest.mark.parametrize("year", SUPPORTED_TAX_YEARS)
    def test_all_years_well_formed(self, year: int) -> None:
        """Every row ascends and ends in an unbounded band."""
        brackets = get_year_parameters(year).brackets
        limits = [b.upper_limit for b in brackets[:-1]]
        assert limits == sorted(limits)
        assert brackets[-1].upper_limit is None

    def _make(self, *brackets: TaxBracket) -> YearParameters:
        return YearParameters(
            tax_year=2000,
            brackets=brackets,
            surtax_threshold=Decimal("0"),
            surtax_rate=Decimal("0"),
            credit_point_value_annual=Decimal("0"),
        )

    def test_rejects_empty_schedule(self) -> None:
        with pytest.raises(ValueError, match="no brackets"):
            self._make()

    def test_rejects_descending_limits(self) -> None:
        with pytest.raises(ValueError, match="ascending"):
            self._make(
                TaxBracket(Decimal("200"), Decimal("0.1")),
                TaxBracket(Decimal("100"), Decimal("0.2")),
                TaxBracket(None, Decimal("0.3")),
            )

    def test_rejects_bounded_top_bracket(self) -> None:
        with pytest.raises(ValueError, match="unbounded"):
            self._make(TaxBracket(Decimal("100"), Decimal("0.1")))

    def test_rejects_unbounded_middle_bracket(self) -> None:
        with pytest.raises(ValueError, match="last bracket"):
            self._make(
                TaxBracket(None, Decimal("0.1")),
                TaxBracket(None, Decimal("0.2")),
            )

    def test_rejects_rate_above_one(self) -> None:
        with pytest.raises(ValueError, match="outside"):
            self._make(TaxBracket(None, Decimal("1.5")))
