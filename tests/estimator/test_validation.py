"""Tests for boundary input validation."""

from decimal import Decimal

import pytest

from src.core.config import settings
from src.estimator.models import CalculatorInput, Form106Entry
from src.estimator.validation import (
    InputValidationError,
    ensure_valid,
    validate_form_entry,
    validate_forms,
    validate_request_header,
)


def _form(income: str = "100000", withheld: str = "10000", points: str = "2.25") -> Form106Entry:
    return Form106Entry(
        taxable_income=Decimal(income),
        income_tax_withheld=Decimal(withheld),
        credit_points_granted=Decimal(points),
    )


class TestValidateRequestHeader:
    """Tests for year and form count checks."""

    def test_valid(self) -> None:
        assert validate_request_header(2024, 2) == {}

    def test_unsupported_year(self) -> None:
        errors = validate_request_header(2019, 1)
        assert set(errors) == {"year"}
        assert "2020" in errors["year"]
        assert "2025" in errors["year"]

    @pytest.mark.parametrize("count", [0, 21])
    def test_form_count_out_of_range(self, count: int) -> None:
        assert set(validate_request_header(2024, count)) == {"formCount"}

    def test_form_count_limit_follows_settings(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "max_forms_per_request", 3)
        assert validate_request_header(2024, 3) == {}
        assert "formCount" in validate_request_header(2024, 4)


class TestValidateFormEntry:
    """Tests for per-form checks."""

    def test_valid_entry(self) -> None:
        assert validate_form_entry(_form(), 0) == {}

    def test_negative_income(self) -> None:
        errors = validate_form_entry(_form(income="-1", withheld="0"), 2)
        assert set(errors) == {"form_2_taxableIncome"}

    def test_negative_withholding(self) -> None:
        errors = validate_form_entry(_form(withheld="-5"), 0)
        assert set(errors) == {"form_0_incomeTaxWithheld"}

    def test_withholding_above_income_hints_field_042(self) -> None:
        errors = validate_form_entry(_form(income="1000", withheld="2000"), 1)
        assert "042" in errors["form_1_incomeTaxWithheld"]

    def test_withholding_with_zero_income_allowed(self) -> None:
        """Zero income with withholding is a warning case, not an input error."""
        assert validate_form_entry(_form(income="0", withheld="1000"), 0) == {}

    @pytest.mark.parametrize("points", ["-0.5", "10.25"])
    def test_credit_points_out_of_range(self, points: str) -> None:
        errors = validate_form_entry(_form(points=points), 0)
        assert set(errors) == {"form_0_creditPointsGranted"}

    def test_credit_points_bounds_inclusive(self) -> None:
        assert validate_form_entry(_form(points="0"), 0) == {}
        assert validate_form_entry(_form(points="10"), 0) == {}


class TestEnsureValid:
    """Tests for whole-input validation."""

    def test_merges_errors_across_forms(self) -> None:
        forms = [_form(), _form(income="-1", withheld="0"), _form(points="11")]
        assert set(validate_forms(forms)) == {
            "form_1_taxableIncome",
            "form_2_creditPointsGranted",
        }

    def test_valid_input_passes(self) -> None:
        ensure_valid(CalculatorInput(year=2024, forms=(_form(),)))

    def test_empty_forms_rejected(self) -> None:
        with pytest.raises(InputValidationError) as exc_info:
            ensure_valid(CalculatorInput(year=2024, forms=()))
        assert "formCount" in exc_info.value.errors

    def test_collects_all_errors(self) -> None:
        with pytest.raises(InputValidationError) as exc_info:
            ensure_valid(
                CalculatorInput(year=2031, forms=(_form(withheld="-1"),))
            )
        assert set(exc_info.value.errors) == {"year", "form_0_incomeTaxWithheld"}


class TestAmountCeiling:
    """Amounts above the per-form ceiling are rejected before calculation."""

    def test_ceiling_inclusive(self) -> None:
        ceiling = str(settings.max_amount_per_form)
        assert validate_form_entry(_form(income=ceiling, withheld="0"), 0) == {}

    def test_income_above_ceiling(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "max_amount_per_form", 1000)
        errors = validate_form_entry(_form(income="1000.01", withheld="0"), 2)
        assert set(errors) == {"form_2_taxableIncome"}
        assert "1,000" in errors["form_2_taxableIncome"]

    def test_withheld_above_ceiling(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "max_amount_per_form", 1000)
        errors = validate_form_entry(_form(income="0", withheld="5000"), 0)
        assert set(errors) == {"form_0_incomeTaxWithheld"}

    def test_huge_income_rejected(self) -> None:
        forms = (Form106Entry(Decimal("1E+26"), Decimal("0")),)
        with pytest.raises(InputValidationError) as exc_info:
            ensure_valid(CalculatorInput(year=2024, forms=forms))
        assert set(exc_info.value.errors) == {"form_0_taxableIncome"}
