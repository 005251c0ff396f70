"""Field-level validation for estimator input.

The engine assumes validated, non-negative input. These checks run at the
boundary (the HTTP layer) and return a map of field key to Hebrew message so
a caller can show each error next to its field.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from src.core.config import settings
from src.estimator.models import CalculatorInput, Form106Entry
from src.tax.year_config import SUPPORTED_TAX_YEARS

FieldErrors = dict[str, str]


class InputValidationError(ValueError):
    """Raised when input fails field validation.

    Attributes:
        errors: Field key to message for every failed check.
    """

    def __init__(self, errors: FieldErrors) -> None:
        self.errors = errors
        super().__init__(f"Invalid estimator input: {sorted(errors)}")


def validate_request_header(year: int, form_count: int) -> FieldErrors:
    """Validate the selected tax year and number of forms.

    Args:
        year: Selected tax year.
        form_count: Number of Form 106 entries declared.

    Returns:
        Errors keyed by "year" and "formCount". Empty when valid.
    """
    errors: FieldErrors = {}
    if year not in SUPPORTED_TAX_YEARS:
        errors["year"] = (
            f"שנת מס חייבת להיות בין {SUPPORTED_TAX_YEARS[0]} ל-{SUPPORTED_TAX_YEARS[-1]}"
        )
    if form_count < 1 or form_count > settings.max_forms_per_request:
        errors["formCount"] = f"מספר טפסי 106 בין 1 ל-{settings.max_forms_per_request}"
    return errors


def validate_form_entry(entry: Form106Entry, index: int) -> FieldErrors:
    """Validate a single Form 106 entry.

    Args:
        entry: Entry to check.
        index: Zero-based position, used to prefix error keys.

    Returns:
        Errors keyed "form_{index}_{field}". Empty when valid.
    """
    prefix = f"form_{index}_"
    errors: FieldErrors = {}
    if entry.taxable_income < 0:
        errors[f"{prefix}taxableIncome"] = "הכנסה חייבת אינה יכולה להיות שלילית"
    if entry.income_tax_withheld < 0:
        errors[f"{prefix}incomeTaxWithheld"] = "מס שנוכה אינו יכול להיות שלילי"
    max_amount = Decimal(settings.max_amount_per_form)
    if entry.taxable_income > max_amount:
        errors[f"{prefix}taxableIncome"] = (
            f"הכנסה חייבת אינה יכולה לעלות על {settings.max_amount_per_form:,} ₪"
        )
    if entry.income_tax_withheld > max_amount:
        errors[f"{prefix}incomeTaxWithheld"] = (
            f"מס שנוכה אינו יכול לעלות על {settings.max_amount_per_form:,} ₪"
        )
    if entry.taxable_income > 0 and entry.income_tax_withheld > entry.taxable_income:
        # Usually national insurance typed into the income tax field
        errors[f"{prefix}incomeTaxWithheld"] = (
            "נראה שהמס שנוכה גדול מההכנסה החייבת — בדוק/י שזה שדה 042 "
            "(מס הכנסה שנוכה) ולא דמי ביטוח לאומי."
        )
    max_points = Decimal(settings.max_credit_points_per_form)
    if entry.credit_points_granted < 0 or entry.credit_points_granted > max_points:
        errors[f"{prefix}creditPointsGranted"] = (
            f"נקודות זיכוי בין 0 ל-{settings.max_credit_points_per_form} (אם אין — אפשר 0)"
        )
    return errors


def validate_forms(forms: Sequence[Form106Entry]) -> FieldErrors:
    """Validate every entry and merge the errors."""
    errors: FieldErrors = {}
    for index, entry in enumerate(forms):
        errors.update(validate_form_entry(entry, index))
    return errors


def ensure_valid(data: CalculatorInput) -> None:
    """Validate a complete input record.

    Raises:
        InputValidationError: If any field check fails.
    """
    errors = validate_request_header(data.year, len(data.forms))
    errors.update(validate_forms(data.forms))
    if errors:
        raise InputValidationError(errors)
