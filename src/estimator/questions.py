"""Adaptive questionnaire selection.

The questionnaire is short and fixed in content, but two prompts change
wording depending on the entered forms:
- Residency is framed as the source of the base credit points when the
  employers applied no points at all to a positive income.
- Outside income is framed as a tax coordination concern when there are
  several employers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from src.estimator.models import Form106Entry


@dataclass(frozen=True)
class Question:
    """Single questionnaire prompt.

    Attributes:
        key: Answer field the prompt fills (wizard camelCase name).
        label: Prompt text.
        optional: Whether the user may skip it.
    """

    key: str
    label: str
    optional: bool


RESIDENCY_LABEL_NO_POINTS = (
    "האם תושב/ת ישראל כל השנה? (נקודות זיכוי בסיס — משפיע על האומדן)"
)
RESIDENCY_LABEL = "האם תושב/ת ישראל כל שנת המס? (נקודות בסיס 2.25)"
OUTSIDE_INCOME_LABEL_SEVERAL_EMPLOYERS = (
    "האם יש הכנסות נוספות שלא ב-106? (חשוב לתיאום מס)"
)
OUTSIDE_INCOME_LABEL = 'האם יש הכנסות נוספות שלא ב-106 (ריבית/דיבידנד/עסק/חו"ל)?'


def select_questions(forms: Sequence[Form106Entry]) -> tuple[Question, ...]:
    """Choose the questionnaire prompts for the entered forms.

    Args:
        forms: Forms entered so far. May be empty.

    Returns:
        Prompts in display order.

    Example:
        >>> questions = select_questions([Form106Entry(Decimal("60000"), Decimal("5500"))])
        >>> questions[0].label == RESIDENCY_LABEL_NO_POINTS
        True
    """
    points = sum((form.credit_points_granted for form in forms), Decimal("0"))
    income = sum((form.taxable_income for form in forms), Decimal("0"))
    residency_drives_points = points == 0 and income > 0
    several_employers = len(forms) > 1

    return (
        Question(
            key="isIsraeliResidentFullYear",
            label=RESIDENCY_LABEL_NO_POINTS if residency_drives_points else RESIDENCY_LABEL,
            optional=False,
        ),
        Question(key="genderForCredit", label="חצי נקודה כאישה (אופציונלי)", optional=True),
        Question(
            key="degreeType",
            label="סוג תואר / לימודי מקצוע (תואר ראשון/שני/לימודי מקצוע/ללא)",
            optional=True,
        ),
        Question(key="graduationYear", label="שנת סיום לימודים (אם רלוונטי)", optional=True),
        Question(
            key="donations46Total",
            label="סכום תרומות למוסד ציבורי לפי סעיף 46 (₪)",
            optional=True,
        ),
        Question(
            key="hasAdditionalIncomeNotIn106",
            label=(
                OUTSIDE_INCOME_LABEL_SEVERAL_EMPLOYERS
                if several_employers
                else OUTSIDE_INCOME_LABEL
            ),
            optional=False,
        ),
    )
