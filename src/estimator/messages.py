"""User-facing text for estimates.

Breakdown titles, explanations, warnings, assumptions and headlines are Hebrew
product copy. They live here as declarative tables so calculation code only
chooses which row to use and never builds prose inline.

Amounts are formatted with he-IL conventions: comma thousands separator,
period decimal separator, at most three fraction digits.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

from src.estimator.models import Confidence

CURRENCY_SIGN = "₪"


@dataclass(frozen=True)
class BreakdownLine:
    """Static part of a breakdown item.

    Attributes:
        key: Stable line identifier.
        title: Display title.
        explanation: Explanation template. May reference {points}.
    """

    key: str
    title: str
    explanation: str


BREAKDOWN_GROSS_TAX = "gross_tax"
BREAKDOWN_CREDIT_POINTS = "credit_points"
BREAKDOWN_DONATION = "donation"
BREAKDOWN_LIABILITY = "liability"
BREAKDOWN_WITHHELD = "withheld"

# Order is part of the result contract.
BREAKDOWN_LINES: tuple[BreakdownLine, ...] = (
    BreakdownLine(
        key=BREAKDOWN_GROSS_TAX,
        title="מס לפי מדרגות",
        explanation="חישוב מס לפי מדרגות המס לשנת המס הנבחרת.",
    ),
    BreakdownLine(
        key=BREAKDOWN_CREDIT_POINTS,
        title="זיכוי נקודות זיכוי",
        explanation="נקודות זיכוי ({points}) × ערך נקודה שנתי.",
    ),
    BreakdownLine(
        key=BREAKDOWN_DONATION,
        title="זיכוי תרומות סעיף 46",
        explanation="35% מסכום התרומות הזכאי (עד 30% מההכנסה החייבת).",
    ),
    BreakdownLine(
        key=BREAKDOWN_LIABILITY,
        title="חבות מס שנתית",
        explanation="מס ברוטו פחות זיכויים.",
    ),
    BreakdownLine(
        key=BREAKDOWN_WITHHELD,
        title="מס שנוכה במקור",
        explanation="סה״כ מס שנוכה על ידי המעסיק/ים.",
    ),
)

WARNING_ZERO_INCOME_WITH_WITHHOLDING = (
    "הכנסה חייבת 0 אך מס שנוכה > 0 — מומלץ לבדוק נתונים."
)
WARNING_DUPLICATE_CREDIT_POINTS = (
    "ייתכן כפל נקודות זיכוי אצל כמה מעסיקים — תיאום מס יכול למנוע ניכוי עודף."
)
WARNING_POSSIBLE_DEBT = "ייתכן חוב/השלמת מס — מומלץ להתייעץ או להגיש דוח."

ASSUMPTION_TAX_YEAR = "שנת מס: {year}"
ASSUMPTION_FORM_COUNT = "מספר טפסי 106: {count}"
ASSUMPTION_INCOME_TOTAL = "הכנסה חייבת כוללת: {amount} " + CURRENCY_SIGN
ASSUMPTION_WITHHELD_TOTAL = "מס שנוכה כולל: {amount} " + CURRENCY_SIGN
ASSUMPTION_CREDIT_POINTS = "נקודות זיכוי שנכללו בחישוב: {points}"
ASSUMPTION_REFINED = (
    "אומדן משופר: נעשה שימוש בשאלון השלמה (תושבות, ילדים, תואר, תרומות)."
)
ASSUMPTION_FORMS_ONLY = "אומדן בסיסי: רק נתוני טופס 106, ללא שאלון השלמה."

SUMMARY_REFUND = "אומדן החזר: {amount} " + CURRENCY_SIGN
SUMMARY_UNDERPAYMENT = "ייתכן חוב להשלמה: {amount} " + CURRENCY_SIGN
SUMMARY_BALANCED = "אין אומדן החזר או חוב לפי הנתונים שהזנת."

CONFIDENCE_LABELS: dict[Confidence, str] = {
    Confidence.HIGH: "גבוהה",
    Confidence.MEDIUM: "בינונית",
    Confidence.LOW: "נמוכה",
}

DISCLAIMER = (
    "זהו אומדן על בסיס הנתונים שהזנת. ההחזר בפועל נקבע לאחר בדיקת רשות המסים."
)


def _round_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    """Quantize with enough precision for every integer digit of value."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.adjusted() + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Format a currency amount with he-IL separators.

    Args:
        value: Amount to format.

    Returns:
        Amount with comma grouping and up to three fraction digits.

    Example:
        >>> format_amount(Decimal("42474.5"))
        '42,474.5'
    """
    rounded = _round_half_up(value, Decimal("0.001"))
    integral, _, fraction = f"{rounded:,.3f}".partition(".")
    fraction = fraction.rstrip("0")
    return f"{integral}.{fraction}" if fraction else integral


def format_points(points: Decimal) -> str:
    """Format a credit point total with exactly two decimals."""
    return str(_round_half_up(points, Decimal("0.01")))
