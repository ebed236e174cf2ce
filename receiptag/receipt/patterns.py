"""Ordered recognition rules per receipt field.

Each field owns a tuple of rules tried in order; the first rule that
produces a non-blank capture wins. The winning rule's position decides the
confidence: the first rule is ``high``, any later rule is ``medium``.
"""

import re
from dataclasses import dataclass

from receiptag.domain.receipt import AMOUNT, DATE, PHONE, RECEIPT_NUMBER, Confidence

CURRENCY_SYMBOLS = "₪$€"

_CURRENCY = f"[{CURRENCY_SYMBOLS}]"
_MONEY = r"(\d+[.,]\d{2})"
_TOTAL_KEYWORDS = r'(?:total|סה"כ|סה״כ|סהכ|סכום|importe|monto)'
_TOKEN = r"([A-Za-z0-9_][A-Za-z0-9_\-/]*\d)"


@dataclass(frozen=True)
class PatternRule:
    """One recognition rule; group 1 of ``regex`` is the field value."""

    name: str
    regex: re.Pattern[str]


@dataclass(frozen=True)
class PatternMatch:
    """Winning rule for a field, with the trimmed value and its source span."""

    key: str
    value: str
    rule_index: int
    rule_name: str
    start: int
    end: int

    @property
    def confidence(self) -> Confidence:
        return tier_confidence(self.rule_index)


def tier_confidence(rule_index: int) -> Confidence:
    """First-listed rule is the strong signal; everything after it is medium."""
    return "high" if rule_index == 0 else "medium"


def _rule(name: str, pattern: str) -> PatternRule:
    return PatternRule(name=name, regex=re.compile(pattern, re.IGNORECASE))


AMOUNT_RULES: tuple[PatternRule, ...] = (
    _rule("keyword_currency_amount", _TOTAL_KEYWORDS + r"\s*:?\s*" + _CURRENCY + r"\s*" + _MONEY),
    _rule("currency_prefixed_amount", _CURRENCY + r"\s*" + _MONEY),
    _rule("currency_suffixed_amount", _MONEY + r"\s*" + _CURRENCY),
    _rule("keyword_bare_amount", _TOTAL_KEYWORDS + r"\s*:?\s*" + _MONEY),
)

DATE_RULES: tuple[PatternRule, ...] = (
    _rule("day_month_year", r"(?<!\d)(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4})(?!\d)"),
    _rule("year_month_day", r"(?<!\d)(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2})(?!\d)"),
)

RECEIPT_NUMBER_RULES: tuple[PatternRule, ...] = (
    _rule(
        "receipt_keyword_number",
        r"(?:receipt|קבלה|מספר|מס['׳]?|recibo|factura|invoice|#)\s*:?\s*#?\s*" + _TOKEN,
    ),
    _rule("reference_keyword_number", r"(?:אסמכתא|מספר)\s*:?\s*" + _TOKEN),
)

# Separators stay on one line; a phone number never spans OCR lines.
PHONE_RULES: tuple[PatternRule, ...] = (
    _rule("phone_keyword_number", r"(?:טלפון|טל|tel|phone)\s*[.:]?\s*([+(\d][\d\-+() \t]{6,})"),
    _rule("israeli_local_number", r"(0\d[\- ]?\d{3,4}[\- ]?\d{3,4})"),
    _rule("international_number", r"(\+?\d{1,3}[\- ]?\d{2,4}[\- ]?\d{3,4}[\- ]?\d{3,4})"),
)

# Business name is derived from lines, not matched (see field_extractor).
FIELD_RULES: tuple[tuple[str, tuple[PatternRule, ...]], ...] = (
    (AMOUNT, AMOUNT_RULES),
    (DATE, DATE_RULES),
    (RECEIPT_NUMBER, RECEIPT_NUMBER_RULES),
    (PHONE, PHONE_RULES),
)


def match_first(key: str, rules: tuple[PatternRule, ...], text: str) -> PatternMatch | None:
    """Return the first rule (in order) whose first match has a non-blank value."""
    for index, rule in enumerate(rules):
        match = rule.regex.search(text)
        if match is None:
            continue
        captured = match.group(1)
        value = captured.strip()
        if not value:
            continue
        # Span of the trimmed value inside the source text
        start = match.start(1) + (len(captured) - len(captured.lstrip()))
        return PatternMatch(
            key=key,
            value=value,
            rule_index=index,
            rule_name=rule.name,
            start=start,
            end=start + len(value),
        )
    return None

