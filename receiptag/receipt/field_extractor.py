"""Heuristic field extraction from raw OCR text.

Extraction order is fixed: amount, date, receipt number, phone, then
business name. Pattern-backed fields search the whole raw text and are cut
out of the remainder; the business name is picked from lines and stays in
the remainder.
"""

import re

from receiptag.domain.receipt import BUSINESS_NAME, Field, ParsedReceipt
from receiptag.receipt.patterns import CURRENCY_SYMBOLS, FIELD_RULES, match_first
from receiptag.receipt.remainder import RemainderBuffer
from receiptag.runtime.logging import get_logger

logger = get_logger(__name__)

BUSINESS_NAME_MIN_LENGTH = 3
BUSINESS_NAME_MAX_LENGTH = 60

_DATE_LIKE_PREFIX = re.compile(r"^\d+[/\-.]")
_AMOUNT_LIKE_PREFIX = re.compile(f"^[{CURRENCY_SYMBOLS}\\d]")


def _extract_business_name(raw_text: str) -> str | None:
    """First line that reads like a name rather than a number, date or price."""
    lines = [line.strip() for line in raw_text.split("\n")]
    for line in lines:
        if not line:
            continue
        if not BUSINESS_NAME_MIN_LENGTH <= len(line) <= BUSINESS_NAME_MAX_LENGTH:
            continue
        if _DATE_LIKE_PREFIX.match(line) or _AMOUNT_LIKE_PREFIX.match(line):
            continue
        return line
    return None


def extract(raw_text: str) -> ParsedReceipt:
    """
    Split OCR text into labeled fields plus leftover text.

    Never raises: a field with no match is simply absent.

    Args:
        raw_text: Text exactly as returned by the OCR service

    Returns:
        ParsedReceipt with 0-5 fields, the untouched raw text and the
        normalized remainder
    """
    fields: list[Field] = []
    remainder = RemainderBuffer(raw_text)

    for key, rules in FIELD_RULES:
        found = match_first(key, rules, raw_text)
        if found is None:
            logger.debug("No %s match", key)
            continue
        logger.debug("Matched %s via %s (rule %d)", key, found.rule_name, found.rule_index)
        fields.append(Field(key=key, label=key, value=found.value, confidence=found.confidence))
        if remainder.remove_first(found.value) is None:
            logger.debug("%s value already consumed from remainder", key)

    business_name = _extract_business_name(raw_text)
    if business_name is not None:
        fields.append(Field(key=BUSINESS_NAME, label=BUSINESS_NAME, value=business_name, confidence="low"))

    return ParsedReceipt(
        fields=tuple(fields),
        raw_text=raw_text,
        remaining_text=remainder.normalized(),
    )

