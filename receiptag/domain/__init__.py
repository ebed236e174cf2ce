"""Core domain models for receiptag.

This module provides the data models used throughout the project:
- Field, ParsedReceipt: extraction results
- Well-known and suggested field keys
- Display labels per locale

Usage:
    from receiptag.domain import Field, ParsedReceipt
"""

from receiptag.domain.labels import DEFAULT_LOCALE, LOCALES, display_name
from receiptag.domain.receipt import (
    AMOUNT,
    BUSINESS_NAME,
    DATE,
    PHONE,
    RECEIPT_NUMBER,
    SUGGESTED_KEYS,
    WELL_KNOWN_KEYS,
    Confidence,
    Field,
    ParsedReceipt,
)

__all__ = [
    "AMOUNT",
    "BUSINESS_NAME",
    "DATE",
    "PHONE",
    "RECEIPT_NUMBER",
    "SUGGESTED_KEYS",
    "WELL_KNOWN_KEYS",
    "Confidence",
    "Field",
    "ParsedReceipt",
    "DEFAULT_LOCALE",
    "LOCALES",
    "display_name",
]
