"""Receipt text parsing and re-tagging."""

from receiptag.receipt.field_extractor import extract
from receiptag.receipt.remainder import RemainderBuffer, normalize_remainder
from receiptag.receipt.tagging import (
    InvalidTransition,
    TaggingSession,
    TaggingSessionClosed,
    derive_custom_key,
)

__all__ = [
    "extract",
    "normalize_remainder",
    "RemainderBuffer",
    "TaggingSession",
    "InvalidTransition",
    "TaggingSessionClosed",
    "derive_custom_key",
]
