"""Data models for receipt field extraction."""

from dataclasses import dataclass
from typing import Literal

Confidence = Literal["high", "medium", "low"]

AMOUNT = "amount"
DATE = "date"
RECEIPT_NUMBER = "receiptNumber"
PHONE = "phone"
BUSINESS_NAME = "businessName"

# Extraction order; also the order fields appear in a ParsedReceipt.
WELL_KNOWN_KEYS: tuple[str, ...] = (AMOUNT, DATE, RECEIPT_NUMBER, PHONE, BUSINESS_NAME)

# Keys offered as quick picks when tagging selected text.
SUGGESTED_KEYS: tuple[str, ...] = WELL_KNOWN_KEYS + ("address", "taxId", "notes")


@dataclass(frozen=True)
class Field:
    """One extracted or user-created datum."""

    key: str
    label: str
    value: str  # Verbatim from source text (or user selection)
    confidence: Confidence


@dataclass(frozen=True)
class ParsedReceipt:
    """Extraction result for one OCR text payload.

    Computed once per OCR result; edits go through a TaggingSession, never here.
    """

    fields: tuple[Field, ...]
    raw_text: str
    remaining_text: str

    def field(self, key: str) -> Field | None:
        for f in self.fields:
            if f.key == key:
                return f
        return None

    def keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def values(self) -> dict[str, str]:
        """Seed for the editable field-value map."""
        return {f.key: f.value for f in self.fields}

    def to_dict(self) -> dict[str, object]:
        return {
            "fields": [
                {"key": f.key, "label": f.label, "value": f.value, "confidence": f.confidence}
                for f in self.fields
            ],
            "rawText": self.raw_text,
            "remainingText": self.remaining_text,
        }
