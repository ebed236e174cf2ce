"""Interactive re-tagging of OCR text into receipt fields.

A TaggingSession owns the editable field-value map for one scanned
receipt. The ParsedReceipt it starts from is never modified: edits, custom
fields and reverts all happen on the session's own state.

Lifecycle::

    unparsed --parse--> parsed --edit/assign--> editing --revert--> reverted
                           \\                      |                   |
                            +------ finalize -----+------ finalize ---+--> finalized

Nothing is reachable from ``finalized``; scanning again starts a new session.

Re-tagging requests that would break key uniqueness (or target unknown
keys) are rejected without raising; the methods return ``False`` instead.
"""

from __future__ import annotations

import re
from typing import Literal, NoReturn

from receiptag.domain.receipt import SUGGESTED_KEYS, Field, ParsedReceipt
from receiptag.receipt.field_extractor import extract
from receiptag.runtime.logging import get_logger

logger = get_logger(__name__)

TaggingState = Literal["unparsed", "parsed", "editing", "reverted", "finalized"]


class InvalidTransition(RuntimeError):
    """Raised when an operation is not allowed in the current lifecycle state."""


class TaggingSessionClosed(InvalidTransition):
    """Raised when a finalized session is used again."""


def derive_custom_key(label: str) -> str:
    """Turn a typed label into a field key: 'Tax ID' -> 'tax_id'."""
    return re.sub(r"\s+", "_", label.strip()).lower()


class TaggingSession:
    """Editable view over one ParsedReceipt."""

    def __init__(self) -> None:
        self.state: TaggingState = "unparsed"
        self._parsed: ParsedReceipt | None = None
        self._custom_fields: list[Field] = []
        self._values: dict[str, str] = {}

    @classmethod
    def from_text(cls, raw_text: str) -> TaggingSession:
        session = cls()
        session.parse(raw_text)
        return session

    @classmethod
    def from_parsed(cls, parsed: ParsedReceipt) -> TaggingSession:
        """Start from an extraction that already ran (e.g. during a scan)."""
        session = cls()
        session._load(parsed)
        return session

    # --- lifecycle ---

    def parse(self, raw_text: str) -> ParsedReceipt:
        """Run field extraction once and seed the editable map."""
        if self.state != "unparsed":
            self._reject_transition("parse")
        parsed = extract(raw_text)
        self._load(parsed)
        return parsed

    def _load(self, parsed: ParsedReceipt) -> None:
        self._parsed = parsed
        self._values = parsed.values()
        self._custom_fields = []
        self.state = "parsed"

    def _require_open(self, operation: str) -> ParsedReceipt:
        if self.state == "finalized":
            raise TaggingSessionClosed(f"Cannot {operation}: session already finalized")
        if self._parsed is None:
            self._reject_transition(operation)
        return self._parsed

    def _reject_transition(self, operation: str) -> NoReturn:
        raise InvalidTransition(f"Cannot {operation} in state '{self.state}'")

    def _refresh_state(self) -> None:
        if self.has_edits or self._custom_fields:
            self.state = "editing"
        elif self.state == "editing":
            self.state = "parsed"

    def finalize(self) -> dict[str, str]:
        """Hand the final key -> value map downstream and close the session."""
        self._require_open("finalize")
        self.state = "finalized"
        return dict(self._values)

    # --- read access ---

    @property
    def parsed(self) -> ParsedReceipt:
        if self._parsed is None:
            self._reject_transition("read parsed receipt")
        return self._parsed

    @property
    def custom_fields(self) -> tuple[Field, ...]:
        return tuple(self._custom_fields)

    @property
    def fields(self) -> tuple[Field, ...]:
        """Extracted fields followed by custom fields."""
        return self.parsed.fields + tuple(self._custom_fields)

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    def keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def value(self, key: str) -> str | None:
        return self._values.get(key)

    def is_custom(self, key: str) -> bool:
        return any(f.key == key for f in self._custom_fields)

    def is_edited(self, key: str) -> bool:
        """True iff an extracted field's current value differs from its parsed value."""
        original = self.parsed.field(key)
        if original is None:
            return False
        return self._values.get(key) != original.value

    @property
    def has_edits(self) -> bool:
        return any(self.is_edited(f.key) for f in self.parsed.fields)

    @property
    def can_revert(self) -> bool:
        return self.has_edits or bool(self._custom_fields)

    def available_suggestions(self) -> list[str]:
        """Suggested keys not yet used by any field."""
        existing = set(self.keys())
        return [key for key in SUGGESTED_KEYS if key not in existing]

    # --- re-tagging operations ---

    def assign(self, key: str, selected_text: str) -> bool:
        """Bind a selected span of text to a field key.

        Existing extracted or custom keys get their value overwritten; a new
        key becomes a custom field with medium confidence.
        """
        parsed = self._require_open("assign")
        if not key:
            logger.debug("Rejected assignment with empty key")
            return False

        if parsed.field(key) is None and not self.is_custom(key):
            self._custom_fields.append(Field(key=key, label=key, value=selected_text, confidence="medium"))
            logger.debug("Created custom field %s", key)
        self._values[key] = selected_text
        self._refresh_state()
        return True

    def assign_custom_label(self, label: str, selected_text: str) -> bool:
        """Create a custom field from a typed label; duplicates are ignored."""
        self._require_open("assign")
        key = derive_custom_key(label)
        if not key:
            logger.debug("Rejected empty custom label")
            return False
        if key in self.keys():
            logger.debug("Rejected duplicate custom key %s", key)
            return False
        return self.assign(key, selected_text)

    def edit(self, key: str, value: str) -> bool:
        """Overwrite one known field's current value."""
        self._require_open("edit")
        if key not in self._values:
            logger.debug("Rejected edit of unknown key %s", key)
            return False
        self._values[key] = value
        self._refresh_state()
        return True

    def remove_custom(self, key: str) -> bool:
        """Drop a custom field; extracted fields can only be edited."""
        self._require_open("remove field")
        if not self.is_custom(key):
            logger.debug("Rejected removal of non-custom key %s", key)
            return False
        self._custom_fields = [f for f in self._custom_fields if f.key != key]
        self._values.pop(key, None)
        self._refresh_state()
        return True

    def revert(self) -> None:
        """Restore every extracted value and drop all custom fields."""
        parsed = self._require_open("revert")
        self._values = parsed.values()
        self._custom_fields = []
        self.state = "reverted"
