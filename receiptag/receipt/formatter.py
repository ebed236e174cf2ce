"""Format parsed receipts and tagging sessions as terminal text."""

from typing import TYPE_CHECKING

from receiptag.domain.labels import DEFAULT_LOCALE, display_name
from receiptag.domain.receipt import ParsedReceipt

if TYPE_CHECKING:
    from .tagging import TaggingSession

_RULE = "=" * 60


def _format_rows(rows: list[tuple[str, str, str]]) -> list[str]:
    """Align (label, value, tags) rows into columns."""
    if not rows:
        return []
    width = max(len(label) for label, _, _ in rows)
    lines = []
    for label, value, tags in rows:
        base = f"  {label.ljust(width)}  {value}"
        lines.append(f"{base}  [{tags}]" if tags else base)
    return lines


def format_parsed_receipt(parsed: ParsedReceipt, locale: str = DEFAULT_LOCALE) -> str:
    """Render extracted fields with confidence, then the leftover text."""
    lines = [_RULE, "PARSED RECEIPT", _RULE]
    rows = [(display_name(f.key, locale), f.value, f.confidence) for f in parsed.fields]
    if rows:
        lines.extend(_format_rows(rows))
    else:
        lines.append("  (no fields identified)")

    if parsed.remaining_text:
        lines.append("")
        lines.append("Additional text:")
        lines.extend(f"  {line}" for line in parsed.remaining_text.split("\n"))
    lines.append(_RULE)
    return "\n".join(lines)


def format_tagging_session(session: "TaggingSession", locale: str = DEFAULT_LOCALE) -> str:
    """Render the current editable map with edited/custom markers."""
    rows = []
    for index, f in enumerate(session.fields, 1):
        if session.is_custom(f.key):
            tags = "custom"
        elif session.is_edited(f.key):
            tags = f"{f.confidence}, edited"
        else:
            tags = f.confidence
        label = f"{index}. {display_name(f.label, locale)}"
        rows.append((label, session.value(f.key) or "", tags))
    return "\n".join(_format_rows(rows)) if rows else "  (no fields)"
