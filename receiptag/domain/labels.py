"""Display names for field keys, per UI locale."""

from typing import Literal

Locale = Literal["he", "es", "en"]

LOCALES: tuple[Locale, ...] = ("he", "es", "en")
DEFAULT_LOCALE: Locale = "he"

FIELD_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "amount": "Amount",
        "date": "Date",
        "receiptNumber": "Receipt number",
        "phone": "Phone",
        "businessName": "Business name",
        "address": "Address",
        "taxId": "Tax ID",
        "notes": "Notes",
    },
    "he": {
        "amount": "סכום",
        "date": "תאריך",
        "receiptNumber": "מספר קבלה",
        "phone": "טלפון",
        "businessName": "שם העסק",
        "address": "כתובת",
        "taxId": "ח.פ / ע.מ",
        "notes": "הערות",
    },
    "es": {
        "amount": "Importe",
        "date": "Fecha",
        "receiptNumber": "Número de recibo",
        "phone": "Teléfono",
        "businessName": "Nombre del negocio",
        "address": "Dirección",
        "taxId": "NIF",
        "notes": "Notas",
    },
}


def display_name(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Translated label for a suggested key; custom keys display as themselves."""
    table = FIELD_LABELS.get(locale, FIELD_LABELS["en"])
    return table.get(key, key)
