"""Metadata form prefill, validation and submission to storage."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Literal

from receiptag.domain.receipt import AMOUNT, RECEIPT_NUMBER
from receiptag.runtime.logging import get_logger
from receiptag.runtime.receipt_storage import ReceiptRecord, StoredReceipt, save_receipt_to_disk

logger = get_logger(__name__)

SubmitStatus = Literal[
    "invalid",
    "saved",
    "storage_failed",
]

_FIRST_AMOUNT = re.compile(r"(\d+[.,]\d{2})")


@dataclass(frozen=True)
class ReceiptForm:
    """Metadata the user confirms before saving."""

    receipt_number: str = ""
    project_name: str = ""
    subject: str = ""
    amount: str = ""


def prefill_form(ocr_text: str, fields: dict[str, str]) -> ReceiptForm:
    """Seed the form from the finalized field map, falling back to the OCR text for amount."""
    amount = fields.get(AMOUNT, "")
    if amount:
        amount = amount.replace(",", ".", 1)
    else:
        match = _FIRST_AMOUNT.search(ocr_text)
        amount = match.group(1).replace(",", ".", 1) if match else ""
    return ReceiptForm(receipt_number=fields.get(RECEIPT_NUMBER, ""), amount=amount)


def _is_amount(value: str) -> bool:
    try:
        return Decimal(value.strip()).is_finite()
    except InvalidOperation:
        return False


def validate_form(form: ReceiptForm) -> list[str]:
    """Return the names of missing or invalid form fields (empty when valid)."""
    invalid = []
    if not form.receipt_number.strip():
        invalid.append("receipt_number")
    if not form.project_name.strip():
        invalid.append("project_name")
    if not form.subject:
        invalid.append("subject")
    if not form.amount.strip() or not _is_amount(form.amount):
        invalid.append("amount")
    return invalid


@dataclass(frozen=True)
class ReceiptSubmitRequest:
    """Inputs for saving one receipt."""

    form: ReceiptForm
    image_bytes: bytes
    ocr_text: str
    image_ext: str = "jpg"
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ReceiptSubmitResult:
    """Outcome of a submission."""

    status: SubmitStatus
    entry: StoredReceipt | None = None
    invalid_fields: list[str] = field(default_factory=list)
    error: str | None = None


def run_receipt_submit(request: ReceiptSubmitRequest, root: Path | None = None) -> ReceiptSubmitResult:
    """Validate the form and persist image + metadata to local storage."""
    invalid = validate_form(request.form)
    if not request.image_bytes:
        invalid.append("image")
    if invalid:
        return ReceiptSubmitResult(status="invalid", invalid_fields=invalid)

    record = ReceiptRecord(
        receipt_number=request.form.receipt_number.strip(),
        project_name=request.form.project_name.strip(),
        subject=request.form.subject,
        amount=request.form.amount.strip(),
        ocr_text=request.ocr_text,
        image_bytes=request.image_bytes,
        image_ext=request.image_ext,
        fields=request.fields,
    )
    try:
        entry = save_receipt_to_disk(record, root=root)
    except OSError as exc:
        logger.error("Failed to save receipt: %s", exc)
        return ReceiptSubmitResult(status="storage_failed", error=str(exc))
    return ReceiptSubmitResult(status="saved", entry=entry)
