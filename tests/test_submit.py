"""Tests for metadata form prefill, validation and submission."""

from __future__ import annotations

from pathlib import Path

import pytest

from receiptag.application.receipts.submit import (
    ReceiptForm,
    ReceiptSubmitRequest,
    prefill_form,
    run_receipt_submit,
    validate_form,
)

VALID_FORM = ReceiptForm(receipt_number="123", project_name="Camp", subject="food", amount="45.90")


def test_prefill_from_fields() -> None:
    form = prefill_form("ignored", {"receiptNumber": "77", "amount": "12,50"})

    assert form.receipt_number == "77"
    assert form.amount == "12.50"
    assert form.project_name == ""
    assert form.subject == ""


def test_prefill_amount_falls_back_to_ocr_text() -> None:
    form = prefill_form("Milk 8,90\nBread 12.00", {})
    assert form.amount == "8.90"


def test_prefill_without_any_amount() -> None:
    assert prefill_form("no numbers", {}) == ReceiptForm()


def test_validate_valid_form() -> None:
    assert validate_form(VALID_FORM) == []


@pytest.mark.parametrize("amount", ["", "abc", "nan", "inf", "1,50"])
def test_validate_rejects_bad_amounts(amount: str) -> None:
    form = ReceiptForm(receipt_number="1", project_name="p", subject="food", amount=amount)
    assert validate_form(form) == ["amount"]


def test_validate_reports_all_missing_fields() -> None:
    assert validate_form(ReceiptForm(project_name="   ")) == [
        "receipt_number",
        "project_name",
        "subject",
        "amount",
    ]


def test_submit_saves_receipt(tmp_path: Path) -> None:
    result = run_receipt_submit(
        ReceiptSubmitRequest(
            form=ReceiptForm(receipt_number=" 123 ", project_name=" Camp ", subject="food", amount="45.90"),
            image_bytes=b"img",
            ocr_text="Total: ₪45.90",
            fields={"amount": "45.90"},
        ),
        root=tmp_path,
    )

    assert result.status == "saved"
    assert result.entry is not None
    assert result.entry.receiptNumber == "123"
    assert result.entry.projectName == "Camp"
    assert (tmp_path / "Camp" / result.entry.imageFileName).exists()


def test_submit_requires_image(tmp_path: Path) -> None:
    result = run_receipt_submit(ReceiptSubmitRequest(form=VALID_FORM, image_bytes=b"", ocr_text=""), root=tmp_path)

    assert result.status == "invalid"
    assert result.invalid_fields == ["image"]
    assert not (tmp_path / "receipts.json").exists()


def test_submit_storage_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    result = run_receipt_submit(ReceiptSubmitRequest(form=VALID_FORM, image_bytes=b"img", ocr_text=""), root=blocker)

    assert result.status == "storage_failed"
    assert result.error
