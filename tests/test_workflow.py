"""Tests for the capture -> OCR -> preview -> form -> success flow."""

from __future__ import annotations

from pathlib import Path

import pytest

from receiptag.application.receipts.submit import ReceiptForm
from receiptag.application.receipts.workflow import ReceiptWorkflow
from receiptag.receipt.field_extractor import extract
from receiptag.receipt.tagging import InvalidTransition, TaggingSessionClosed

OCR_TEXT = "Corner Bakery\nReceipt: 981\nTotal: ₪45.90"


def _at_preview() -> ReceiptWorkflow:
    workflow = ReceiptWorkflow()
    workflow.image_captured(b"img")
    workflow.ocr_completed(OCR_TEXT)
    return workflow


def test_happy_path(tmp_path: Path) -> None:
    workflow = _at_preview()
    assert workflow.step == "preview"
    workflow.session.assign("notes", "team lunch")

    form = workflow.continue_to_form()
    assert workflow.step == "form"
    assert form == ReceiptForm(receipt_number="981", amount="45.90")
    assert workflow.fields["notes"] == "team lunch"

    result = workflow.submit(
        ReceiptForm(receipt_number="981", project_name="Camp", subject="food", amount="45.90"),
        root=tmp_path,
    )

    assert result.status == "saved"
    assert workflow.step == "success"
    assert workflow.entry is not None
    assert workflow.entry.fields["notes"] == "team lunch"

    workflow.scan_another()
    assert workflow.step == "capture"
    assert workflow.image_bytes == b""


def test_invalid_submit_stays_on_form(tmp_path: Path) -> None:
    workflow = _at_preview()
    workflow.continue_to_form()

    result = workflow.submit(ReceiptForm(receipt_number="981"), root=tmp_path)

    assert result.status == "invalid"
    assert workflow.step == "form"


def test_ocr_failure_returns_to_capture() -> None:
    workflow = ReceiptWorkflow()
    workflow.image_captured(b"img")
    workflow.ocr_failed()

    assert workflow.step == "capture"


def test_retake_discards_session() -> None:
    workflow = _at_preview()
    workflow.retake()

    assert workflow.step == "capture"
    with pytest.raises(InvalidTransition):
        _ = workflow.session


def test_back_from_form_starts_fresh_session() -> None:
    workflow = _at_preview()
    old_session = workflow.session
    old_session.edit("amount", "1.00")
    workflow.continue_to_form()

    new_session = workflow.back()

    assert workflow.step == "preview"
    assert new_session is not old_session
    assert new_session.value("amount") == "45.90"
    with pytest.raises(TaggingSessionClosed):
        old_session.edit("amount", "2.00")


def test_out_of_order_triggers_raise() -> None:
    workflow = ReceiptWorkflow()

    with pytest.raises(InvalidTransition):
        workflow.ocr_completed("text")
    with pytest.raises(InvalidTransition):
        workflow.continue_to_form()
    with pytest.raises(InvalidTransition):
        workflow.submit(ReceiptForm())


def test_ocr_completed_reuses_scan_extraction() -> None:
    parsed = extract(OCR_TEXT)
    workflow = ReceiptWorkflow()
    workflow.image_captured(b"img")

    session = workflow.ocr_completed(OCR_TEXT, parsed=parsed)

    assert session.parsed is parsed
    assert workflow.session is session


def test_ocr_completed_ignores_extraction_of_other_text() -> None:
    workflow = ReceiptWorkflow()
    workflow.image_captured(b"img")

    session = workflow.ocr_completed(OCR_TEXT, parsed=extract("Total: ₪1.00"))

    assert session.parsed.raw_text == OCR_TEXT
    assert session.value("amount") == "45.90"
