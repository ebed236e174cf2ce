"""Receipt workflows."""

from receiptag.application.receipts.listing import run_list_saved_receipts, run_load_receipt_options
from receiptag.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
from receiptag.application.receipts.submit import (
    ReceiptForm,
    ReceiptSubmitRequest,
    prefill_form,
    run_receipt_submit,
    validate_form,
)
from receiptag.application.receipts.workflow import ReceiptWorkflow

__all__ = [
    "ReceiptScanRequest",
    "run_receipt_scan",
    "ReceiptForm",
    "ReceiptSubmitRequest",
    "prefill_form",
    "validate_form",
    "run_receipt_submit",
    "ReceiptWorkflow",
    "run_list_saved_receipts",
    "run_load_receipt_options",
]
