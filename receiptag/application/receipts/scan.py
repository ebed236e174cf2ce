"""Receipt scan workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from receiptag.receipt.field_extractor import extract
from receiptag.runtime.ocr_client import OCRServiceUnavailable, ProgressCallback, recognize_text

if TYPE_CHECKING:
    from receiptag.domain.receipt import ParsedReceipt

ScanStatus = Literal[
    "file_not_found",
    "ocr_unavailable",
    "parsed",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str
    language: str
    on_progress: ProgressCallback | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    image_bytes: bytes = b""
    ocr_text: str = ""
    parsed: ParsedReceipt | None = None
    error: str | None = None


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: read image -> OCR -> extract fields."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    image_bytes = request.image_path.read_bytes()
    try:
        ocr_text = recognize_text(
            image_bytes,
            filename=request.image_path.name,
            ocr_url=request.ocr_url,
            language=request.language,
            on_progress=request.on_progress,
        )
    except OCRServiceUnavailable as exc:
        return ReceiptScanResult(
            status="ocr_unavailable",
            image_bytes=image_bytes,
            error=str(exc),
        )

    return ReceiptScanResult(
        status="parsed",
        image_bytes=image_bytes,
        ocr_text=ocr_text,
        parsed=extract(ocr_text),
    )
