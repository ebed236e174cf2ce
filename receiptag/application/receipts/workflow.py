"""Capture -> OCR -> preview -> form -> success flow for one receipt.

Each public method is a transition trigger. Calling a trigger from a step
that does not accept it raises InvalidTransition, so e.g. editing fields
after they were handed to the form is not possible.

    capture --image_captured--> ocr --ocr_completed--> preview
    ocr --ocr_failed--> capture
    preview --continue_to_form--> form --submit(saved)--> success
    preview --retake--> capture
    form --back--> preview (fresh tagging session over the same OCR text)
    success --scan_another--> capture
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from receiptag.application.receipts.submit import (
    ReceiptForm,
    ReceiptSubmitRequest,
    ReceiptSubmitResult,
    prefill_form,
    run_receipt_submit,
)
from receiptag.domain.receipt import ParsedReceipt
from receiptag.receipt.tagging import InvalidTransition, TaggingSession
from receiptag.runtime.logging import get_logger
from receiptag.runtime.receipt_storage import StoredReceipt

logger = get_logger(__name__)

WorkflowStep = Literal["capture", "ocr", "preview", "form", "success"]


class ReceiptWorkflow:
    """Explicit state machine for one scan-to-save pass."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.step: WorkflowStep = "capture"
        self.image_bytes = b""
        self.image_ext = "jpg"
        self.ocr_text = ""
        self._session: TaggingSession | None = None
        self.fields: dict[str, str] = {}
        self.form = ReceiptForm()
        self.entry: StoredReceipt | None = None

    def _expect(self, trigger: str, *steps: WorkflowStep) -> None:
        if self.step not in steps:
            raise InvalidTransition(f"Cannot {trigger} during step '{self.step}'")

    def _move(self, step: WorkflowStep) -> None:
        logger.debug("Workflow %s -> %s", self.step, step)
        self.step = step

    @property
    def session(self) -> TaggingSession:
        """Tagging session; only available while previewing."""
        self._expect("access tagging session", "preview")
        assert self._session is not None
        return self._session

    def image_captured(self, image_bytes: bytes, image_ext: str = "jpg") -> None:
        self._expect("accept image", "capture")
        self.image_bytes = image_bytes
        self.image_ext = image_ext
        self._move("ocr")

    def ocr_completed(self, text: str, parsed: ParsedReceipt | None = None) -> TaggingSession:
        """Open a tagging session; ``parsed`` skips re-extracting ``text``."""
        self._expect("complete OCR", "ocr")
        self.ocr_text = text
        if parsed is not None and parsed.raw_text == text:
            self._session = TaggingSession.from_parsed(parsed)
        else:
            self._session = TaggingSession.from_text(text)
        self._move("preview")
        return self._session

    def ocr_failed(self) -> None:
        self._expect("fail OCR", "ocr")
        self._reset()

    def retake(self) -> None:
        self._expect("retake", "preview")
        self._reset()

    def continue_to_form(self) -> ReceiptForm:
        """Finalize tagging and prefill the metadata form from the result."""
        self._expect("continue to form", "preview")
        assert self._session is not None
        self.fields = self._session.finalize()
        self.form = prefill_form(self.ocr_text, self.fields)
        self._move("form")
        return self.form

    def back(self) -> TaggingSession:
        """Return to preview; previous edits are discarded with the old session."""
        self._expect("go back", "form")
        self._session = TaggingSession.from_text(self.ocr_text)
        self._move("preview")
        return self._session

    def submit(self, form: ReceiptForm, root: Path | None = None) -> ReceiptSubmitResult:
        """Save the receipt; stays on the form step unless the save succeeds."""
        self._expect("submit", "form")
        self.form = form
        result = run_receipt_submit(
            ReceiptSubmitRequest(
                form=form,
                image_bytes=self.image_bytes,
                image_ext=self.image_ext,
                ocr_text=self.ocr_text,
                fields=self.fields,
            ),
            root=root,
        )
        if result.status == "saved":
            self.entry = result.entry
            self._move("success")
        return result

    def scan_another(self) -> None:
        self._expect("scan another", "success")
        self._reset()
