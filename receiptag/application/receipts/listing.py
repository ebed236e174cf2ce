"""Saved receipt listing orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from receiptag.runtime.config import load_settings
from receiptag.runtime.receipt_storage import StoredReceipt, list_saved_receipts, load_receipt_options, storage_root


@dataclass(frozen=True)
class SavedReceiptListing:
    """Saved receipt summaries for CLI display."""

    storage_path: Path
    receipts: list[StoredReceipt]


@dataclass(frozen=True)
class ReceiptOptions:
    """Previously used projects and custom subjects, for form suggestions."""

    projects: list[str]
    custom_subjects: list[str]


def run_list_saved_receipts(root: Path | None = None) -> SavedReceiptListing:
    root = root if root is not None else storage_root()
    return SavedReceiptListing(storage_path=root, receipts=list_saved_receipts(root))


def run_load_receipt_options(root: Path | None = None) -> ReceiptOptions:
    """Subjects outside the configured list count as custom."""
    projects, custom_subjects = load_receipt_options(root, default_subjects=load_settings().subjects)
    return ReceiptOptions(projects=projects, custom_subjects=custom_subjects)
