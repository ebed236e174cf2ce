"""Local disk storage for submitted receipts.

Directory structure:
    receipts/
    ├── <project name>/
    │   ├── <receipt number>_<id>.<ext>   - receipt image
    │   └── <receipt number>_<id>.json    - metadata for that receipt
    └── receipts.json                     - master index across all projects
"""

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from receiptag.runtime.config import DEFAULT_SUBJECT_KEYS, load_settings
from receiptag.runtime.logging import get_logger
from receiptag.runtime.paths import INDEX_FILENAME, get_paths

logger = get_logger(__name__)

_UNSAFE_DIR_CHARS = re.compile(r'[<>:"/\\|?*]')
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class ReceiptRecord:
    """Everything persisted for one submitted receipt."""

    receipt_number: str
    project_name: str
    subject: str
    amount: str
    ocr_text: str
    image_bytes: bytes
    image_ext: str = "jpg"
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StoredReceipt:
    """Index entry for a saved receipt (field names match the JSON wire format)."""

    id: str
    date: str
    receiptNumber: str
    projectName: str
    subject: str
    amount: str
    ocrText: str
    imageFileName: str
    imagePath: str
    fields: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def storage_root() -> Path:
    """Resolve where receipts are written: explicit override, settings/env, then default."""
    paths = get_paths()
    if paths.storage_override is not None:
        return paths.storage_override
    settings_path = load_settings().storage_path
    if settings_path is not None:
        return settings_path
    return paths.receipts


def sanitize_dir_name(name: str) -> str:
    """Make a project name safe to use as a directory name.

    Names made only of dots (``.``, ``..``) would resolve outside the
    storage root, so they map to ``unknown`` like empty names.
    """
    cleaned = _UNSAFE_DIR_CHARS.sub("_", name).strip()
    if not cleaned.strip("."):
        return "unknown"
    return cleaned


def _safe_receipt_number(receipt_number: str) -> str:
    return _NON_ALNUM.sub("_", receipt_number)


def _read_index(index_path: Path) -> list[dict[str, Any]]:
    if not index_path.exists():
        return []
    try:
        entries = json.loads(index_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unreadable receipt index %s, starting a new one: %s", index_path, e)
        return []
    if not isinstance(entries, list):
        logger.warning("Receipt index %s is not a list, starting a new one", index_path)
        return []
    return entries


def save_receipt_to_disk(record: ReceiptRecord, root: Path | None = None, now: datetime | None = None) -> StoredReceipt:
    """
    Write the image, its metadata JSON and append to the master index.

    Args:
        record: Receipt data to persist
        root: Storage root override (defaults to storage_root())
        now: Timestamp override, used for the id and the dd/mm/yyyy date

    Returns:
        The index entry that was written
    """
    root = root if root is not None else storage_root()
    now = now if now is not None else datetime.now()
    root.mkdir(parents=True, exist_ok=True)

    project_dir_name = sanitize_dir_name(record.project_name)
    project_dir = root / project_dir_name
    project_dir.mkdir(parents=True, exist_ok=True)

    receipt_id = f"receipt_{int(now.timestamp() * 1000)}"
    base_name = f"{_safe_receipt_number(record.receipt_number)}_{receipt_id}"

    # Same number within the same millisecond: keep both
    counter = 1
    while (project_dir / f"{base_name}.json").exists():
        base_name = f"{_safe_receipt_number(record.receipt_number)}_{receipt_id}_{counter}"
        counter += 1

    image_file_name = f"{base_name}.{record.image_ext}"
    (project_dir / image_file_name).write_bytes(record.image_bytes)

    entry = StoredReceipt(
        id=receipt_id,
        date=now.strftime("%d/%m/%Y"),
        receiptNumber=record.receipt_number,
        projectName=record.project_name,
        subject=record.subject,
        amount=record.amount,
        ocrText=record.ocr_text,
        imageFileName=image_file_name,
        imagePath=f"{project_dir_name}/{image_file_name}",
        fields=dict(record.fields),
    )

    metadata_path = project_dir / f"{base_name}.json"
    metadata_path.write_text(json.dumps(entry.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")

    index_path = root / INDEX_FILENAME
    entries = _read_index(index_path)
    entries.append(entry.to_dict())
    index_path.write_text(json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info("Saved receipt %s to %s", entry.receiptNumber, project_dir / image_file_name)
    return entry


def list_saved_receipts(root: Path | None = None) -> list[StoredReceipt]:
    """Load all index entries, oldest first; malformed entries are skipped."""
    root = root if root is not None else storage_root()
    results = []
    for raw in _read_index(root / INDEX_FILENAME):
        try:
            results.append(StoredReceipt(**raw))
        except TypeError as e:
            logger.warning("Skipping malformed index entry: %s", e)
    return results


def load_receipt_options(
    root: Path | None = None,
    default_subjects: tuple[str, ...] = DEFAULT_SUBJECT_KEYS,
) -> tuple[list[str], list[str]]:
    """
    Collect previously used project names and non-default subjects.

    Returns:
        Tuple of (projects, custom_subjects), each de-duplicated in first-seen order.
    """
    projects: list[str] = []
    custom_subjects: list[str] = []
    for entry in list_saved_receipts(root):
        if entry.projectName and entry.projectName not in projects:
            projects.append(entry.projectName)
        if entry.subject and entry.subject not in default_subjects and entry.subject not in custom_subjects:
            custom_subjects.append(entry.subject)
    return projects, custom_subjects
