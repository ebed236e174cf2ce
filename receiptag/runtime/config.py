"""Runtime loader for receiptag settings.

Settings come from ``receiptag.toml`` in the project root, e.g.::

    [ocr]
    url = "http://localhost:8001"
    language = "heb"

    [storage]
    path = "~/receipts"

    [form]
    subjects = ["food", "snacks", "other"]

Environment variables override the file: ``OCR_SERVICE_URL`` and
``LOCAL_STORAGE_PATH``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from receiptag.runtime.logging import get_logger
from receiptag.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"
DEFAULT_OCR_LANGUAGE = "heb"
DEFAULT_SUBJECT_KEYS: tuple[str, ...] = (
    "food",
    "arts_and_craft",
    "snacks",
    "office_supplies",
    "transportation",
    "cleaning",
    "equipment",
    "other",
)


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    ocr_url: str = DEFAULT_OCR_URL
    ocr_language: str = DEFAULT_OCR_LANGUAGE
    storage_path: Path | None = None
    subjects: tuple[str, ...] = DEFAULT_SUBJECT_KEYS


def _load_toml(config_path: Path) -> dict[str, Any]:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not config_path.exists():
        logger.debug("Config file not found: %s", config_path)
        return {}

    with open(config_path, "rb") as f:
        return tomllib.load(f)


@lru_cache(maxsize=4)
def load_settings(config_path: str | None = None) -> Settings:
    """
    Load settings from receiptag.toml plus environment overrides.

    Args:
        config_path: Optional TOML path override. If None, uses the project config file.

    Returns:
        Frozen Settings instance.
    """
    path = Path(config_path) if config_path is not None else get_paths().config_file
    data = _load_toml(path)

    ocr = data.get("ocr", {})
    storage = data.get("storage", {})
    form = data.get("form", {})

    ocr_url = os.environ.get("OCR_SERVICE_URL") or ocr.get("url", DEFAULT_OCR_URL)

    storage_value = os.environ.get("LOCAL_STORAGE_PATH") or storage.get("path")
    storage_path = Path(storage_value).expanduser() if storage_value else None

    subjects = tuple(form.get("subjects", DEFAULT_SUBJECT_KEYS))
    if not subjects:
        logger.warning("Empty subject list in %s; using defaults", path)
        subjects = DEFAULT_SUBJECT_KEYS

    settings = Settings(
        ocr_url=str(ocr_url).rstrip("/"),
        ocr_language=str(ocr.get("language", DEFAULT_OCR_LANGUAGE)),
        storage_path=storage_path,
        subjects=subjects,
    )
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings


def reset_settings() -> None:
    """Clear cached settings. Useful for testing."""
    load_settings.cache_clear()
