"""Runtime infrastructure for receiptag.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Settings via load_settings()

Usage:
    from receiptag.runtime import get_logger, get_paths, load_settings

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.receipts)
"""

from receiptag.runtime.config import (
    DEFAULT_OCR_LANGUAGE,
    DEFAULT_OCR_URL,
    DEFAULT_SUBJECT_KEYS,
    Settings,
    load_settings,
    reset_settings,
)
from receiptag.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptag.runtime.paths import (
    ProjectPaths,
    get_paths,
    reset_paths,
    set_storage_path,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "Settings",
    "load_settings",
    "reset_settings",
    "DEFAULT_OCR_URL",
    "DEFAULT_OCR_LANGUAGE",
    "DEFAULT_SUBJECT_KEYS",
    # Paths
    "get_paths",
    "reset_paths",
    "set_storage_path",
    "ProjectPaths",
]
