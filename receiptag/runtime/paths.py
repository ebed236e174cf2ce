"""Centralized path management for receiptag.

Local receipt storage layout:

    receipts/
    ├── <project name>/
    │   ├── <receipt number>_<id>.jpg
    │   └── <receipt number>_<id>.json
    └── receipts.json          (master index across all projects)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_FILENAME = "receiptag.toml"
INDEX_FILENAME = "receipts.json"


def _get_project_root() -> Path:
    """Project root is the directory the process was started from."""
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    ``storage_override`` wins over the ``LOCAL_STORAGE_PATH`` environment
    variable, which wins over ``<root>/receipts``.
    """

    root: Path = field(default_factory=_get_project_root)
    storage_override: Path | None = None

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config_file(self) -> Path:
        """Settings TOML file (receiptag.toml)."""
        return self.root / CONFIG_FILENAME

    # --- Storage paths ---
    @property
    def receipts(self) -> Path:
        """Root directory for locally stored receipts."""
        if self.storage_override is not None:
            return self.storage_override
        env_path = os.environ.get("LOCAL_STORAGE_PATH")
        if env_path:
            return Path(env_path).expanduser()
        return self.root / "receipts"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def set_storage_path(path: Path | None) -> None:
    """Override the local storage root (None restores env/default resolution)."""
    get_paths().storage_override = path


def reset_paths() -> None:
    """Drop the singleton so the next get_paths() re-reads the working directory."""
    global _paths
    _paths = None
