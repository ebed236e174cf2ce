"""Shared pytest fixtures for receiptag tests."""

from __future__ import annotations

import io
from collections.abc import Iterator
from pathlib import Path

import pytest

from receiptag.runtime import reset_paths, reset_settings, set_storage_path


@pytest.fixture(autouse=True)
def isolated_runtime(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test from an empty project root with no env overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OCR_SERVICE_URL", raising=False)
    monkeypatch.delenv("LOCAL_STORAGE_PATH", raising=False)
    reset_paths()
    reset_settings()
    yield
    reset_paths()
    reset_settings()


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    path = tmp_path / "storage"
    set_storage_path(path)
    return path


@pytest.fixture
def jpeg_bytes() -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", (40, 60), color="white").save(buffer, format="JPEG")
    return buffer.getvalue()
