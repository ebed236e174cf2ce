"""Tests for the receipt HTTP API."""

from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from receiptag.runtime import receipt_server
from receiptag.runtime.ocr_client import OCRServiceUnavailable


@pytest.fixture
def client(storage_dir: Path) -> TestClient:
    return TestClient(receipt_server.app)


def _upload_body(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "imageDataUrl": "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8img").decode("ascii"),
        "receiptNumber": "55",
        "projectName": "Camp",
        "subject": "food",
        "amount": "45.90",
        "ocrText": "Total: ₪45.90",
        "fields": {"amount": "45.90", "tax_id": "514"},
    }
    body.update(overrides)
    return body


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_parse_text(client: TestClient) -> None:
    response = client.post("/api/parse", json={"text": "Total: ₪45.90"})

    assert response.status_code == 200
    data = response.json()
    assert data["fields"][0]["value"] == "45.90"
    assert data["rawText"] == "Total: ₪45.90"


def test_parse_rejects_non_object(client: TestClient) -> None:
    response = client.post("/api/parse", json=["Total"])
    assert response.status_code == 400


def test_ocr_returns_text_and_fields(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []

    def fake_recognize(image_bytes: bytes, **kwargs: object) -> str:
        calls.append({"image": image_bytes, **kwargs})
        return "Receipt: 42\nTotal: ₪10.00"

    monkeypatch.setattr(receipt_server, "recognize_text", fake_recognize)

    response = client.post(
        "/api/ocr",
        files={"file": ("photo.jpg", b"jpegdata", "image/jpeg")},
        data={"locale": "es"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["text"] == "Receipt: 42\nTotal: ₪10.00"
    assert {f["key"]: f["value"] for f in data["parsed"]["fields"]}["receiptNumber"] == "42"
    assert calls[0]["image"] == b"jpegdata"
    assert calls[0]["language"] == "spa"
    assert calls[0]["filename"] == "photo.jpg"


def test_ocr_without_file(client: TestClient) -> None:
    response = client.post("/api/ocr", data={"locale": "he"})
    assert response.status_code == 400


def test_ocr_service_down(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(image_bytes: bytes, **kwargs: object) -> str:
        raise OCRServiceUnavailable("Failed to connect to OCR service")

    monkeypatch.setattr(receipt_server, "recognize_text", fail)

    response = client.post("/api/ocr", files={"file": ("photo.jpg", b"jpegdata", "image/jpeg")})
    assert response.status_code == 502


def test_upload_saves_to_disk(client: TestClient, storage_dir: Path) -> None:
    response = client.post("/api/upload", json=_upload_body())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["mode"] == "local"
    assert data["storagePath"] == str(storage_dir)
    entry = data["entry"]
    assert entry["fields"] == {"amount": "45.90", "tax_id": "514"}
    assert (storage_dir / entry["imagePath"]).read_bytes() == b"\xff\xd8img"

    index = json.loads((storage_dir / "receipts.json").read_text(encoding="utf-8"))
    assert index[0]["receiptNumber"] == "55"


@pytest.mark.parametrize("missing", ["imageDataUrl", "receiptNumber", "projectName", "subject", "amount"])
def test_upload_missing_field(client: TestClient, missing: str) -> None:
    response = client.post("/api/upload", json=_upload_body(**{missing: ""}))

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_upload_invalid_amount(client: TestClient) -> None:
    response = client.post("/api/upload", json=_upload_body(amount="lots"))

    assert response.status_code == 400
    assert response.json()["invalidFields"] == ["amount"]


def test_upload_bad_image_data(client: TestClient) -> None:
    response = client.post("/api/upload", json=_upload_body(imageDataUrl="data:image/jpeg;base64,@@@"))
    assert response.status_code == 400


def test_save_local_same_contract(client: TestClient, storage_dir: Path) -> None:
    response = client.post("/api/save-local", json=_upload_body())

    assert response.status_code == 200
    assert (storage_dir / "Camp").is_dir()


def test_options_lists_projects_and_custom_subjects(client: TestClient) -> None:
    client.post("/api/upload", json=_upload_body(projectName="Camp", subject="food"))
    client.post("/api/upload", json=_upload_body(projectName="Trip", subject="tickets"))

    response = client.get("/api/options")

    assert response.json() == {"projects": ["Camp", "Trip"], "customSubjects": ["tickets"]}


def test_status(client: TestClient, storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(receipt_server, "is_ocr_service_available", lambda url: True)

    data = client.get("/api/status").json()

    assert data["mode"] == "local"
    assert data["storagePath"] == str(storage_dir)
    assert data["ocr"] == {"url": "http://localhost:8001", "available": True}
