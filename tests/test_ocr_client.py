"""Tests for the OCR service client."""

from __future__ import annotations

import httpx
import pytest

from receiptag.runtime.ocr_client import (
    OCRServiceUnavailable,
    OcrProgress,
    is_ocr_service_available,
    ocr_language_for_locale,
    recognize_text,
)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_locale_to_language() -> None:
    assert ocr_language_for_locale("he") == "heb"
    assert ocr_language_for_locale("es") == "spa"
    assert ocr_language_for_locale("en") == "eng"
    assert ocr_language_for_locale("fr") == "eng"


def test_recognize_text_posts_image_and_returns_text(jpeg_bytes: bytes) -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(200, json={"text": "  Total: ₪45.90\n"})

    progress: list[OcrProgress] = []
    text = recognize_text(
        jpeg_bytes,
        ocr_url="http://ocr.test/",
        language="heb",
        on_progress=progress.append,
        client=_client(handler),
    )

    assert text == "Total: ₪45.90"
    assert seen["url"] == "http://ocr.test/ocr"
    assert b"heb+eng" in seen["body"]
    assert [p.status for p in progress] == ["loading image", "uploading", "recognizing text", "done"]
    assert progress[-1].progress == 1.0


def test_english_is_not_duplicated(jpeg_bytes: bytes) -> None:
    bodies: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(200, json={"text": "ok"})

    recognize_text(jpeg_bytes, ocr_url="http://ocr.test", language="eng", client=_client(handler))

    assert b"eng+eng" not in bodies[0]


def test_non_200_raises(jpeg_bytes: bytes) -> None:
    client = _client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(OCRServiceUnavailable, match="500"):
        recognize_text(jpeg_bytes, ocr_url="http://ocr.test", client=client)


def test_connection_error_raises(jpeg_bytes: bytes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(OCRServiceUnavailable):
        recognize_text(jpeg_bytes, ocr_url="http://ocr.test", client=_client(handler))


def test_invalid_json_raises(jpeg_bytes: bytes) -> None:
    client = _client(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(OCRServiceUnavailable):
        recognize_text(jpeg_bytes, ocr_url="http://ocr.test", client=client)


def test_unreadable_image_raises() -> None:
    client = _client(lambda request: httpx.Response(200, json={"text": "x"}))

    with pytest.raises(OCRServiceUnavailable):
        recognize_text(b"not an image", ocr_url="http://ocr.test", client=client)


def test_health_check() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/health"
        return httpx.Response(200, json={"status": "ok"})

    assert is_ocr_service_available("http://ocr.test/", client=_client(handler))
    assert not is_ocr_service_available("http://ocr.test", client=_client(lambda request: httpx.Response(503)))


def test_health_check_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    assert not is_ocr_service_available("http://ocr.test", client=_client(handler))
