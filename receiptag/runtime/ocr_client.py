"""HTTP client for the external OCR service."""

import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from receiptag.receipt.ocr_helpers import resize_image_bytes, text_from_ocr_result
from receiptag.runtime.config import DEFAULT_OCR_LANGUAGE, DEFAULT_OCR_URL
from receiptag.runtime.logging import get_logger

logger = get_logger(__name__)

OCR_TIMEOUT_SECONDS = 60.0

LOCALE_TO_OCR_LANGUAGE: dict[str, str] = {
    "he": "heb",
    "es": "spa",
    "en": "eng",
}


@dataclass(frozen=True)
class OcrProgress:
    """Progress report for a long-running OCR call."""

    status: str
    progress: float  # 0.0 - 1.0


ProgressCallback = Callable[[OcrProgress], None]


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def ocr_language_for_locale(locale: str) -> str:
    return LOCALE_TO_OCR_LANGUAGE.get(locale, "eng")


def _report(on_progress: ProgressCallback | None, status: str, progress: float) -> None:
    if on_progress is not None:
        on_progress(OcrProgress(status=status, progress=progress))


def _post_image(client: httpx.Client, ocr_url: str, filename: str, image_bytes: bytes, langs: str) -> httpx.Response:
    return client.post(
        f"{ocr_url}/ocr",
        files={"file": (filename, image_bytes, "image/jpeg")},
        data={"lang": langs},
        timeout=OCR_TIMEOUT_SECONDS,
    )


def recognize_text(
    image_bytes: bytes,
    filename: str = "receipt.jpg",
    ocr_url: str = DEFAULT_OCR_URL,
    language: str = DEFAULT_OCR_LANGUAGE,
    on_progress: ProgressCallback | None = None,
    client: httpx.Client | None = None,
) -> str:
    """
    Send a receipt image to the OCR service and return the recognized text.

    English is always recognized alongside ``language``.

    Args:
        image_bytes: Raw image bytes (normalized before upload)
        filename: Name reported to the service
        ocr_url: Base URL of the OCR service
        language: OCR language code (heb, spa, eng)
        on_progress: Optional callback receiving OcrProgress updates
        client: Optional httpx client (a short-lived one is created otherwise)

    Returns:
        Recognized text, stripped of surrounding whitespace.

    Raises:
        OCRServiceUnavailable: on connection failure, non-200 status or a
            malformed response
    """
    ocr_url = ocr_url.rstrip("/")
    langs = language if language == "eng" else f"{language}+eng"

    _report(on_progress, "loading image", 0.0)
    try:
        resized_bytes = resize_image_bytes(image_bytes)
    except OSError as e:
        raise OCRServiceUnavailable(f"Unreadable receipt image: {e}") from e

    _report(on_progress, "uploading", 0.25)
    logger.info("Sending receipt to OCR service at %s (%s)...", ocr_url, langs)

    try:
        start_time = time.time()
        _report(on_progress, "recognizing text", 0.5)
        if client is None:
            with httpx.Client(timeout=OCR_TIMEOUT_SECONDS) as own_client:
                response = _post_image(own_client, ocr_url, filename, resized_bytes, langs)
        else:
            response = _post_image(client, ocr_url, filename, resized_bytes, langs)
        elapsed_time = time.time() - start_time
        logger.info("OCR service returned in %.2f seconds", elapsed_time)
    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        # Response body may echo receipt text; keep it out of non-debug logs
        logger.error("OCR service error: %s", response.status_code)
        logger.debug("OCR service error body: %s", response.text)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        raw_result = response.json()
    except ValueError as e:
        raise OCRServiceUnavailable("OCR service returned invalid JSON") from e
    if not isinstance(raw_result, dict):
        raise OCRServiceUnavailable("OCR service returned an unexpected payload")

    text = text_from_ocr_result(raw_result)
    _report(on_progress, "done", 1.0)
    logger.debug("Recognized %d characters", len(text))
    return text


def is_ocr_service_available(ocr_url: str = DEFAULT_OCR_URL, client: httpx.Client | None = None) -> bool:
    """Ping the OCR service health endpoint."""
    url = f"{ocr_url.rstrip('/')}/health"
    try:
        response = client.get(url, timeout=5.0) if client is not None else httpx.get(url, timeout=5.0)
    except httpx.RequestError:
        return False
    return response.status_code == 200
