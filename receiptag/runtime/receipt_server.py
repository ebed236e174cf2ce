"""FastAPI server for parsing and saving receipts from a phone browser."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from receiptag.application.receipts.listing import run_load_receipt_options
from receiptag.application.receipts.submit import ReceiptForm, ReceiptSubmitRequest, run_receipt_submit
from receiptag.receipt.field_extractor import extract
from receiptag.receipt.ocr_helpers import decode_image_data_url
from receiptag.runtime.config import load_settings
from receiptag.runtime.logging import get_logger
from receiptag.runtime.ocr_client import (
    OCRServiceUnavailable,
    is_ocr_service_available,
    ocr_language_for_locale,
    recognize_text,
)
from receiptag.runtime.receipt_storage import storage_root

logger = get_logger(__name__)

REQUIRED_UPLOAD_FIELDS = ("imageDataUrl", "receiptNumber", "projectName", "subject", "amount")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the storage directory on startup."""
    storage_root().mkdir(parents=True, exist_ok=True)
    yield


app = FastAPI(title="Receipt Tagger", lifespan=lifespan)


async def _json_body(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _save_upload(body: dict[str, Any]) -> JSONResponse:
    """Shared handler for /api/upload and /api/save-local."""
    if any(not body.get(name) for name in REQUIRED_UPLOAD_FIELDS):
        return JSONResponse({"error": "Missing required fields"}, status_code=400)

    try:
        image_bytes, image_ext = decode_image_data_url(str(body["imageDataUrl"]))
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    fields = body.get("fields") or {}
    result = run_receipt_submit(
        ReceiptSubmitRequest(
            form=ReceiptForm(
                receipt_number=str(body["receiptNumber"]),
                project_name=str(body["projectName"]),
                subject=str(body["subject"]),
                amount=str(body["amount"]),
            ),
            image_bytes=image_bytes,
            image_ext=image_ext,
            ocr_text=str(body.get("ocrText") or ""),
            fields={str(k): str(v) for k, v in fields.items()} if isinstance(fields, dict) else {},
        )
    )

    if result.status == "invalid":
        return JSONResponse(
            {"error": "Invalid fields", "invalidFields": result.invalid_fields},
            status_code=400,
        )
    if result.status != "saved" or result.entry is None:
        return JSONResponse({"error": result.error or "Internal server error"}, status_code=500)

    return JSONResponse(
        {
            "success": True,
            "mode": "local",
            "entry": result.entry.to_dict(),
            "storagePath": str(storage_root()),
        }
    )


@app.post("/api/parse")
async def parse_text(request: Request) -> JSONResponse:
    """Extract fields from already-recognized text."""
    body = await _json_body(request)
    if body is None or not isinstance(body.get("text", ""), str):
        return JSONResponse({"error": "Expected JSON body with 'text'"}, status_code=400)
    return JSONResponse(extract(body.get("text", "")).to_dict())


@app.post("/api/ocr")
async def ocr_image(request: Request) -> JSONResponse:
    """Receive a receipt image, run OCR and return text plus extracted fields."""
    form = await request.form()

    file = None
    for key, value in form.items():
        logger.debug(f"Form field: key={repr(key)}, type={type(value)}")
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return JSONResponse({"error": "No file found in request"}, status_code=400)

    locale = form.get("locale")
    settings = load_settings()
    language = ocr_language_for_locale(locale) if isinstance(locale, str) else settings.ocr_language

    contents = await file.read()
    file_filename = getattr(file, "filename", None)
    try:
        text = await run_in_threadpool(
            recognize_text,
            contents,
            filename=Path(file_filename).name if file_filename else "receipt.jpg",
            ocr_url=settings.ocr_url,
            language=language,
        )
    except OCRServiceUnavailable as e:
        logger.error("OCR failed: %s", e)
        return JSONResponse({"error": "Text recognition failed"}, status_code=502)

    return JSONResponse({"text": text, "parsed": extract(text).to_dict()})


@app.post("/api/upload")
async def upload_receipt(request: Request) -> JSONResponse:
    """Save a confirmed receipt (image + metadata)."""
    body = await _json_body(request)
    if body is None:
        return JSONResponse({"error": "Missing required fields"}, status_code=400)
    try:
        return _save_upload(body)
    except Exception as e:
        logger.error("Upload error: %s", e)
        return JSONResponse({"error": "Internal server error"}, status_code=500)


@app.post("/api/save-local")
async def save_local(request: Request) -> JSONResponse:
    """Explicit local-disk save; same contract as /api/upload."""
    return await upload_receipt(request)


@app.get("/api/status")
def status() -> dict[str, Any]:
    """Storage mode and OCR service reachability."""
    settings = load_settings()
    return {
        "mode": "local",
        "storagePath": str(storage_root()),
        "ocr": {
            "url": settings.ocr_url,
            "available": is_ocr_service_available(settings.ocr_url),
        },
    }


@app.get("/api/options")
async def options() -> dict[str, list[str]]:
    """Previously used projects and custom subjects."""
    try:
        receipt_options = run_load_receipt_options()
    except OSError as e:
        logger.warning("Could not load receipt options: %s", e)
        return {"projects": [], "customSubjects": []}
    return {"projects": receipt_options.projects, "customSubjects": receipt_options.custom_subjects}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
