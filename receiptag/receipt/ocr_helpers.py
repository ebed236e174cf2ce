"""Pure image and OCR-result helpers for receipt scanning."""

import base64
import binascii
import io
import re
from typing import Any

MAX_IMAGE_WIDTH = 1600  # Phone photos are downscaled to this width before OCR
JPEG_QUALITY = 80

_DATA_URL_RE = re.compile(r"^data:image/(\w+);base64,", re.IGNORECASE)


def resize_image_bytes(image_bytes: bytes, max_width: int = MAX_IMAGE_WIDTH, quality: int = JPEG_QUALITY) -> bytes:
    """
    Normalize a receipt photo for OCR and storage.

    Applies EXIF orientation, scales down to ``max_width`` keeping the aspect
    ratio, and re-encodes as JPEG.

    Args:
        image_bytes: Image data as bytes (any format Pillow can open)
        max_width: Maximum allowed width in pixels
        quality: JPEG quality (1-95)

    Returns:
        JPEG image bytes
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))

    # Apply EXIF orientation so OCR sees the receipt upright
    img = ImageOps.exif_transpose(img)

    width, height = img.size
    if width > max_width:
        new_height = int(height * (max_width / width))
        img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def decode_image_data_url(data_url: str) -> tuple[bytes, str]:
    """
    Decode a ``data:image/<ext>;base64,...`` URL.

    Returns:
        Tuple of (image bytes, file extension). Bare base64 without a data-URL
        prefix is accepted and assumed to be JPEG.

    Raises:
        ValueError: if the payload is not valid base64
    """
    match = _DATA_URL_RE.match(data_url)
    ext = match.group(1).lower() if match else "jpg"
    payload = data_url[match.end() :] if match else data_url
    if ext == "jpeg":
        ext = "jpg"
    try:
        return base64.b64decode(payload, validate=True), ext
    except binascii.Error as e:
        raise ValueError(f"Invalid image data: {e}") from e


def text_from_ocr_result(raw_result: dict[str, Any]) -> str:
    """
    Extract plain recognized text from an OCR service response.

    Accepts ``{"text": ...}``, ``{"full_text": ...}`` or PaddleOCR-style
    ``{"detections": [[bbox, [text, confidence]], ...]}`` payloads. Detections
    are joined one per line in service order.
    """
    for key in ("text", "full_text"):
        value = raw_result.get(key)
        if isinstance(value, str):
            return value.strip()

    lines: list[str] = []
    for detection in raw_result.get("detections", []):
        try:
            _bbox, (text, _confidence) = detection
        except (TypeError, ValueError):
            continue
        if isinstance(text, str) and text.strip():
            lines.append(text.strip())
    return "\n".join(lines)
