"""Validation helpers for generated image payloads."""

import base64
import binascii

ALLOWED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/webp",
}


def encode_image_payload(data: bytes | str) -> str:
    """Return a base64 string for image data, passing through text that is already encoded."""
    if isinstance(data, str):
        return data.strip()
    return base64.b64encode(data).decode("utf-8")


def decode_image_payload(encoded: str) -> bytes:
    """Decode a base64 image payload.

    Raises:
        ValueError: If the payload is empty or not valid base64.
    """
    if not encoded:
        raise ValueError("Image payload is empty.")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image payload is not valid base64.") from exc


def normalize_image_mime(mime_type: str | None) -> str:
    """Strip MIME parameters and fall back to PNG for unknown image types."""
    mime = (mime_type or "").lower().split(";", 1)[0].strip()
    return mime if mime in ALLOWED_IMAGE_TYPES else "image/png"
