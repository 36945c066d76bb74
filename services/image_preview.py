"""Preview helpers for generated campaign images.

Wraps Pillow to inspect a base64 image returned by the image model and to
render a small PNG preview for the campaign view.

Example:
    previewer = ImagePreviewer(max_size=(320, 240))
    info = previewer.inspect(image.encoded_bytes)
    thumb_png = previewer.thumbnail_png(image.encoded_bytes)
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Tuple

from PIL import Image

from utils.media_validation import decode_image_payload


@dataclass(frozen=True)
class ImageInfo:
    width: int
    height: int
    format: str


class ImagePreviewer:
    """Inspect and downscale generated images.

    Args:
        max_size: Bounding box for thumbnails. Aspect ratio is preserved.
        background: RGB color used to flatten transparent images.
    """

    def __init__(self, max_size: Tuple[int, int] = (320, 240), background: Tuple[int, int, int] | None = None):
        self.max_size = max_size
        self.background = background or (255, 255, 255)

    def _open(self, encoded: str) -> Image.Image:
        raw = decode_image_payload(encoded)
        try:
            return Image.open(io.BytesIO(raw))
        except Exception as exc:
            raise ValueError("Decoded bytes are not a supported image format") from exc

    def inspect(self, encoded: str) -> ImageInfo:
        """Return the dimensions and format of a base64 image.

        Raises:
            ValueError: If the payload cannot be decoded as an image.
        """
        src = self._open(encoded)
        return ImageInfo(width=src.width, height=src.height, format=(src.format or "PNG").upper())

    def thumbnail_png(self, encoded: str) -> bytes:
        """Return PNG bytes of a thumbnail that fits within `max_size`.

        Raises:
            ValueError: If the payload cannot be decoded as an image.
        """
        src = self._open(encoded).convert("RGBA")
        src.thumbnail(self.max_size, Image.LANCZOS)

        # Flatten alpha against the background color
        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="PNG", optimize=True)
        return out_io.getvalue()
