"""Turn extracted image assets into renderable image runs.

Payload decoding is the only fatal step; dimension probing falls back
to a fixed default size.
"""

from __future__ import annotations

import base64
import binascii
import io
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from letterhead.docs.model import ImageAsset, ImageRun
from letterhead.errors import ImageDecodeError
from letterhead.log import get_logger

logger = get_logger("letterhead.image")

DEFAULT_SIZE = (200, 200)
MIME_TYPES = ("jpeg", "png", "gif")

_MIME_ALIASES = {
    "jpg": "jpeg",
    "jpeg": "jpeg",
    "pjpeg": "jpeg",
    "png": "png",
    "x-png": "png",
    "gif": "gif",
}


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """Map a declared mime string to one of jpeg/png/gif (default png).

    Accepts bare subtypes ("jpg") and full types ("image/jpeg").
    """
    value = (mime_type or "").strip().lower()
    if "/" in value:
        value = value.rsplit("/", 1)[1]
    value = value.split(";")[0].strip()
    return _MIME_ALIASES.get(value, "png")


def decode_payload(data) -> bytes:
    """Decode an asset payload into bytes.

    Doxygen:
    - @param data: Raw bytes, or a base64 string (an optional data URI prefix is allowed).
    - @return: Image bytes.
    - @throws ImageDecodeError: If the payload is empty or not valid base64.
    """
    if isinstance(data, (bytes, bytearray)):
        raw = bytes(data)
    elif isinstance(data, str):
        payload = data.strip()
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        payload = "".join(payload.split())
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ImageDecodeError(f"Invalid base64 image payload: {exc}") from exc
    else:
        raise ImageDecodeError(f"Unsupported image payload type: {type(data).__name__}")
    if not raw:
        raise ImageDecodeError("Image payload is empty")
    return raw


def probe_dimensions(data: bytes) -> Tuple[int, int]:
    """Read pixel size from the image header, or return the default size."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.debug("Could not probe image size (%s), using %sx%s", exc, *DEFAULT_SIZE)
        return DEFAULT_SIZE
    if width <= 0 or height <= 0:
        return DEFAULT_SIZE
    return width, height


def resolve_image(asset: ImageAsset) -> ImageRun:
    data = decode_payload(asset.data)
    width, height = asset.width_px, asset.height_px
    if not width or not height:
        probed_w, probed_h = probe_dimensions(data)
        # keep a declared side, take the other from the header
        width = width or probed_w
        height = height or probed_h
    return ImageRun(
        asset=asset,
        data=data,
        width_px=int(width),
        height_px=int(height),
        mime_type=normalize_mime_type(asset.mime_type),
    )
