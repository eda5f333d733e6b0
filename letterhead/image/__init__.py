"""Image-level helpers (payload decoding, size probing, mime mapping)."""

from .resolver import (
    DEFAULT_SIZE,
    decode_payload,
    normalize_mime_type,
    probe_dimensions,
    resolve_image,
)

__all__ = [
    "DEFAULT_SIZE",
    "decode_payload",
    "normalize_mime_type",
    "probe_dimensions",
    "resolve_image",
]
