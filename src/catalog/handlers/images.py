"""Pillow backed image decoding for embedded icons."""
from __future__ import annotations

import io
from typing import Any, Callable

from PIL import Image, UnidentifiedImageError

from ..errors import DecodeFailure

ImageDecoder = Callable[[bytes], Any]


def decode_icon(data: bytes) -> Image.Image:
    """Decode ``data`` into a fully loaded Pillow image.

    Raises :class:`DecodeFailure` when the bytes are not a readable image.
    """

    if not data:
        raise DecodeFailure("empty icon payload")
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeFailure(f"unreadable icon: {exc}") from exc
    return image
