"""Format readers for the catalog scanner."""

from .base import FormatReader
from .images import ImageDecoder, decode_icon
from .nro import NroReader

__all__ = [
    "FormatReader",
    "ImageDecoder",
    "NroReader",
    "decode_icon",
]
