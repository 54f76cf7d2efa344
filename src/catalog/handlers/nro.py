"""Reader for homebrew NRO executables and their embedded ASET metadata."""
from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import Any, BinaryIO, Optional, Tuple

from utils.logging import get_logger

from ..entries import MISSING_AUTHOR, TitleMetadata
from ..errors import DecodeFailure, FieldAbsent, FormatMismatch, IOFailure
from .base import FormatReader
from .images import ImageDecoder, decode_icon


LOGGER = get_logger(__name__)

NRO_MAGIC = b"NRO0"
NRO_MAGIC_OFFSET = 0x10
ASSET_OFFSET_FIELD = 0x18
ASSET_MAGIC = b"ASET"
ASSET_ICON_FIELD = 0x8
ASSET_METADATA_FIELD = 0x18
NAME_SIZE = 0x200
AUTHOR_SIZE = 0x100

_U32 = struct.Struct("<I")
_ICON_LOCATION = struct.Struct("<QI")
_METADATA_LOCATION = struct.Struct("<QQ")


def _seek(handle: BinaryIO, offset: int) -> None:
    try:
        handle.seek(offset)
    except (OSError, OverflowError, ValueError) as exc:
        raise IOFailure(f"cannot seek to {offset:#x}: {exc}") from exc


def _read_exact(handle: BinaryIO, size: int) -> bytes:
    try:
        remaining = os.fstat(handle.fileno()).st_size - handle.tell()
        if size > remaining:
            raise IOFailure(f"short read: wanted {size} bytes, {max(remaining, 0)} available")
        data = handle.read(size)
    except (OSError, OverflowError, MemoryError) as exc:
        raise IOFailure(f"read of {size} bytes failed: {exc}") from exc
    if len(data) != size:
        raise IOFailure(f"short read: wanted {size} bytes, got {len(data)}")
    return data


_PADDING = "".join(chr(code) for code in range(0x21))


def _decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").strip(_PADDING)


class NroReader(FormatReader):
    """Extract title, author and icon from the ASET section of an NRO file."""

    extensions = (".nro",)
    label = "NRO"

    def __init__(
        self,
        missing_author: str = MISSING_AUTHOR,
        decode_image: ImageDecoder = decode_icon,
    ) -> None:
        super().__init__(missing_author)
        self.decode_image = decode_image

    def verify(self, path: Path) -> bool:
        try:
            with Path(path).open("rb") as handle:
                handle.seek(NRO_MAGIC_OFFSET)
                return handle.read(len(NRO_MAGIC)) == NRO_MAGIC
        except OSError as exc:
            LOGGER.debug("Failed to verify %s: %s", path, exc)
            return False

    def parse(self, path: Path) -> TitleMetadata:
        path = Path(path)
        try:
            handle = path.open("rb")
        except OSError as exc:
            LOGGER.debug("Failed to open %s: %s", path, exc)
            return self.sentinel(path)
        with handle:
            try:
                segment = self._locate_segment(handle)
            except (IOFailure, FormatMismatch) as exc:
                LOGGER.debug("No ASET section in %s: %s", path, exc)
                return self.sentinel(path)
            icon = self._read_icon(handle, segment, path)
            name, author = self._read_title(handle, segment, path)
        return TitleMetadata(name=name, author=author, icon=icon)

    def _locate_segment(self, handle: BinaryIO) -> int:
        _seek(handle, ASSET_OFFSET_FIELD)
        (segment,) = _U32.unpack(_read_exact(handle, _U32.size))
        _seek(handle, segment)
        try:
            magic = _read_exact(handle, len(ASSET_MAGIC))
        except IOFailure as exc:
            raise FormatMismatch(f"ASET magic past end of file at {segment:#x}") from exc
        if magic != ASSET_MAGIC:
            raise FormatMismatch(f"expected {ASSET_MAGIC!r} at {segment:#x}, found {magic!r}")
        return segment

    def _read_icon(self, handle: BinaryIO, segment: int, path: Path) -> Optional[Any]:
        try:
            _seek(handle, segment + ASSET_ICON_FIELD)
            offset, size = _ICON_LOCATION.unpack(_read_exact(handle, _ICON_LOCATION.size))
            if offset == 0 or size == 0:
                raise FieldAbsent("icon offset or size is zero")
            _seek(handle, segment + offset)
            data = _read_exact(handle, size)
        except FieldAbsent:
            return None
        except IOFailure as exc:
            LOGGER.debug("Failed to read icon of %s: %s", path, exc)
            return None
        try:
            return self.decode_image(data)
        except DecodeFailure as exc:
            LOGGER.debug("Failed to decode icon of %s: %s", path, exc)
        except Exception as exc:  # injected decoders may raise anything
            LOGGER.debug("Icon decoder failed for %s: %s", path, exc)
        return None

    def _read_title(self, handle: BinaryIO, segment: int, path: Path) -> Tuple[str, str]:
        fallback = (path.name, self.missing_author)
        try:
            _seek(handle, segment + ASSET_METADATA_FIELD)
            offset, size = _METADATA_LOCATION.unpack(_read_exact(handle, _METADATA_LOCATION.size))
            if offset == 0 or size == 0:
                raise FieldAbsent("metadata offset or size is zero")
            _seek(handle, segment + offset)
            name = _decode_text(_read_exact(handle, NAME_SIZE))
            author = _decode_text(_read_exact(handle, AUTHOR_SIZE))
        except FieldAbsent:
            return fallback
        except IOFailure as exc:
            LOGGER.debug("Failed to read metadata of %s: %s", path, exc)
            return fallback
        return (name or path.name), author
