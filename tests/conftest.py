from __future__ import annotations

import io
import struct
import sys
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest
from loguru import logger
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for extra in (PROJECT_ROOT / "src", PROJECT_ROOT):
    if str(extra) not in sys.path:
        sys.path.insert(0, str(extra))

SEGMENT_OFFSET = 0x80
SEGMENT_HEADER_SIZE = 0x38

NroFactory = Callable[..., Path]


def _pad(text: str, size: int) -> bytes:
    raw = text.encode("utf-8")
    return raw + b"\x00" * (size - len(raw))


def build_nro(
    name: str = "Homebrew",
    author: str = "Someone",
    icon: Optional[bytes] = None,
    *,
    base_magic: bytes = b"NRO0",
    asset_magic: bytes = b"ASET",
    with_metadata: bool = True,
    icon_offset: Optional[int] = None,
    icon_size: Optional[int] = None,
    metadata_size: int = 0x300,
) -> bytes:
    """Assemble a minimal NRO image with an ASET section at ``SEGMENT_OFFSET``."""

    header = bytearray(SEGMENT_OFFSET)
    header[0x10:0x14] = base_magic
    struct.pack_into("<I", header, 0x18, SEGMENT_OFFSET)

    segment = bytearray(SEGMENT_HEADER_SIZE)
    segment[0:4] = asset_magic
    payload = bytearray()
    if icon:
        offset = SEGMENT_HEADER_SIZE if icon_offset is None else icon_offset
        size = len(icon) if icon_size is None else icon_size
        struct.pack_into("<QI", segment, 0x8, offset, size)
        payload += icon
    if with_metadata:
        metadata_offset = SEGMENT_HEADER_SIZE + len(payload)
        struct.pack_into("<QQ", segment, 0x18, metadata_offset, metadata_size)
        payload += _pad(name, 0x200) + _pad(author, 0x100)
    return bytes(header + segment + payload)


@pytest.fixture(autouse=True)
def _configure_test_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("COLUMNS", "200")
    yield
    logger.remove()


@pytest.fixture
def icon_png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_nro(tmp_path: Path) -> NroFactory:
    def factory(filename: str = "game.nro", *args: object, **kwargs: object) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_nro(*args, **kwargs))  # type: ignore[arg-type]
        return path

    return factory
