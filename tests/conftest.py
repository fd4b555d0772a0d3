import struct
import sys
import zlib
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

# Ensure package root is importable when tests are executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


RATINGS_TEXT = "86% · Rotten Tomatoes\n91 · Metacritic\n8.2/10 · IMDb"


def _encode_image(
    width: int = 300,
    height: int = 450,
    color: tuple[int, int, int] = (255, 255, 255),
    image_format: str = "JPEG",
) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=image_format)
    return buffer.getvalue()


def _search_document(text: str = RATINGS_TEXT) -> str:
    return (
        "<html><body><div class='kp-header'>Header</div>"
        f"<div class='Ap5OSd'>{text}</div>"
        "<div class='Ap5OSd'>ignored · second block</div></body></html>"
    )


@pytest.fixture
def ratings_text() -> str:
    return RATINGS_TEXT


@pytest.fixture
def encode_image():
    return _encode_image


@pytest.fixture
def search_document():
    return _search_document


@pytest.fixture
def poster_bytes() -> bytes:
    return _encode_image()


@pytest.fixture
def oversized_png() -> bytes:
    """A 1x1 PNG whose header claims 20000x20000 pixels."""

    data = bytearray(_encode_image(1, 1, image_format="PNG"))
    # IHDR payload starts after the 8 byte signature, length and chunk type.
    data[16:24] = struct.pack(">II", 20000, 20000)
    data[29:33] = struct.pack(">I", zlib.crc32(bytes(data[12:29])))
    return bytes(data)
