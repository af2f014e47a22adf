"""Shared test fixtures for the image-to-code test suite.

Provides:
- Pixel buffer builders
- Encoded image bytes generated in memory with Pillow
- Name store / session objects backed by tmp_path
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Sequence
from unittest.mock import Mock

import pytest
from image_to_code.name_store import NameStore
from image_to_code.pixels import PixelBuffer
from image_to_code.session import ConverterSession
from PIL import Image

Pixel = tuple[int, int, int, int]

# ============================================================================
# Pytest Configuration
# ============================================================================


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return Mock(spec=logging.Logger)


# ============================================================================
# Image Fixtures
# ============================================================================


def buffer_from_pixels(width: int, height: int, pixels: Sequence[Pixel]) -> PixelBuffer:
    data = bytearray()
    for pixel in pixels:
        data.extend(pixel)
    return PixelBuffer(width, height, bytes(data))


@pytest.fixture
def make_buffer() -> Callable[[int, int, Sequence[Pixel]], PixelBuffer]:
    return buffer_from_pixels


@pytest.fixture
def checker_buffer() -> PixelBuffer:
    """2x2 buffer: red, green / blue, white."""
    return buffer_from_pixels(
        2,
        2,
        [
            (255, 0, 0, 255),
            (0, 255, 0, 255),
            (0, 0, 255, 255),
            (255, 255, 255, 0),
        ],
    )


def encode_image(pixels: Sequence[Pixel], size: tuple[int, int], fmt: str = "PNG") -> bytes:
    image = Image.new("RGBA", size)
    image.putdata(list(pixels))
    if fmt != "PNG":
        image = image.convert("RGB")
    out = io.BytesIO()
    image.save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def encode() -> Callable[..., bytes]:
    return encode_image


@pytest.fixture
def png_bytes() -> bytes:
    """3x1 PNG: red, green, blue."""
    return encode_image([(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255)], (3, 1))


# ============================================================================
# Session Fixtures
# ============================================================================


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.conf"


@pytest.fixture
def name_store(state_path):
    store = NameStore(state_path=state_path, debounce_seconds=10.0)
    yield store
    if store._timer is not None:
        store._timer.cancel()


@pytest.fixture
def session(name_store):
    return ConverterSession(name_store=name_store)
