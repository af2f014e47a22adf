"""Decode images into RGBA8888 pixel buffers.

The conversion pipeline never touches Pillow directly: everything it needs is
carried by a :class:`PixelBuffer`, an immutable value holding the image size
and its interleaved R, G, B, A bytes in row-major order.
"""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import UnsupportedImageError

LOGGER = logging.getLogger(__name__)

BYTES_PER_PIXEL = 4


@dataclass(frozen=True)
class PixelBuffer:
    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid image size {self.width}x{self.height}")
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel buffer for {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}"
            )
        if not isinstance(self.data, bytes):
            # bytearray / memoryview input is copied into immutable bytes
            object.__setattr__(self, "data", bytes(self.data))

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.pixel_count == 0

    @classmethod
    def empty(cls) -> PixelBuffer:
        return cls(0, 0, b"")


def from_image(image: Image.Image) -> PixelBuffer:
    """Snapshot a Pillow image as an RGBA8888 buffer."""
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    width, height = rgba.size
    return PixelBuffer(width, height, rgba.tobytes())


def decode_image(data: bytes) -> PixelBuffer:
    """Decode encoded image bytes (PNG, JPEG, BMP, ...) into a pixel buffer.

    Raises:
        UnsupportedImageError: ``data`` is empty or not a format Pillow can read.
    """
    if not data:
        raise UnsupportedImageError("No image data")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            buffer = from_image(image)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        EOFError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise UnsupportedImageError(f"Cannot decode image: {exc}") from exc
    LOGGER.debug("Decoded %dx%d image (%d bytes)", buffer.width, buffer.height, len(data))
    return buffer


async def decode_image_async(data: bytes) -> PixelBuffer:
    """Decode off the event loop; resolves to a buffer or raises UnsupportedImageError."""
    return await asyncio.to_thread(decode_image, data)


def load_image(path: Path | str) -> PixelBuffer:
    """Read and decode an image file."""
    source = Path(path)
    try:
        data = source.read_bytes()
    except OSError as exc:
        raise UnsupportedImageError(f"Cannot read '{source}': {exc}") from exc
    return decode_image(data)
