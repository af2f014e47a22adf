"""RGBA8888 to RGB565 conversion.

Each pixel becomes 2 bytes: 5 bits red, 6 green, 5 blue, most significant
byte first. Low-order channel bits are truncated, never rounded, and alpha is
dropped.
"""

from __future__ import annotations

from collections.abc import Iterator

from .pixels import BYTES_PER_PIXEL, PixelBuffer

BYTES_PER_PACKED_PIXEL = 2


def pack_rgb565(r: int, g: int, b: int) -> int:
    """Pack 8-bit channels into a 16-bit RGB565 value."""
    r5 = (r >> 3) & 0x1F
    g6 = (g >> 2) & 0x3F
    b5 = (b >> 3) & 0x1F
    return (r5 << 11) | (g6 << 5) | b5


def iter_rgb565(buffer: PixelBuffer) -> Iterator[int]:
    """Yield one packed value per pixel in row-major order."""
    data = buffer.data
    for offset in range(0, len(data), BYTES_PER_PIXEL):
        yield pack_rgb565(data[offset], data[offset + 1], data[offset + 2])


def convert_to_rgb565(buffer: PixelBuffer) -> bytes:
    """Convert a pixel buffer into its big-endian RGB565 byte stream."""
    out = bytearray(buffer.pixel_count * BYTES_PER_PACKED_PIXEL)
    for index, value in enumerate(iter_rgb565(buffer)):
        out[index * 2] = (value >> 8) & 0xFF
        out[index * 2 + 1] = value & 0xFF
    return bytes(out)
