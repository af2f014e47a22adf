"""Render RGB565 byte streams into exportable artifacts.

Two renderings exist:

- binary: the byte stream itself, offered as ``<name>.bin``
- source: an Arduino header declaring ``const uint8_t <name>_map[] PROGMEM``

The header layout is consumed by existing firmware tooling and must stay
byte-for-byte stable.
"""

from __future__ import annotations

from dataclasses import dataclass

BINARY_MEDIA_TYPE = "application/octet-stream"
SOURCE_MEDIA_TYPE = "text/plain"

SOURCE_PREAMBLE = "#pragma once\n\n#include <Arduino.h>\n#include <pgmspace.h>\n\n"


@dataclass(frozen=True)
class ExportArtifact:
    name: str
    filename: str
    media_type: str
    payload: bytes

    @property
    def is_text(self) -> bool:
        return self.media_type.startswith("text/")

    @property
    def text(self) -> str:
        if not self.is_text:
            raise TypeError(f"Artifact '{self.filename}' is binary")
        return self.payload.decode("utf-8")

    def __len__(self) -> int:
        return len(self.payload)


def format_hex_bytes(stream: bytes) -> str:
    """Render bytes as ``0x12, 0x34`` with lowercase two-digit hex."""
    return ", ".join(f"0x{byte:02x}" for byte in stream)


def format_source(name: str, stream: bytes) -> str:
    """Return the header text declaring ``<name>_map``."""
    return (
        f"{SOURCE_PREAMBLE}const uint8_t {name}_map[] PROGMEM = {{\n"
        f"    {format_hex_bytes(stream)}\n"
        "  };\n"
    )


def render_binary(stream: bytes, name: str) -> ExportArtifact:
    return ExportArtifact(
        name=name,
        filename=f"{name}.bin",
        media_type=BINARY_MEDIA_TYPE,
        payload=bytes(stream),
    )


def render_source(stream: bytes, name: str) -> ExportArtifact:
    return ExportArtifact(
        name=name,
        filename=f"{name}.h",
        media_type=SOURCE_MEDIA_TYPE,
        payload=format_source(name, stream).encode("utf-8"),
    )
