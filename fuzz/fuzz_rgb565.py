import sys

import atheris

with atheris.instrument_imports():
    from image_to_code.export import format_source, render_binary
    from image_to_code.pixels import PixelBuffer
    from image_to_code.rgb565 import convert_to_rgb565


def TestOneInput(data: bytes) -> None:
    """Convert arbitrary RGBA bytes and check the export invariants."""
    if len(data) < 2:
        return
    width = (data[0] % 16) + 1
    pixels = data[1:]
    height = len(pixels) // (width * 4)
    body = pixels[: width * height * 4]

    buffer = PixelBuffer(width, height, body)
    stream = convert_to_rgb565(buffer)
    assert len(stream) == width * height * 2

    binary = render_binary(stream, "fuzz")
    assert binary.payload == stream

    text = format_source("fuzz", stream)
    literals = text.split("{\n    ", 1)[1].split("\n  };", 1)[0]
    parsed = bytes(int(item, 16) for item in literals.split(", ") if item)
    assert parsed == stream


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
