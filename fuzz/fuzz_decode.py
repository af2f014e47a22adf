import sys

import atheris

with atheris.instrument_imports():
    from image_to_code.errors import UnsupportedImageError
    from image_to_code.pixels import decode_image


def TestOneInput(data: bytes) -> None:
    # Arbitrary bytes must either decode or raise UnsupportedImageError.
    try:
        buffer = decode_image(data)
    except UnsupportedImageError:
        return
    assert len(buffer.data) == buffer.width * buffer.height * 4


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
