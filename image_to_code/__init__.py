"""
image-to-code - RGB565 firmware image converter

Turns a raster image into packed 16-bit RGB565 data for microcontroller
displays and exports it as a raw ``.bin`` blob or as an Arduino header
declaring a ``PROGMEM`` byte array.

Core modules:
- pixels: Image decoding into RGBA8888 pixel buffers (Pillow)
- rgb565: RGBA8888 -> big-endian RGB565 conversion
- export: Binary and source-text artifacts
- sinks: Artifact delivery (directory, clipboard, stream)
- session: Idle/Ready lifecycle around the current image
- server: Local HTTP page for paste-and-export
"""

__version__ = "0.3.1"
