"""Exception types raised by image-to-code."""

from __future__ import annotations


class ImageToCodeError(Exception):
    """Base class for image-to-code errors."""


class UnsupportedImageError(ImageToCodeError):
    """Raised when ingested content cannot be decoded as an image."""


class SinkError(ImageToCodeError):
    """Raised when an artifact cannot be handed to its destination."""
