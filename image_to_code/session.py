"""Conversion session: the current image plus the export name.

A session starts ``IDLE``. Capturing or ingesting an image moves it to
``READY``; every export re-runs the full pipeline from the captured buffer
and leaves the session ``READY``. Exports requested while ``IDLE`` return
``None`` instead of raising.
"""

from __future__ import annotations

import enum
import logging
import threading

from .errors import UnsupportedImageError
from .export import ExportArtifact, render_binary, render_source
from .name_store import NameStore
from .pixels import PixelBuffer, decode_image, decode_image_async
from .rgb565 import convert_to_rgb565
from .sinks import Sink

LOGGER = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    READY = "ready"


class ConverterSession:
    def __init__(
        self,
        *,
        name_store: NameStore | None = None,
        name: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._name_store = name_store
        self._logger = logger or LOGGER
        self._lock = threading.Lock()
        self._buffer: PixelBuffer | None = None
        if name is None:
            name = name_store.load() if name_store else ""
        self._name = name

    @property
    def state(self) -> SessionState:
        return SessionState.READY if self.buffer is not None else SessionState.IDLE

    @property
    def buffer(self) -> PixelBuffer | None:
        with self._lock:
            return self._buffer

    @property
    def name(self) -> str:
        with self._lock:
            return self._name

    def set_name(self, name: str) -> None:
        with self._lock:
            self._name = name

    def capture(self, buffer: PixelBuffer) -> None:
        with self._lock:
            self._buffer = buffer
        self._logger.info("Captured %dx%d image", buffer.width, buffer.height)

    def ingest(self, data: bytes) -> bool:
        """Decode and capture an image; returns False (state unchanged) for non-images."""
        try:
            buffer = decode_image(data)
        except UnsupportedImageError as exc:
            self._logger.warning("Ignoring unsupported image content: %s", exc)
            return False
        self.capture(buffer)
        return True

    async def ingest_async(self, data: bytes) -> bool:
        try:
            buffer = await decode_image_async(data)
        except UnsupportedImageError as exc:
            self._logger.warning("Ignoring unsupported image content: %s", exc)
            return False
        self.capture(buffer)
        return True

    def clear(self) -> None:
        with self._lock:
            self._buffer = None

    def _snapshot(self, name: str | None) -> tuple[PixelBuffer, str] | None:
        with self._lock:
            buffer = self._buffer
            if name is not None:
                self._name = name
            chosen = self._name
        if buffer is None:
            self._logger.debug("Export requested with no image captured")
            return None
        if self._name_store is not None:
            self._name_store.save(chosen)
        return buffer, chosen

    def export_binary(self, name: str | None = None) -> ExportArtifact | None:
        snapshot = self._snapshot(name)
        if snapshot is None:
            return None
        buffer, chosen = snapshot
        return render_binary(convert_to_rgb565(buffer), chosen)

    def export_source(self, name: str | None = None) -> ExportArtifact | None:
        snapshot = self._snapshot(name)
        if snapshot is None:
            return None
        buffer, chosen = snapshot
        return render_source(convert_to_rgb565(buffer), chosen)

    def deliver(self, artifact: ExportArtifact | None, sink: Sink) -> bool:
        """Hand an artifact to a sink. SinkError propagates to the caller."""
        if artifact is None:
            return False
        sink.deliver(artifact)
        return True
