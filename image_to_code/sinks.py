"""Artifact delivery targets.

A sink takes a finished :class:`~image_to_code.export.ExportArtifact` and
hands it to the outside world. Failures surface as :class:`SinkError` and are
fatal to that single delivery; nothing is retried.
"""

from __future__ import annotations

import logging
import shutil
import subprocess  # nosec B404 - clipboard delivery relies on CLI helpers
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO, Protocol

from .errors import SinkError
from .export import ExportArtifact

LOGGER = logging.getLogger(__name__)

# Probed in order; the first one on PATH wins.
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("pbcopy",),
)


class Sink(Protocol):
    def deliver(self, artifact: ExportArtifact) -> None: ...


class DirectorySink:
    """Write artifacts into a directory under their suggested filename."""

    def __init__(self, directory: Path | str, *, logger: logging.Logger | None = None) -> None:
        self.directory = Path(directory)
        self._logger = logger or LOGGER

    def path_for(self, artifact: ExportArtifact) -> Path:
        return self.directory / artifact.filename

    def deliver(self, artifact: ExportArtifact) -> None:
        target = self.path_for(artifact)
        if not target.resolve().is_relative_to(self.directory.resolve()):
            raise SinkError(f"Refusing to write '{artifact.filename}' outside '{self.directory}'")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(artifact.payload)
        except OSError as exc:
            raise SinkError(f"Cannot write '{target}': {exc}") from exc
        self._logger.info("Wrote %s (%d bytes)", target, len(artifact))


class StreamSink:
    """Write the artifact payload to an already-open binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def deliver(self, artifact: ExportArtifact) -> None:
        try:
            self.stream.write(artifact.payload)
            self.stream.flush()
        except (OSError, ValueError) as exc:
            raise SinkError(f"Cannot write {artifact.filename} to stream: {exc}") from exc


def find_clipboard_command() -> list[str] | None:
    for candidate in CLIPBOARD_COMMANDS:
        if shutil.which(candidate[0]):
            return list(candidate)
    return None


class ClipboardSink:
    """Pipe artifacts into the system clipboard helper.

    The helper process is started and fed, but not waited on: clipboard
    hand-off is fire-and-forget.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._command = list(command) if command else None
        self._logger = logger or LOGGER

    def deliver(self, artifact: ExportArtifact) -> None:
        command = self._command or find_clipboard_command()
        if not command:
            raise SinkError("No clipboard helper found (tried wl-copy, xclip, xsel, pbcopy)")
        try:
            process = subprocess.Popen(  # nosec B603 - command array from config or fixed list
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise SinkError(f"Cannot start clipboard helper {command[0]!r}: {exc}") from exc
        if process.stdin is None:
            raise SinkError(f"Clipboard helper {command[0]!r} has no stdin pipe")
        try:
            process.stdin.write(artifact.payload)
            process.stdin.close()
        except OSError as exc:
            raise SinkError(f"Clipboard helper {command[0]!r} rejected the data: {exc}") from exc
        self._logger.info("Copied %s to clipboard via %s", artifact.filename, command[0])
