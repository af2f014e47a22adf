"""Remember the last export name between runs.

The name lives in a small shell-style state file (``IMAGE_TO_CODE_NAME="logo"``).
Saves are debounced so typing in the page or repeated exports do not hammer
the disk, and the file is rewritten in place so other lines survive.
"""

from __future__ import annotations

import fcntl
import logging
import re
import threading
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path.home() / ".config" / "image-to-code" / "state.conf"

NAME_KEY = "IMAGE_TO_CODE_NAME"

# Debounce delay in seconds - wait this long after last change before writing
DEBOUNCE_DELAY_SECONDS = 1.0

LOCK_FILE_SUFFIX = ".lock"

# KEY="value" or KEY=value
_ASSIGNMENT_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")


def _strip_quotes(value: str) -> str:
    """Remove matching single or double quotes from a value."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def _quote_value(value: str) -> str:
    """Wrap a value in double quotes, escaping as needed."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def read_value(content: str, key: str) -> str | None:
    """Return the last assignment of ``key`` in ``content``, if any."""
    found: str | None = None
    for line in content.splitlines():
        match = _ASSIGNMENT_RE.match(line.strip())
        if match and match.group(1) == key:
            raw = match.group(2).strip()
            found = _unescape(_strip_quotes(raw)) if raw.startswith('"') else _strip_quotes(raw)
    return found


def apply_value(content: str, key: str, value: str) -> str:
    """Replace ``key`` assignments in ``content``, appending one if absent."""
    lines = content.splitlines(keepends=True)
    new_line = f"{key}={_quote_value(value)}"
    result: list[str] = []
    replaced = False

    for line in lines:
        match = _ASSIGNMENT_RE.match(line.rstrip("\n\r"))
        if match and match.group(1) == key:
            if replaced:
                continue
            result.append(new_line + ("\n" if line.endswith("\n") else ""))
            replaced = True
            continue
        result.append(line)

    if not replaced:
        if result and not result[-1].endswith("\n"):
            result[-1] += "\n"
        result.append(new_line + "\n")
    return "".join(result)


class NameStore:
    """Loads and debounces writes of the last-used export name."""

    def __init__(
        self,
        state_path: Path | None = None,
        debounce_seconds: float = DEBOUNCE_DELAY_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._state_path = state_path or DEFAULT_STATE_PATH
        self._debounce_seconds = debounce_seconds
        self._logger = logger or LOGGER
        self._pending: str | None = None
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._state_path

    def load(self) -> str:
        """Return the stored name, or an empty string when nothing is stored."""
        with self._lock:
            if self._pending is not None:
                return self._pending
        try:
            content = self._state_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            self._logger.warning("Failed to read name state '%s': %s", self._state_path, exc)
            return ""
        return read_value(content, NAME_KEY) or ""

    def save(self, name: str) -> None:
        """Queue a name update. The write will be debounced."""
        with self._lock:
            self._pending = name
            self._schedule_write()

    def _schedule_write(self) -> None:
        """Must be called with self._lock held."""
        if self._timer is not None:
            self._timer.cancel()
        self._timer = threading.Timer(self._debounce_seconds, self._flush)
        self._timer.daemon = True
        self._timer.start()

    def _flush(self) -> None:
        with self._lock:
            name = self._pending
            self._pending = None
            self._timer = None
        if name is None:
            return
        try:
            self._write(name)
        except Exception as exc:
            self._logger.error("Failed to persist export name: %s", exc)

    def _write(self, name: str) -> None:
        with self._write_lock:
            self._write_locked(name)

    def _write_locked(self, name: str) -> None:
        """Must be called with _write_lock held."""
        try:
            self._state_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._logger.error("Cannot create state directory '%s': %s", self._state_path.parent, exc)
            return

        lock_path = Path(str(self._state_path) + LOCK_FILE_SUFFIX)
        lock_fd = None
        try:
            # Cross-process lock; the page server and the CLI may both write
            try:
                lock_fd = open(lock_path, "w")
                fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX)
            except OSError as exc:
                self._logger.warning("Could not acquire state lock: %s", exc)

            try:
                content = self._state_path.read_text(encoding="utf-8")
            except FileNotFoundError:
                content = ""
            except OSError as exc:
                self._logger.error("Failed to read name state: %s", exc)
                return

            try:
                self._state_path.write_text(apply_value(content, NAME_KEY, name), encoding="utf-8")
                self._logger.debug("Persisted %s=%r to '%s'", NAME_KEY, name, self._state_path)
            except OSError as exc:
                self._logger.error("Failed to write name state: %s", exc)
        finally:
            if lock_fd is not None:
                try:
                    fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
                    lock_fd.close()
                except OSError:
                    pass

    def flush_sync(self) -> None:
        """Immediately write any pending name (blocking)."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            name = self._pending
            self._pending = None
        if name is None:
            return
        try:
            self._write(name)
        except Exception as exc:
            self._logger.error("Failed to persist export name: %s", exc)

    def stop(self) -> None:
        self.flush_sync()
