"""Configuration helpers for image-to-code."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from .name_store import DEFAULT_STATE_PATH
from .utils import parse_bool, parse_int, strip_or_none

DEFAULT_BIND_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 8565
DEFAULT_MAX_UPLOAD_BYTES = 32 * 1024 * 1024
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ServerConfig:
    bind_address: str
    port: int
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig
    output_dir: Path
    state_path: Path
    persist_name: bool
    clipboard_command: list[str] | None
    log_level: str

    @staticmethod
    def from_env(env: dict[str, str] | None = None) -> AppConfig:
        source = env if env is not None else os.environ

        port = parse_int(source.get("IMAGE_TO_CODE_PORT"), DEFAULT_PORT)
        if not 0 <= port <= 65535:
            port = DEFAULT_PORT
        max_upload = parse_int(source.get("IMAGE_TO_CODE_MAX_UPLOAD_BYTES"), DEFAULT_MAX_UPLOAD_BYTES)
        server = ServerConfig(
            bind_address=strip_or_none(source.get("IMAGE_TO_CODE_BIND")) or DEFAULT_BIND_ADDRESS,
            port=port,
            max_upload_bytes=max_upload if max_upload > 0 else DEFAULT_MAX_UPLOAD_BYTES,
        )

        state_file = strip_or_none(source.get("IMAGE_TO_CODE_STATE_FILE"))
        clipboard_raw = strip_or_none(source.get("IMAGE_TO_CODE_CLIPBOARD_CMD"))

        log_level = (strip_or_none(source.get("IMAGE_TO_CODE_LOG_LEVEL")) or "INFO").upper()
        if log_level not in LOG_LEVELS:
            log_level = "INFO"

        return AppConfig(
            server=server,
            output_dir=Path(strip_or_none(source.get("IMAGE_TO_CODE_OUTPUT_DIR")) or ".").expanduser(),
            state_path=Path(state_file).expanduser() if state_file else DEFAULT_STATE_PATH,
            persist_name=parse_bool(source.get("IMAGE_TO_CODE_PERSIST_NAME"), default=True),
            clipboard_command=shlex.split(clipboard_raw) if clipboard_raw else None,
            log_level=log_level,
        )
