"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

from image_to_code.config import DEFAULT_MAX_UPLOAD_BYTES, DEFAULT_PORT, AppConfig
from image_to_code.name_store import DEFAULT_STATE_PATH


def test_defaults():
    config = AppConfig.from_env({})
    assert config.server.bind_address == "127.0.0.1"
    assert config.server.port == DEFAULT_PORT
    assert config.server.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert config.output_dir == Path(".")
    assert config.state_path == DEFAULT_STATE_PATH
    assert config.persist_name is True
    assert config.clipboard_command is None
    assert config.log_level == "INFO"


def test_overrides():
    config = AppConfig.from_env(
        {
            "IMAGE_TO_CODE_BIND": "0.0.0.0",
            "IMAGE_TO_CODE_PORT": "9000",
            "IMAGE_TO_CODE_OUTPUT_DIR": "/tmp/out",
            "IMAGE_TO_CODE_STATE_FILE": "/tmp/state.conf",
            "IMAGE_TO_CODE_PERSIST_NAME": "off",
            "IMAGE_TO_CODE_CLIPBOARD_CMD": "xclip -selection clipboard",
            "IMAGE_TO_CODE_MAX_UPLOAD_BYTES": "1024",
            "IMAGE_TO_CODE_LOG_LEVEL": "debug",
        }
    )
    assert config.server.bind_address == "0.0.0.0"
    assert config.server.port == 9000
    assert config.server.max_upload_bytes == 1024
    assert config.output_dir == Path("/tmp/out")
    assert config.state_path == Path("/tmp/state.conf")
    assert config.persist_name is False
    assert config.clipboard_command == ["xclip", "-selection", "clipboard"]
    assert config.log_level == "DEBUG"


def test_invalid_values_fall_back():
    config = AppConfig.from_env(
        {
            "IMAGE_TO_CODE_PORT": "http",
            "IMAGE_TO_CODE_MAX_UPLOAD_BYTES": "-5",
            "IMAGE_TO_CODE_LOG_LEVEL": "loud",
            "IMAGE_TO_CODE_BIND": "   ",
        }
    )
    assert config.server.port == DEFAULT_PORT
    assert config.server.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert config.log_level == "INFO"
    assert config.server.bind_address == "127.0.0.1"


def test_out_of_range_port():
    assert AppConfig.from_env({"IMAGE_TO_CODE_PORT": "70000"}).server.port == DEFAULT_PORT
