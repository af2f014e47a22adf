"""Tests for the image-to-code command line."""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest

from image_to_code import cli
from image_to_code.errors import SinkError
from image_to_code.export import format_source
from image_to_code.name_store import NAME_KEY, read_value
from image_to_code.pixels import decode_image
from image_to_code.rgb565 import convert_to_rgb565


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.setenv("IMAGE_TO_CODE_STATE_FILE", str(tmp_path / "state.conf"))
    monkeypatch.delenv("IMAGE_TO_CODE_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("IMAGE_TO_CODE_PERSIST_NAME", raising=False)
    return tmp_path


@pytest.fixture
def image_file(env, png_bytes):
    path = env / "splash.png"
    path.write_bytes(png_bytes)
    return path


def test_convert_binary(env, image_file, png_bytes):
    out_dir = env / "out"
    assert cli.main(["convert", str(image_file), "--name", "logo", "--output", str(out_dir)]) == 0
    assert (out_dir / "logo.bin").read_bytes() == convert_to_rgb565(decode_image(png_bytes))


def test_convert_source(env, image_file, png_bytes):
    rc = cli.main(["convert", str(image_file), "--name", "logo", "--format", "source", "--output", str(env)])
    assert rc == 0
    expected = format_source("logo", convert_to_rgb565(decode_image(png_bytes)))
    assert (env / "logo.h").read_text(encoding="utf-8") == expected


def test_convert_defaults_to_file_stem(env, image_file):
    assert cli.main(["convert", str(image_file), "--output", str(env)]) == 0
    assert (env / "splash.bin").exists()


def test_convert_remembers_name(env, image_file):
    cli.main(["convert", str(image_file), "--name", "remembered", "--output", str(env)])
    state = (env / "state.conf").read_text(encoding="utf-8")
    assert read_value(state, NAME_KEY) == "remembered"

    # Next run without --name picks up the stored name.
    cli.main(["convert", str(image_file), "--output", str(env)])
    assert (env / "remembered.bin").exists()


def test_convert_without_persistence(env, image_file, monkeypatch):
    monkeypatch.setenv("IMAGE_TO_CODE_PERSIST_NAME", "false")
    cli.main(["convert", str(image_file), "--name", "temp", "--output", str(env)])
    assert not (env / "state.conf").exists()


def test_convert_to_stdout(env, image_file, png_bytes):
    stdout = io.TextIOWrapper(io.BytesIO())
    with patch.object(cli.sys, "stdout", stdout):
        assert cli.main(["convert", str(image_file), "--name", "x", "--output", "-"]) == 0
        stdout.flush()
        assert stdout.buffer.getvalue() == convert_to_rgb565(decode_image(png_bytes))


def test_convert_unsupported_input(env):
    bad = env / "notes.txt"
    bad.write_text("hello", encoding="utf-8")
    assert cli.main(["convert", str(bad), "--output", str(env)]) == 1


def test_convert_clipboard_failure(env, image_file):
    with patch("image_to_code.sinks.ClipboardSink.deliver", side_effect=SinkError("no clipboard")):
        assert cli.main(["convert", str(image_file), "--format", "source", "--clipboard"]) == 1


def test_serve_uses_arguments(env):
    with patch("image_to_code.cli.ConverterHttpServer") as server_cls:
        server_cls.return_value.serve_forever.side_effect = KeyboardInterrupt
        assert cli.main(["serve", "--bind", "0.0.0.0", "--port", "9999"]) == 0
    config = server_cls.call_args.kwargs["config"]
    assert (config.bind_address, config.port) == ("0.0.0.0", 9999)


def test_command_required(env):
    with pytest.raises(SystemExit):
        cli.main([])
