"""Command-line entry point: ``image-to-code convert`` and ``image-to-code serve``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import AppConfig, ServerConfig
from .errors import SinkError, UnsupportedImageError
from .name_store import NameStore
from .pixels import load_image
from .server import ConverterHttpServer
from .session import ConverterSession
from .sinks import ClipboardSink, DirectorySink, Sink, StreamSink

LOGGER = logging.getLogger("image-to-code")


def build_parser(config: AppConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-to-code",
        description="Convert images to RGB565 firmware data.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=config.log_level)
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert one image file")
    convert.add_argument("input", type=Path, help="Image file (PNG, JPEG, BMP, ...)")
    convert.add_argument("--name", help="Export name (default: last used name, then the file stem)")
    convert.add_argument("--format", choices=("bin", "source"), default="bin")
    convert.add_argument(
        "--output",
        default=str(config.output_dir),
        help="Output directory, or '-' for stdout (default: %(default)s)",
    )
    convert.add_argument("--clipboard", action="store_true", help="Copy the artifact to the clipboard instead")

    serve = subparsers.add_parser("serve", help="Serve the paste-and-export page")
    serve.add_argument("--bind", default=config.server.bind_address)
    serve.add_argument("--port", type=int, default=config.server.port)
    return parser


def _make_session(config: AppConfig) -> tuple[ConverterSession, NameStore | None]:
    store = NameStore(state_path=config.state_path) if config.persist_name else None
    return ConverterSession(name_store=store), store


def _select_sink(args: argparse.Namespace, config: AppConfig) -> Sink:
    if args.clipboard:
        return ClipboardSink(config.clipboard_command)
    if args.output == "-":
        return StreamSink(sys.stdout.buffer)
    return DirectorySink(Path(args.output))


def run_convert(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        buffer = load_image(args.input)
    except UnsupportedImageError as exc:
        LOGGER.error("%s", exc)
        return 1

    session, store = _make_session(config)
    session.capture(buffer)
    name = args.name or session.name or args.input.stem
    if args.format == "bin":
        artifact = session.export_binary(name)
    else:
        artifact = session.export_source(name)

    try:
        session.deliver(artifact, _select_sink(args, config))
    except SinkError as exc:
        LOGGER.error("Export failed: %s", exc)
        return 1
    finally:
        if store is not None:
            store.stop()
    return 0


def run_serve(args: argparse.Namespace, config: AppConfig) -> int:
    session, store = _make_session(config)
    server_config = ServerConfig(
        bind_address=args.bind,
        port=args.port,
        max_upload_bytes=config.server.max_upload_bytes,
    )
    server = ConverterHttpServer(session=session, config=server_config)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        if store is not None:
            store.stop()
    return 0


def main(argv: list[str] | None = None) -> int:
    config = AppConfig.from_env()
    args = build_parser(config).parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "convert":
        return run_convert(args, config)
    return run_serve(args, config)


if __name__ == "__main__":
    sys.exit(main())
