"""Local HTTP server for the paste-and-export page."""

from __future__ import annotations

import json
import logging
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, quote, urlsplit

from .config import ServerConfig
from .export import ExportArtifact
from .page import BINARY_ENDPOINT, IMAGE_ENDPOINT, SOURCE_ENDPOINT, render_page_html
from .session import ConverterSession

LOGGER = logging.getLogger(__name__)

STATE_ENDPOINT = "/state"


def _content_disposition(filename: str) -> str:
    # Header values go out as Latin-1; non-ASCII names travel in filename* (RFC 5987)
    fallback = "".join(ch if " " <= ch <= "~" and ch not in '"\\' else "_" for ch in filename)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class ConverterHttpServer:
    """Serve the converter page and its export endpoints over HTTP."""

    def __init__(
        self,
        *,
        session: ConverterSession,
        config: ServerConfig,
        logger: logging.Logger | None = None,
    ) -> None:
        self.session = session
        self.config = config
        self.logger = logger or LOGGER
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def server_address(self) -> tuple[str, int]:
        if not self._server:
            return self.config.bind_address, self.config.port
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    @property
    def url(self) -> str:
        host, port = self.server_address
        return f"http://{host}:{port}/"

    def start(self) -> None:
        if self._server:
            return
        handler_cls = self._build_handler()
        try:
            server = ThreadingHTTPServer((self.config.bind_address, self.config.port), handler_cls)
        except OSError as exc:  # pragma: no cover - dependant on environment
            self.logger.error("http: failed to bind %s:%s (%s)", self.config.bind_address, self.config.port, exc)
            raise
        server.daemon_threads = True
        self._server = server
        thread = threading.Thread(target=server.serve_forever, name="image-to-code-http", daemon=True)
        thread.start()
        self._thread = thread
        self.logger.info("http: serving on %s", self.url)

    def stop(self) -> None:
        server = self._server
        if not server:
            return
        self.logger.info("http: shutting down")
        server.shutdown()
        server.server_close()
        if self._thread:
            self._thread.join(timeout=2)
        self._server = None
        self._thread = None

    def serve_forever(self) -> None:
        """Start and block until interrupted."""
        self.start()
        try:
            if self._thread:
                self._thread.join()
        finally:
            self.stop()

    def _build_handler(self):
        outer = self

        class ConverterRequestHandler(BaseHTTPRequestHandler):
            def log_message(self, format, *args):  # noqa: A002
                outer.logger.debug("http: %s - %s", self.address_string(), format % args)

            def _set_common_headers(self) -> None:
                self.send_header("Cache-Control", "no-store, max-age=0")

            def do_GET(self) -> None:  # noqa: N802
                parts = urlsplit(self.path)
                query = parse_qs(parts.query, keep_blank_values=True)
                name = query["name"][0] if "name" in query else None
                if parts.path in {"/", "/index.html"}:
                    self._serve_page()
                elif parts.path == BINARY_ENDPOINT:
                    self._send_artifact(outer.session.export_binary(name), attachment=True)
                elif parts.path == SOURCE_ENDPOINT:
                    self._send_artifact(outer.session.export_source(name), attachment=False)
                elif parts.path == STATE_ENDPOINT:
                    self._serve_state()
                else:
                    self.send_error(HTTPStatus.NOT_FOUND, "Not Found")

            def do_POST(self) -> None:  # noqa: N802
                path = urlsplit(self.path).path
                if path == IMAGE_ENDPOINT:
                    self._handle_image()
                else:
                    self.send_error(HTTPStatus.NOT_FOUND, "Not Found")

            def _handle_image(self) -> None:
                try:
                    content_length = int(self.headers.get("Content-Length", 0))
                except ValueError:
                    self.send_error(HTTPStatus.BAD_REQUEST, "Invalid Content-Length")
                    return
                if content_length <= 0:
                    self.send_error(HTTPStatus.BAD_REQUEST, "Empty body")
                    return
                if content_length > outer.config.max_upload_bytes:
                    self._discard_body(content_length)
                    self.send_error(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "Image too large")
                    return
                body = self.rfile.read(content_length)
                if not outer.session.ingest(body):
                    self.send_error(HTTPStatus.UNSUPPORTED_MEDIA_TYPE, "Not an image")
                    return
                self.send_response(HTTPStatus.NO_CONTENT)
                self._set_common_headers()
                self.end_headers()

            def _discard_body(self, remaining: int) -> None:
                # Drain the request so the client sees the response, not a reset.
                while remaining > 0:
                    chunk = self.rfile.read(min(remaining, 64 * 1024))
                    if not chunk:
                        break
                    remaining -= len(chunk)

            def _send_artifact(self, artifact: ExportArtifact | None, *, attachment: bool) -> None:
                if artifact is None:
                    self.send_response(HTTPStatus.NO_CONTENT)
                    self._set_common_headers()
                    self.end_headers()
                    return
                content_type = artifact.media_type
                if artifact.is_text:
                    content_type += "; charset=utf-8"
                self.send_response(HTTPStatus.OK)
                self._set_common_headers()
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(artifact)))
                if attachment:
                    self.send_header("Content-Disposition", _content_disposition(artifact.filename))
                self.end_headers()
                self.wfile.write(artifact.payload)

            def _serve_page(self) -> None:
                body = render_page_html(name=outer.session.name, state=outer.session.state).encode("utf-8")
                self._send_body(body, "text/html; charset=utf-8")

            def _serve_state(self) -> None:
                buffer = outer.session.buffer
                payload = {
                    "state": outer.session.state.value,
                    "width": buffer.width if buffer else 0,
                    "height": buffer.height if buffer else 0,
                    "name": outer.session.name,
                }
                self._send_body(json.dumps(payload).encode("utf-8"), "application/json")

            def _send_body(self, body: bytes, content_type: str) -> None:
                self.send_response(HTTPStatus.OK)
                self._set_common_headers()
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

        return ConverterRequestHandler
