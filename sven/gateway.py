"""HTTP gateway that relays desk commands to the bus and serves mirrored state."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from .config import GatewayConfig, Topics
from .models import DecodeError, DeskCommand
from .state import DeskStateStore

CommandPublisher = Callable[[DeskCommand], object]

MAX_BODY_BYTES = 4096


class CommandGateway:
    """Serve ``/api/<base>/command``, ``/api/<base>/state`` and ``/api/<base>/status``.

    Commands are published immediately and never queued here; whether the desk
    moved is only visible through a later state read.
    """

    def __init__(
        self,
        *,
        store: DeskStateStore,
        publish: CommandPublisher,
        topics: Topics,
        config: GatewayConfig,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.topics = topics
        self.config = config
        self._publish = publish
        self._logger = logger or logging.getLogger(__name__)
        self.command_path = f"/api/{topics.command}"
        self.state_path = f"/api/{topics.state}"
        self.status_path = f"/api/{topics.status}"
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def server_address(self) -> tuple[str, int] | None:
        server = self._server
        if not server:
            return None
        host, port = server.server_address[:2]
        return str(host), int(port)

    def start(self) -> None:
        if self._server:
            return
        handler_cls = self._build_handler()
        try:
            server = ThreadingHTTPServer((self.config.bind_address, self.config.port), handler_cls)
        except OSError as exc:  # pragma: no cover - dependant on environment
            self._logger.error(
                "[gateway] Failed to bind %s:%s (%s)", self.config.bind_address, self.config.port, exc
            )
            raise
        server.daemon_threads = True
        self._server = server
        thread = threading.Thread(target=server.serve_forever, name="sven-gateway-http", daemon=True)
        thread.start()
        self._thread = thread
        host, port = self.server_address or (self.config.bind_address, self.config.port)
        origins = ", ".join(self.config.allowed_origins)
        self._logger.info("[gateway] Serving on http://%s:%s/api (allowed origins: %s)", host, port, origins)

    def stop(self) -> None:
        server = self._server
        if not server:
            return
        self._logger.info("[gateway] Shutting down")
        server.shutdown()
        server.server_close()
        if self._thread:
            self._thread.join(timeout=2)
        self._server = None
        self._thread = None

    def submit_command(self, command: DeskCommand) -> None:
        self._logger.info("[gateway] Received command %s with value %s", command.command.label, command.value)
        self._publish(command)

    def _build_handler(self):
        outer = self

        class GatewayRequestHandler(BaseHTTPRequestHandler):
            def log_message(self, _format, *_args):  # noqa: D401
                return

            def _set_common_headers(self) -> None:
                origin = self.headers.get("Origin")
                allowed_origin = outer._allowed_origin(origin)
                if allowed_origin:
                    self.send_header("Access-Control-Allow-Origin", allowed_origin)
                    if allowed_origin != "*":
                        self.send_header("Vary", "Origin")
                self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
                self.send_header("Access-Control-Allow-Headers", "*")
                self.send_header("Cache-Control", "no-store, max-age=0")

            def _send_json(self, status: HTTPStatus, payload: Any) -> None:
                body = json.dumps(payload).encode("utf-8")
                self.send_response(status)
                self._set_common_headers()
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def do_OPTIONS(self) -> None:  # noqa: N802
                self.send_response(HTTPStatus.NO_CONTENT)
                self._set_common_headers()
                self.end_headers()

            def do_GET(self) -> None:  # noqa: N802
                path = self.path.split("?", 1)[0]
                if path == outer.state_path:
                    self._send_json(HTTPStatus.OK, outer.store.read_state().to_dict())
                elif path == outer.status_path:
                    status = outer.store.read_status()
                    outer._logger.debug("[gateway] Returning desk status: %s", status)
                    self._send_json(HTTPStatus.OK, status)
                else:
                    self._send_json(HTTPStatus.NOT_FOUND, {"error": "Not Found"})

            def do_POST(self) -> None:  # noqa: N802
                path = self.path.split("?", 1)[0]
                if path != outer.command_path:
                    self._send_json(HTTPStatus.NOT_FOUND, {"error": "Not Found"})
                    return
                try:
                    command = DeskCommand.from_json(self._read_body())
                except DecodeError as exc:
                    outer._logger.warning("[gateway] Rejected command: %s", exc)
                    self._send_json(HTTPStatus.BAD_REQUEST, {"error": str(exc)})
                    return
                outer.submit_command(command)
                self._send_json(HTTPStatus.OK, {"status": "Command sent successfully"})

            def _read_body(self) -> bytes:
                try:
                    content_length = int(self.headers.get("Content-Length", 0))
                except ValueError as exc:
                    raise DecodeError("Invalid Content-Length") from exc
                if content_length <= 0:
                    raise DecodeError("Empty body")
                if content_length > MAX_BODY_BYTES:
                    raise DecodeError("Body too large")
                return self.rfile.read(content_length)

        return GatewayRequestHandler

    def _allowed_origin(self, origin: str | None) -> str | None:
        allowed = self.config.allowed_origins
        if not allowed or allowed == ("*",):
            return "*"
        if origin and origin in allowed:
            return origin
        return None
