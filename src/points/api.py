"""JSON HTTP API over a PointsService.

Routes:
    POST /points/add      add a transaction
    POST /points/spend    spend points oldest-first
    GET  /points/balance  balance per payer
"""

import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from pydantic import ValidationError

from .config import PointsConfig
from .errors import PointsError
from .models.transactions import (
    SpendRequest,
    SpendResponseItem,
    TransactionRequest,
    TransactionResponse,
)
from .service import PointsService

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Request body could not be parsed or validated."""


class PointsHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, server_address, service: PointsService):
        self.service = service
        super().__init__(server_address, PointsAPIHandler)


class PointsAPIHandler(BaseHTTPRequestHandler):
    server: PointsHTTPServer

    def do_GET(self):
        if self.path.rstrip("/") == "/points/balance":
            self._send_json(200, self.server.service.get_balances())
        else:
            self._send_json(404, {"message": f"Cannot GET {self.path}"})

    def do_POST(self):
        route = self.path.rstrip("/")
        try:
            if route not in ("/points/add", "/points/spend"):
                # Drain the body so the client is not reset mid-send
                self.rfile.read(self._content_length())
                self._send_json(404, {"message": f"Cannot POST {self.path}"})
                return

            body = self._read_json()
            if route == "/points/add":
                request = TransactionRequest.model_validate(body)
                event = self.server.service.add_transaction(
                    request.payer, request.points, request.timestamp
                )
                self._send_json(200, TransactionResponse.from_event(event).model_dump(mode="json"))
            else:
                request = SpendRequest.model_validate(body)
                entries = self.server.service.spend_points(request.points)
                self._send_json(
                    200,
                    [SpendResponseItem.from_entry(e).model_dump(mode="json") for e in entries],
                )
        except BadRequest as e:
            self._send_json(400, {"message": str(e)})
        except ValidationError as e:
            self._send_json(400, {"message": _validation_message(e)})
        except PointsError as e:
            logger.info(f"Rejected {route}: {e}")
            self._send_json(400, {"message": str(e)})

    def _content_length(self) -> int:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError as e:
            raise BadRequest("Invalid Content-Length") from e
        if length < 0:
            raise BadRequest("Invalid Content-Length")
        return length

    def _read_json(self) -> Any:
        length = self._content_length()
        raw = self.rfile.read(length) if length else b""
        if not raw:
            raise BadRequest("Request body is required")
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BadRequest(f"Malformed JSON body: {e}") from e

    def _send_json(self, status: int, payload: Any) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")


def _validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "body"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


def create_server(service: PointsService, host: str = "127.0.0.1", port: int = 3000) -> PointsHTTPServer:
    """Bind a threaded HTTP server for the service; port 0 picks a free port."""
    return PointsHTTPServer((host, port), service)


def serve(config: PointsConfig, service: PointsService) -> None:
    """Serve until interrupted."""
    server = create_server(service, config.host, config.port)
    host, port = server.server_address[:2]
    logger.info(f"Points API running on http://{host}:{port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
