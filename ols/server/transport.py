"""JSON-RPC over Content-Length framed streams (stdio or TCP)."""

import json
import re
import socket
import socketserver
import sys
import threading
from typing import BinaryIO

from pydantic import ValidationError

from ols.server.handler import RequestHandler
from ols.server.language_server import LanguageServer
from olscommon.lsp.exceptions import LspInvalidParams
from olscommon.lsp.exceptions import LspMethodNotFound
from olscommon.lsp.exceptions import LspProtocolError
from olscommon.lsp.logger import LSP_LOGGER
from olscommon.lsp.lsp_types import ErrorCodes
from olscommon.lsp.lsp_types import IncomingMessage
from olscommon.lsp.lsp_types import ResponseError
from olscommon.lsp.lsp_types import ResponseMessage

log = LSP_LOGGER.getChild(__name__)

HEADER_LINE = re.compile(rb"\A([A-Za-z0-9-]+): (.*)\r\n\Z")


def read_header(stream: BinaryIO) -> int | None:
    """Read an LSP message header and return the Content-Length, or None at end of stream."""

    content_length: int | None = None
    first = True

    while True:
        line = stream.readline()
        if not line:
            if first:
                # EOF
                return None
            raise LspProtocolError("Stream ended inside a message header")
        first = False

        # Very common case: End of headers.
        if line == b"\r\n":
            break

        # General case.
        m = HEADER_LINE.match(line)
        if not m:
            raise LspProtocolError(f"Invalid header line received: {line!r}")
        raw_name, raw_value = m.group(1, 2)
        try:
            name, value = raw_name.decode("ascii"), raw_value.decode("ascii")
        except UnicodeDecodeError as exc:
            raise LspProtocolError("Malformed LSP header name or value") from exc

        if name.lower() == "content-length":
            if content_length is not None:
                raise LspProtocolError("Duplicate Content-Length header")
            try:
                content_length = int(value)
            except ValueError as exc:
                raise LspProtocolError(f"Invalid Content-Length: {value!r}") from exc
        # Content-Type is the only other header and it is always utf-8 JSON.

    if content_length is None:
        raise LspProtocolError("LSP message missing Content-Length header")
    return content_length


def read_message(stream: BinaryIO) -> bytes | None:
    """Read one framed message body, or None at end of stream."""
    content_length = read_header(stream)
    if content_length is None:
        return None
    body = stream.read(content_length)
    if len(body) < content_length:
        raise LspProtocolError(f"Stream ended after {len(body)} of {content_length} body bytes")
    return body


def write_message(stream: BinaryIO, body: str) -> None:
    """Frame and write one message body."""
    data = body.encode("utf-8")
    stream.write(f"Content-Length: {len(data)}\r\n\r\n".encode("ascii") + data)
    stream.flush()


def error_response(msg_id: int | str | None, code: ErrorCodes, message: str) -> ResponseMessage:
    return ResponseMessage(id=msg_id, error=ResponseError(code=code.value, message=message))


class Connection:
    """
    One client session: reads messages from instream, answers requests on outstream.

    Messages are handled one after the other, so document changes from one client apply in the order they were sent.
    Several connections may share one LanguageServer.
    """

    def __init__(self, server: LanguageServer, instream: BinaryIO, outstream: BinaryIO) -> None:
        self.handler = RequestHandler(server)
        self.instream = instream
        self.outstream = outstream
        self.write_lock = threading.Lock()

    def serve(self) -> None:
        """Handle messages until the client sends exit or closes the stream."""
        while not self.handler.exit_requested:
            body = read_message(self.instream)
            if body is None:
                log.info("Client closed the stream")
                break
            response = self.process(body)
            if response is not None:
                self.send(response)

    def process(self, body: bytes) -> ResponseMessage | None:
        """Decode and handle one message body. Returns the response to send, if any."""
        try:
            raw = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log.warning(f"Unparseable message: {exc}")
            return error_response(None, ErrorCodes.ParseError, f"Parse error: {exc}")

        try:
            message = IncomingMessage.model_validate(raw)
        except ValidationError as exc:
            log.warning(f"Invalid message: {exc}")
            msg_id = raw.get("id") if isinstance(raw, dict) else None
            if not isinstance(msg_id, (int, str)):
                msg_id = None
            return error_response(msg_id, ErrorCodes.InvalidRequest, f"Invalid request: {exc}")

        try:
            result = self.handler.handle(message)
        except LspMethodNotFound as exc:
            log.debug(str(exc))
            return error_response(message.id, ErrorCodes.MethodNotFound, str(exc))
        except LspInvalidParams as exc:
            log.warning(str(exc))
            if not message.is_request:
                return None
            return error_response(message.id, ErrorCodes.InvalidParams, str(exc))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log.exception(f"Error while handling {message.method}")
            if not message.is_request:
                return None
            return error_response(message.id, ErrorCodes.InternalError, f"Internal error: {exc}")

        if not message.is_request:
            return None
        return ResponseMessage(id=message.id, result=result)

    def send(self, response: ResponseMessage) -> None:
        with self.write_lock:
            write_message(self.outstream, response.to_json())


def serve_stdio(server: LanguageServer) -> None:
    """Speak the protocol on stdin/stdout."""
    log.info("Serving on stdio")
    try:
        Connection(server, sys.stdin.buffer, sys.stdout.buffer).serve()
    except LspProtocolError as exc:
        log.error(f"Giving up on the client: {exc}")


class _TcpClientHandler(socketserver.StreamRequestHandler):
    language_server: LanguageServer

    def handle(self) -> None:
        log.info(f"Client connected from {self.client_address}")
        try:
            Connection(self.language_server, self.rfile, self.wfile).serve()
        except LspProtocolError as exc:
            log.warning(f"Dropping client {self.client_address}: {exc}")
        except (ConnectionError, socket.timeout) as exc:
            log.info(f"Client {self.client_address} disconnected: {exc}")
        log.info(f"Client {self.client_address} done")


class _ThreadingTcpServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


def serve_tcp(server: LanguageServer, port: int, host: str = "127.0.0.1") -> None:
    """Accept clients on a TCP port, one thread per connection, all sharing the same documents."""
    handler = type("TcpClientHandler", (_TcpClientHandler,), {"language_server": server})
    with _ThreadingTcpServer((host, port), handler) as tcp_server:
        log.info(f"Listening on {host}:{tcp_server.server_address[1]}")
        tcp_server.serve_forever()
