"""
Transports carrying newline-delimited JSON-RPC.

StdioTransport runs one session over the process's stdin/stdout.
TcpTransport accepts any number of connections and runs one session per
connection on its own daemon thread.
"""

import sys
import logging
import threading
import socketserver
from typing import BinaryIO, Callable, Optional, Tuple

from .session import McpSession

logger = logging.getLogger("StudentRecords.mcp.transports")

SessionFactory = Callable[[str], McpSession]


class StdioTransport:
    """
    Single long-lived session bound to binary stdin/stdout.

    Only protocol responses are ever written to stdout. A read failure
    propagates to the caller, which ends the process.
    """

    def __init__(
        self,
        session: McpSession,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
    ):
        self.session = session
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.transport_closed = threading.Event()

    def serve(self) -> None:
        logger.info("Serving MCP over stdio")
        while not self.transport_closed.is_set():
            raw = self.stdin.readline()
            if not raw:
                logger.info("stdin closed; stopping stdio transport")
                break
            line = raw.strip()
            if not line:
                continue
            response = self.session.handle_line(line)
            if response is not None:
                self.send(response)

    def send(self, response: str) -> None:
        if self.transport_closed.is_set():
            return
        try:
            self.stdout.write(response.encode("utf-8") + b"\n")
            self.stdout.flush()
        except (BrokenPipeError, OSError) as exc:
            self.transport_closed.set()
            logger.warning("MCP stdio transport closed while sending: %s", exc)


class _ConnectionHandler(socketserver.StreamRequestHandler):
    """Runs one session for the lifetime of one TCP connection."""

    server: "_ThreadingServer"

    def handle(self) -> None:
        host, port = self.client_address[:2]
        peer = f"{host}:{port}"
        session = self.server.session_factory(peer)
        logger.info("New connection from %s", peer)
        try:
            for raw in self.rfile:
                line = raw.strip()
                if not line:
                    continue
                response = session.handle_line(line)
                if response is None:
                    continue
                self.wfile.write(response.encode("utf-8") + b"\n")
                self.wfile.flush()
        except OSError as exc:
            logger.warning("Error on connection %s: %s", peer, exc)
        finally:
            logger.info("Connection closed: %s", peer)


class _ThreadingServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True
    block_on_close = False

    def __init__(self, address: Tuple[str, int], session_factory: SessionFactory):
        self.session_factory = session_factory
        super().__init__(address, _ConnectionHandler)

    def handle_error(self, request, client_address) -> None:
        logger.exception("Unhandled error on connection %s", client_address)


class TcpTransport:
    """Threaded TCP listener; binds on construction."""

    def __init__(self, session_factory: SessionFactory, host: str = "0.0.0.0", port: int = 8080):
        self._server = _ThreadingServer((host, port), session_factory)

    @property
    def server_address(self) -> Tuple[str, int]:
        host, port = self._server.server_address[:2]
        return host, port

    def serve_forever(self, poll_interval: float = 0.5) -> None:
        host, port = self.server_address
        logger.info("MCP server listening on %s:%d", host, port)
        self._server.serve_forever(poll_interval=poll_interval)

    def shutdown(self) -> None:
        self._server.shutdown()
        self._server.server_close()
        logger.info("MCP server stopped")
