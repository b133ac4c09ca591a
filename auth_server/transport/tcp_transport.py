"""
TCP Socket Transport for the Auth Server RPC interface

Module: transport.tcp_transport
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] TCP Transport Implementation
  - TCPTransport class for network socket connections
  - Multiple concurrent TCP clients
  - JSON-RPC over TCP with length-prefix framing
  - One task per request, replies written to the calling connection

ARCHITECTURE:
TCPTransport accepts remote clients on a fixed local address.
- One TCPClientConnection per client
- Length-prefixed JSON messages (4-byte big-endian length + JSON data)
- Every request is dispatched as its own asyncio task, so a slow call
  (bcrypt, database) does not hold up the next request on the connection
- Writes on a connection are serialized with a per-connection lock

SECURITY NOTES:
- No TLS, bind to a local address only
- Oversized frames close the connection
- Bearer tokens travel in the request's "metadata" member
"""

import asyncio
import json
import logging
import uuid
from typing import Optional, Dict, Any, Set, Tuple
from dataclasses import dataclass

from .base_transport import BaseTransport, TransportMessage, TransportError
from ..core.constants import (
    DEFAULT_TCP_HOST,
    DEFAULT_TCP_PORT,
    TCP_BACKLOG,
    MAX_MESSAGE_SIZE,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    PARSE_ERROR,
    INVALID_REQUEST,
    ERROR_MESSAGES,
)


@dataclass
class TCPConfig:
    """TCP Transport Configuration"""
    host: str = DEFAULT_TCP_HOST
    port: int = DEFAULT_TCP_PORT
    backlog: int = TCP_BACKLOG
    read_timeout: float = DEFAULT_READ_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    max_message_size: int = MAX_MESSAGE_SIZE


class TCPClientConnection:
    """Represents a single TCP client connection"""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        connection_id: str,
        config: TCPConfig
    ):
        """Initialize TCP client connection"""
        self.reader = reader
        self.writer = writer
        self.connection_id = connection_id
        self.config = config
        self.connected = True
        self.logger = logging.getLogger(f"transport.tcp.{connection_id[:8]}")
        self.peername = writer.get_extra_info('peername')
        self._write_lock = asyncio.Lock()
        self.logger.info(f"Connection from {self.peername}")

    @property
    def peer(self) -> Optional[str]:
        if not self.peername:
            return None
        return f"{self.peername[0]}:{self.peername[1]}"

    async def send(self, data: bytes) -> None:
        """Send data to TCP client with length prefix"""
        if not self.connected:
            return

        async with self._write_lock:
            try:
                length = len(data).to_bytes(4, byteorder='big')
                self.writer.write(length + data)
                await asyncio.wait_for(
                    self.writer.drain(),
                    timeout=self.config.write_timeout
                )
                self.logger.debug(f"Sent {len(data)} bytes")
            except asyncio.TimeoutError:
                self.logger.error("Write timeout")
                self.connected = False
            except (ConnectionError, OSError) as e:
                self.logger.error(f"Send error: {e}")
                self.connected = False

    async def send_json(self, payload: Dict[str, Any]) -> None:
        await self.send(json.dumps(payload).encode('utf-8'))

    async def receive(self) -> Optional[bytes]:
        """Receive data from TCP client with length prefix"""
        if not self.connected:
            return None

        try:
            length_bytes = await asyncio.wait_for(
                self.reader.readexactly(4),
                timeout=self.config.read_timeout
            )
            length = int.from_bytes(length_bytes, byteorder='big')

            if length > self.config.max_message_size:
                self.logger.error(f"Message too large: {length} bytes")
                self.connected = False
                return None

            data = await asyncio.wait_for(
                self.reader.readexactly(length),
                timeout=self.config.read_timeout
            )
            self.logger.debug(f"Received {len(data)} bytes")
            return data

        except asyncio.IncompleteReadError:
            self.logger.info("Client disconnected")
            self.connected = False
            return None
        except asyncio.TimeoutError:
            self.logger.warning("Read timeout")
            self.connected = False
            return None
        except (ConnectionError, OSError) as e:
            self.logger.error(f"Receive error: {e}")
            self.connected = False
            return None

    async def close(self) -> None:
        """Close TCP connection"""
        self.connected = False
        try:
            self.writer.close()
            await self.writer.wait_closed()
            self.logger.info("Connection closed")
        except (ConnectionError, OSError) as e:
            self.logger.debug(f"Close error: {e}")


class TCPTransport(BaseTransport):
    """
    TCP Socket Transport

    Serves JSON-RPC 2.0 over length-prefixed TCP and replies to each
    request on the connection it came from.
    """

    def __init__(self, config: Optional[TCPConfig] = None):
        """
        Initialize TCP Transport

        Args:
            config: TCPConfig instance (uses defaults if None)
        """
        super().__init__(name="tcp")
        self.config = config or TCPConfig()
        self.server: Optional[asyncio.AbstractServer] = None
        self.clients: Dict[str, TCPClientConnection] = {}
        self._tasks: Set[asyncio.Task] = set()

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Bound (host, port), useful when listening on port 0"""
        if not self.server or not self.server.sockets:
            return None
        sockname = self.server.sockets[0].getsockname()
        return sockname[0], sockname[1]

    async def start(self) -> None:
        """Bind the TCP server and start accepting connections"""
        if self.is_running:
            return

        try:
            self.server = await asyncio.start_server(
                self._handle_client,
                self.config.host,
                self.config.port,
                backlog=self.config.backlog
            )
        except OSError as e:
            self.logger.error(f"Server startup failed: {e}")
            raise

        self.is_running = True
        self.logger.info(f"TCP server listening on {self.address}")

    async def serve_forever(self) -> None:
        """Serve connections until stopped or cancelled"""
        if not self.server:
            raise RuntimeError("Transport not started")
        await self.server.serve_forever()

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter
    ) -> None:
        """Handle individual TCP client connection"""
        connection_id = str(uuid.uuid4())
        connection = TCPClientConnection(reader, writer, connection_id, self.config)
        self.clients[connection_id] = connection

        try:
            while connection.connected:
                data = await connection.receive()
                if data is None:
                    break
                await self._on_frame(connection, data)
        finally:
            await connection.close()
            self.clients.pop(connection_id, None)
            self.logger.info(f"Client disconnected: {connection_id}")

    async def _on_frame(self, connection: TCPClientConnection, data: bytes) -> None:
        """Decode one frame and schedule its handling"""
        try:
            payload = json.loads(data.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self.logger.warning(f"JSON parse error: {e}")
            error = TransportError(code=PARSE_ERROR, message=ERROR_MESSAGES[PARSE_ERROR])
            await connection.send_json(error.to_jsonrpc_error())
            return

        try:
            message = TransportMessage.from_jsonrpc(payload)
        except ValueError as e:
            self.logger.warning(f"Invalid request: {e}")
            request_id = payload.get("id") if isinstance(payload, dict) else None
            error = TransportError(
                code=INVALID_REQUEST,
                message=ERROR_MESSAGES[INVALID_REQUEST],
                request_id=request_id,
            )
            await connection.send_json(error.to_jsonrpc_error())
            return

        message.connection_id = connection.connection_id
        message.peer = connection.peer

        task = asyncio.create_task(self._serve_request(connection, message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _serve_request(
        self,
        connection: TCPClientConnection,
        message: TransportMessage
    ) -> None:
        """Run the handler for one request and write its reply"""
        reply = await self._dispatch_message(message)
        if reply is None or message.is_notification:
            return

        if isinstance(reply, TransportError):
            await connection.send_json(reply.to_jsonrpc_error())
        else:
            await connection.send_json(reply.to_jsonrpc())

    async def stop(self) -> None:
        """Stop TCP server and close all connections"""
        if self.server:
            self.server.close()

        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        for connection in list(self.clients.values()):
            await connection.close()
        self.clients.clear()

        if self.server:
            await self.server.wait_closed()
            self.server = None

        self.is_running = False
        self.logger.info("TCP transport stopped")

    def get_client_count(self) -> int:
        """Get number of connected TCP clients"""
        return len(self.clients)
