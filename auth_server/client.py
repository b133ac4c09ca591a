"""
Auth Client - asyncio client for the Auth Server RPC interface

Module: client
Date: 2026-10-19
Version: 0.1.0

Speaks the server's framing (4-byte big-endian length + JSON-RPC 2.0).
One request is in flight at a time per client.

Usage:
    async with AuthClient("::1", 50051) as client:
        token = await client.register("Ada", "Lovelace", "ada@example.com", "secret")
        reply = await client.greet("hi", token)   # "hi Pong!"
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from .core.constants import (
    AUTHORIZATION_METADATA_KEY,
    DEFAULT_TCP_HOST,
    DEFAULT_TCP_PORT,
    JSONRPC_VERSION,
    METHOD_GREET,
    METHOD_LOGIN,
    METHOD_REGISTER,
)

logger = logging.getLogger("auth_client")


class RPCError(Exception):
    """Error response from the server"""

    def __init__(self, code: int, message: str, status: Optional[str] = None):
        super().__init__(f"{status or code}: {message}")
        self.code = code
        self.message = message
        self.status = status


class AuthClient:
    """TCP client for the Auth and Greeting services"""

    def __init__(self, host: str = DEFAULT_TCP_HOST, port: int = DEFAULT_TCP_PORT):
        self.host = host
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.request_id = 0
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Connect to TCP server"""
        self.reader, self.writer = await asyncio.open_connection(self.host, self.port)
        logger.info(f"Connected to {self.host}:{self.port}")

    async def close(self) -> None:
        """Close connection"""
        if self.writer:
            self.writer.close()
            await self.writer.wait_closed()
            self.writer = None
            self.reader = None

    async def __aenter__(self) -> "AuthClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def call(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and wait for its response

        Returns:
            The "result" member of the response

        Raises:
            RPCError: If the server answers with an error
            ConnectionError: If the connection is closed
        """
        if self.writer is None or self.reader is None:
            raise ConnectionError("Client not connected")

        async with self._lock:
            self.request_id += 1
            request: Dict[str, Any] = {
                "jsonrpc": JSONRPC_VERSION,
                "method": method,
                "params": params or {},
                "id": self.request_id,
            }
            if metadata:
                request["metadata"] = metadata

            data = json.dumps(request).encode("utf-8")
            self.writer.write(len(data).to_bytes(4, byteorder="big") + data)
            await self.writer.drain()

            try:
                length_bytes = await self.reader.readexactly(4)
                length = int.from_bytes(length_bytes, byteorder="big")
                response = json.loads((await self.reader.readexactly(length)).decode("utf-8"))
            except asyncio.IncompleteReadError as e:
                raise ConnectionError("Connection closed by server") from e

        if "error" in response:
            error = response["error"]
            data = error.get("data") or {}
            raise RPCError(error.get("code"), error.get("message", ""), data.get("status"))

        return response.get("result")

    async def login(self, email: str, password: str) -> str:
        result = await self.call(METHOD_LOGIN, {"email": email, "password": password})
        return result["access_token"]

    async def register(self, firstname: str, lastname: str, email: str, password: str) -> str:
        result = await self.call(
            METHOD_REGISTER,
            {
                "firstname": firstname,
                "lastname": lastname,
                "email": email,
                "password": password,
            },
        )
        return result["access_token"]

    async def greet(self, message: str, access_token: Optional[str] = None) -> str:
        metadata = {AUTHORIZATION_METADATA_KEY: access_token} if access_token is not None else None
        result = await self.call(METHOD_GREET, {"message": message}, metadata)
        return result["message"]
