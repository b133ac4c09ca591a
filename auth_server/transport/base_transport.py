"""
Base Transport Class - Abstract interface for RPC transports

Module: transport.base_transport
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - TransportMessage with call metadata
  - TransportResponse / TransportError (JSON-RPC 2.0)
  - Abstract BaseTransport with request/response dispatch

ARCHITECTURE:
BaseTransport is the abstract base class for transport implementations.
A transport decodes incoming JSON-RPC requests into TransportMessage
objects, hands them to the registered message handler and writes the
handler's reply back to the connection the request came from.

SECURITY NOTES:
- Message validation beyond the envelope is delegated to the protocol layer
- Call metadata is passed through untouched, tokens are checked by services
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Callable, Awaitable, Union
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..core.constants import ERROR_MESSAGES, INTERNAL_ERROR, JSONRPC_VERSION


# ============================================================================
# Types and Data Classes
# ============================================================================

@dataclass
class TransportMessage:
    """
    Represents a request received by a Transport instance

    Attributes:
        method: JSON-RPC method name
        params: JSON-RPC parameters
        request_id: JSON-RPC request ID (None for notifications)
        metadata: Call metadata key/value pairs (e.g. x-authorization)
        connection_id: Transport connection the request arrived on
        peer: Remote address, if known
        timestamp: When message was received
    """
    method: str
    params: Optional[Dict[str, Any]] = None
    request_id: Optional[Union[str, int]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    connection_id: Optional[str] = None
    peer: Optional[str] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        """Initialize timestamp if not provided"""
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    @property
    def is_notification(self) -> bool:
        return self.request_id is None

    def to_jsonrpc(self) -> Dict[str, Any]:
        """
        Convert to JSON-RPC 2.0 request format

        Returns:
            dict: JSON-RPC 2.0 compatible dictionary
        """
        msg: Dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "method": self.method,
        }

        if self.params is not None:
            msg["params"] = self.params

        if self.metadata:
            msg["metadata"] = self.metadata

        if self.request_id is not None:
            msg["id"] = self.request_id

        return msg

    @staticmethod
    def from_jsonrpc(data: Dict[str, Any]) -> "TransportMessage":
        """
        Parse JSON-RPC 2.0 request

        Args:
            data: JSON-RPC dictionary

        Returns:
            TransportMessage: Parsed message

        Raises:
            ValueError: If message format is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Message must be a dictionary")

        method = data.get("method")
        if not method or not isinstance(method, str):
            raise ValueError("Missing 'method' field")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError("'metadata' must be an object")

        return TransportMessage(
            method=method,
            params=data.get("params"),
            request_id=data.get("id"),
            metadata=metadata,
        )


@dataclass
class TransportResponse:
    """Successful JSON-RPC response"""
    result: Any
    request_id: Optional[Union[str, int]] = None

    def to_jsonrpc(self) -> Dict[str, Any]:
        return {
            "jsonrpc": JSONRPC_VERSION,
            "result": self.result,
            "id": self.request_id,
        }


@dataclass
class TransportError:
    """
    Represents an error response

    Attributes:
        code: Error code
        message: Error message
        data: Additional error data
        request_id: ID of request that caused error (if applicable)
    """
    code: int
    message: str
    data: Optional[Dict[str, Any]] = None
    request_id: Optional[Union[str, int]] = None

    def to_jsonrpc_error(self) -> Dict[str, Any]:
        """
        Convert to JSON-RPC 2.0 error format

        Returns:
            dict: JSON-RPC error response
        """
        response: Dict[str, Any] = {
            "jsonrpc": JSONRPC_VERSION,
            "error": {
                "code": self.code,
                "message": self.message,
            },
            "id": self.request_id,
        }

        if self.data is not None:
            response["error"]["data"] = self.data

        return response


Reply = Union[TransportResponse, TransportError]
MessageHandler = Callable[[TransportMessage], Awaitable[Optional[Reply]]]


# ============================================================================
# Abstract Base Transport Class
# ============================================================================

class BaseTransport(ABC):
    """
    Abstract base class for all transport implementations

    The transport layer is responsible for:
    1. Physical message transmission/reception
    2. Connection management
    3. Encoding/decoding (JSON-RPC)

    Not responsible for:
    1. Authentication (service layer)
    2. Method routing (protocol layer)
    """

    def __init__(self, name: str):
        """
        Initialize transport

        Args:
            name: Name of this transport instance
        """
        self.name = name
        self.is_running = False
        self.logger = logging.getLogger(f"transport.{name}")

        self._message_handler: Optional[MessageHandler] = None

    @abstractmethod
    async def start(self) -> None:
        """
        Bind and start accepting connections

        Raises:
            OSError: If the address cannot be bound
        """

    @abstractmethod
    async def serve_forever(self) -> None:
        """Serve until stopped or cancelled"""

    @abstractmethod
    async def stop(self) -> None:
        """Close all connections and release the listening socket"""

    def set_message_handler(self, handler: MessageHandler) -> None:
        """
        Register message handler

        Handler is called for each received request and returns the reply
        to send back (None for notifications).

        Args:
            handler: Async callable(TransportMessage) -> reply
        """
        self._message_handler = handler
        self.logger.info("Message handler registered")

    async def _dispatch_message(self, message: TransportMessage) -> Optional[Reply]:
        """
        Dispatch received message to handler

        Args:
            message: Received message

        Returns:
            Reply to send, or None
        """
        if self._message_handler is None:
            self.logger.warning(f"No handler for {message.method}, dropping message")
            return None

        try:
            return await self._message_handler(message)
        except Exception as e:
            self.logger.error(f"Error in message handler: {e}", exc_info=True)
            return TransportError(
                code=INTERNAL_ERROR,
                message=ERROR_MESSAGES[INTERNAL_ERROR],
                request_id=message.request_id,
            )
