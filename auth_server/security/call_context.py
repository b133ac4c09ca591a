"""
Call Context - What a handler knows about the call it is serving

Module: security.call_context
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Per-call context built from the transport message
  - Read-only call metadata
  - Connection and peer info for logging

ARCHITECTURE:
CallContext is created fresh for every request by the dispatcher. There is
no session: a handler that needs an identity must check the bearer token
in the metadata on every call.

SECURITY NOTES:
- Metadata is immutable after creation
- Metadata values are untrusted client input
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from ..transport.base_transport import TransportMessage


@dataclass(frozen=True)
class CallContext:
    """
    Context of a single RPC call

    Attributes:
        method: RPC method being called
        request_id: JSON-RPC request ID
        metadata: Call metadata (read-only)
        connection_id: Transport connection identifier
        peer: Remote address
        received_at: When the request was received
    """
    method: str
    request_id: Optional[Union[str, int]] = None
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    connection_id: Optional[str] = None
    peer: Optional[str] = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_message(cls, message: TransportMessage) -> "CallContext":
        return cls(
            method=message.method,
            request_id=message.request_id,
            metadata=MappingProxyType(dict(message.metadata or {})),
            connection_id=message.connection_id,
            peer=message.peer,
            received_at=message.timestamp or datetime.now(timezone.utc),
        )

    def get_metadata(self, key: str) -> Any:
        """Metadata value for key, or None"""
        return self.metadata.get(key)

    def get_info(self) -> Dict[str, Any]:
        """Call information for logging (metadata values omitted)"""
        return {
            "method": self.method,
            "request_id": self.request_id,
            "connection_id": self.connection_id,
            "peer": self.peer,
            "metadata_keys": sorted(self.metadata.keys()),
            "received_at": self.received_at.isoformat(),
        }

    def __repr__(self) -> str:
        conn = self.connection_id[:8] if self.connection_id else None
        return f"CallContext(method={self.method}, id={self.request_id}, conn={conn})"
