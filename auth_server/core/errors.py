"""
Service Errors - Error kinds crossing the RPC boundary

Module: core.errors
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - ErrorKind enumeration
  - ServiceError raised by service handlers
  - Single mapping from ErrorKind to JSON-RPC error

ARCHITECTURE:
Services never let store, hashing or signing errors escape. They raise
ServiceError with one of the coarse kinds below, and the dispatcher turns
it into a JSON-RPC error with to_rpc_error(). The mapping table is checked
at import time so that every ErrorKind has a code.

SECURITY NOTES:
- Messages are fixed per call site and carry no internal detail
- The same message is reused across different root causes on purpose
"""

from enum import Enum
from typing import Dict, Optional

from .constants import (
    ALREADY_EXISTS_ERROR,
    INVALID_PARAMS,
    SERVICE_INTERNAL_ERROR,
    UNAUTHENTICATED_ERROR,
    UNKNOWN_ERROR,
)
from ..transport.base_transport import TransportError


class ErrorKind(Enum):
    """Error kinds exposed to RPC callers"""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


ERROR_CODES: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: INVALID_PARAMS,
    ErrorKind.UNAUTHENTICATED: UNAUTHENTICATED_ERROR,
    ErrorKind.ALREADY_EXISTS: ALREADY_EXISTS_ERROR,
    ErrorKind.INTERNAL: SERVICE_INTERNAL_ERROR,
    ErrorKind.UNKNOWN: UNKNOWN_ERROR,
}

_unmapped = set(ErrorKind) - set(ERROR_CODES)
if _unmapped:
    raise RuntimeError(f"ErrorKind without RPC code: {sorted(k.name for k in _unmapped)}")


class ServiceError(Exception):
    """Error raised by a service handler, safe to show to the caller"""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def invalid_argument(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INVALID_ARGUMENT, message)

    @classmethod
    def unauthenticated(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.UNAUTHENTICATED, message)

    @classmethod
    def already_exists(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.ALREADY_EXISTS, message)

    @classmethod
    def internal(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INTERNAL, message)

    @classmethod
    def unknown(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.UNKNOWN, message)

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.name}, {self.message!r})"


def to_rpc_error(error: ServiceError, request_id: Optional[str] = None) -> TransportError:
    """
    Convert a ServiceError to a JSON-RPC error response

    Args:
        error: Service error raised by a handler
        request_id: ID of the request being answered

    Returns:
        TransportError with the kind's code and the status name in data
    """
    return TransportError(
        code=ERROR_CODES[error.kind],
        message=error.message,
        data={"status": error.kind.value},
        request_id=request_id,
    )


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestServiceErrors(unittest.TestCase):
        """Test suite for ErrorKind mapping"""

        def test_every_kind_mapped(self):
            self.assertEqual(set(ERROR_CODES), set(ErrorKind))

        def test_to_rpc_error(self):
            error = to_rpc_error(ServiceError.already_exists("exists"), request_id=3)
            self.assertEqual(error.code, ALREADY_EXISTS_ERROR)
            self.assertEqual(error.data, {"status": "ALREADY_EXISTS"})
            self.assertEqual(error.request_id, 3)

    unittest.main()
