"""
Constants for Auth Server

Module: core.constants
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial constants definition
  - RPC method names (Auth, Greeting services)
  - Listening endpoint
  - JSON-RPC and service error codes
  - Security defaults (bcrypt work factor, token lifetime)
  - Connection pool defaults

SECURITY NOTES:
- Work factor and token lifetime are configuration constants, never
  taken from a request
- Message sizes limited on the transport
"""

from typing import Final

# ============================================================================
# Server Identity
# ============================================================================

SERVER_NAME: Final[str] = "AuthServer"
SERVER_VERSION: Final[str] = "0.1.0"

# Supported JSON-RPC version
JSONRPC_VERSION: Final[str] = "2.0"

# ============================================================================
# Listening Endpoint
# ============================================================================

DEFAULT_TCP_HOST: Final[str] = "::1"
DEFAULT_TCP_PORT: Final[int] = 50051
TCP_BACKLOG: Final[int] = 128

# Default limits
MAX_MESSAGE_SIZE: Final[int] = 1024 * 1024  # 1 MB
DEFAULT_READ_TIMEOUT: Final[float] = 300.0
DEFAULT_WRITE_TIMEOUT: Final[float] = 10.0

# ============================================================================
# RPC Method Names
# ============================================================================

METHOD_LOGIN: Final[str] = "auth.Auth/Login"
METHOD_REGISTER: Final[str] = "auth.Auth/Register"
METHOD_GREET: Final[str] = "greeting.Greeting/Greet"

# Call metadata key carrying the bearer token
AUTHORIZATION_METADATA_KEY: Final[str] = "x-authorization"

# ============================================================================
# Error Codes (JSON-RPC Standard)
# ============================================================================

PARSE_ERROR: Final[int] = -32700
INVALID_REQUEST: Final[int] = -32600
METHOD_NOT_FOUND: Final[int] = -32601
INVALID_PARAMS: Final[int] = -32602
INTERNAL_ERROR: Final[int] = -32603

# Service error codes (server error range, -32000 minus the status number)
UNKNOWN_ERROR: Final[int] = -32002
ALREADY_EXISTS_ERROR: Final[int] = -32006
SERVICE_INTERNAL_ERROR: Final[int] = -32013
UNAUTHENTICATED_ERROR: Final[int] = -32016

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
}

# ============================================================================
# Security Defaults
# ============================================================================

DEFAULT_BCRYPT_ROUNDS: Final[int] = 10
MIN_BCRYPT_ROUNDS: Final[int] = 4
MAX_BCRYPT_ROUNDS: Final[int] = 31

TOKEN_ALGORITHM: Final[str] = "HS256"
DEFAULT_TOKEN_TTL_SECONDS: Final[int] = 3600

# ============================================================================
# Persistence Defaults
# ============================================================================

DEFAULT_DB_POOL_SIZE: Final[int] = 5
DEFAULT_DB_MAX_OVERFLOW: Final[int] = 0
DEFAULT_DB_POOL_TIMEOUT: Final[float] = 30.0

# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
