"""
Auth Server

Credential-issuing authentication service over JSON-RPC/TCP, with a
token-gated greeting endpoint.

CHANGELOG:
[2026-10-19 v0.1.0] Initial release
  - Login / Register issuing HS256 bearer tokens
  - Greet gated on the x-authorization metadata token
  - Pooled SQL user store

ARCHITECTURE:
- Layer 1 : Transport (length-prefixed JSON-RPC over TCP)
- Layer 2 : Protocol (dispatcher, request/response shapes)
- Layer 3 : Services & Security (AuthService, GreetingService,
            PasswordHasher, TokenCodec)
- Layer 4 : Persistence (UserStore, SQLUserStore)

SECURITY NOTES:
- bcrypt password hashes, fail-closed verification
- Identical error for unknown email and wrong password
- Tokens expire; verification is stateless
"""

__version__ = "0.1.0"

from .core.auth_server import AuthServer
from .core.config import ServerConfig, ConfigurationError
from .client import AuthClient, RPCError

__all__ = [
    "AuthServer",
    "ServerConfig",
    "ConfigurationError",
    "AuthClient",
    "RPCError",
]
