"""
Authentication module - password hashing and bearer tokens

Provides:
- PasswordHasher: bcrypt password hashing
- TokenCodec: HS256 token issuance and verification
- require_token: bearer-token pre-check for protected calls
"""

from .password_hasher import PasswordHasher, PasswordHashError
from .token_codec import TokenCodec, TokenIssueError
from .token_gate import require_token

__all__ = [
    "PasswordHasher",
    "PasswordHashError",
    "TokenCodec",
    "TokenIssueError",
    "require_token",
]
