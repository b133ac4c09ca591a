"""
Token Codec - Signed bearer tokens

Module: security.authentication.token_codec
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Claims builder (sub, iat, exp as strings)
  - HS256 signing with an injected shared secret
  - Boolean, fail-closed verification with expiry check

ARCHITECTURE:
TokenCodec provides:
  - Stateless authentication with compact JWTs
  - HS256 (HMAC-SHA256) signature over the serialized claims
  - One instance shared by the issuing and verifying paths, so both
    always use the same key and algorithm

Token format: base64url(header) "." base64url(claims) "." base64url(signature)
Claims are serialized in sorted key order. All claim values are strings:
  sub - user id
  iat - issue time, Unix seconds
  exp - absolute expiry, Unix seconds (iat + token ttl)

SECURITY NOTES:
- The secret is read-only after construction and safe to share between
  concurrent calls
- verify() never raises; every failure is reported as False
- Expiry is enforced by the codec itself because claim values are strings
"""

import logging
import time
from typing import Dict, Mapping, Optional, Union

import jwt

from ...core.constants import DEFAULT_TOKEN_TTL_SECONDS, TOKEN_ALGORITHM

REQUIRED_CLAIMS = ("sub", "iat", "exp")


class TokenIssueError(Exception):
    """Token could not be issued"""
    pass


class TokenCodec:
    """
    Issues and verifies signed bearer tokens

    Tokens are stateless: validity depends only on the signature and the
    expiry claim at verification time.
    """

    def __init__(
        self,
        secret_key: Union[str, bytes],
        algorithm: str = TOKEN_ALGORITHM,
        token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    ):
        """
        Initialize token codec

        Args:
            secret_key: Shared signing secret (APP_KEY)
            algorithm: HMAC algorithm (default HS256)
            token_ttl_seconds: Token lifetime in seconds

        Raises:
            ValueError: If secret_key is empty or ttl is not positive
        """
        if not secret_key:
            raise ValueError("Secret key must not be empty")
        if token_ttl_seconds <= 0:
            raise ValueError("Token ttl must be positive")

        self.logger = logging.getLogger("security.token_codec")
        self._secret_key = secret_key.encode("utf-8") if isinstance(secret_key, str) else bytes(secret_key)
        self.algorithm = algorithm
        self.token_ttl_seconds = token_ttl_seconds

        self.logger.info(f"Token codec initialized (algo={algorithm}, ttl={token_ttl_seconds}s)")

    def build_claims(self, user_id: int, now: Optional[int] = None) -> Dict[str, str]:
        """
        Build the claims for a user's token

        Args:
            user_id: User identifier
            now: Issue time in Unix seconds (defaults to current time)

        Returns:
            Claims mapping with string values
        """
        issued_at = int(time.time()) if now is None else int(now)
        return {
            "sub": str(user_id),
            "iat": str(issued_at),
            "exp": str(issued_at + self.token_ttl_seconds),
        }

    def issue(self, claims: Mapping[str, str]) -> str:
        """
        Sign claims into a token

        Args:
            claims: Claims mapping

        Returns:
            Token string

        Raises:
            TokenIssueError: If claims cannot be serialized or signed
        """
        try:
            payload = {key: claims[key] for key in sorted(claims)}
            return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)
        except (TypeError, ValueError, NotImplementedError, jwt.PyJWTError) as e:
            self.logger.error(f"Token signing failed: {type(e).__name__}")
            raise TokenIssueError("Cannot sign token") from e

    def decode(self, token: str) -> Optional[Dict[str, str]]:
        """
        Verify token and return its claims

        Args:
            token: Token string

        Returns:
            Claims if the token is valid, None otherwise
        """
        if not token or not isinstance(token, str):
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except jwt.InvalidTokenError as e:
            self.logger.debug(f"Token rejected: {type(e).__name__}")
            return None
        except Exception as e:
            self.logger.warning(f"Token verification error: {type(e).__name__}")
            return None

        if not isinstance(payload, dict):
            return None

        for claim in REQUIRED_CLAIMS:
            if not isinstance(payload.get(claim), str):
                self.logger.debug(f"Token rejected: missing claim {claim}")
                return None

        try:
            expires_at = int(payload["exp"])
        except ValueError:
            self.logger.debug("Token rejected: malformed exp")
            return None

        if expires_at <= int(time.time()):
            self.logger.debug("Token rejected: expired")
            return None

        return payload

    def verify(self, token: str) -> bool:
        """
        Check token signature and expiry

        Args:
            token: Token string

        Returns:
            True if the token is valid, False otherwise
        """
        return self.decode(token) is not None


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestTokenCodec(unittest.TestCase):
        """Test suite for TokenCodec"""

        def setUp(self):
            self.codec = TokenCodec("test-secret-key-at-least-32-characters-long!!!!")

        def test_issue_and_verify(self):
            token = self.codec.issue(self.codec.build_claims(42))
            self.assertTrue(self.codec.verify(token))

        def test_other_key_rejected(self):
            other = TokenCodec("another-secret-key-at-least-32-characters!!")
            token = other.issue(other.build_claims(42))
            self.assertFalse(self.codec.verify(token))

        def test_garbage_rejected(self):
            self.assertFalse(self.codec.verify("not.a.token"))

    unittest.main()
