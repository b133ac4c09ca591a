"""
Password Hasher - bcrypt hashing of user credentials

Module: security.authentication.password_hasher
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - bcrypt hash with configurable work factor
  - Fail-closed verification

SECURITY NOTES:
- Work factor comes from server configuration, never from a request
- verify() returns False for malformed hashes instead of raising, so a
  caller cannot tell "bad hash" from "wrong password"
- bcrypt only looks at the first 72 bytes; longer passwords are rejected
  by recent bcrypt releases and surface as PasswordHashError
"""

import logging

import bcrypt

from ...core.constants import DEFAULT_BCRYPT_ROUNDS, MIN_BCRYPT_ROUNDS, MAX_BCRYPT_ROUNDS


class PasswordHashError(Exception):
    """Password could not be hashed"""
    pass


class PasswordHasher:
    """One-way bcrypt hashing and verification"""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        """
        Initialize password hasher

        Args:
            rounds: bcrypt cost factor (10-12 recommended)

        Raises:
            ValueError: If rounds is outside bcrypt's range
        """
        if not isinstance(rounds, int) or not MIN_BCRYPT_ROUNDS <= rounds <= MAX_BCRYPT_ROUNDS:
            raise ValueError(
                f"bcrypt rounds must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}"
            )

        self.logger = logging.getLogger("security.password_hasher")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash password using bcrypt

        Args:
            password: Plaintext password

        Returns:
            bcrypt hash (bytes decoded to string)

        Raises:
            PasswordHashError: If hashing fails
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        except (ValueError, TypeError, AttributeError) as e:
            self.logger.error(f"Password hashing failed: {type(e).__name__}")
            raise PasswordHashError("Password hashing failed") from e
        return hashed.decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify password against hash

        Args:
            password: Plaintext password
            password_hash: bcrypt hash

        Returns:
            True if password matches, False otherwise (including errors)
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
        except Exception as e:
            self.logger.debug(f"Password verification error: {type(e).__name__}")
            return False


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestPasswordHasher(unittest.TestCase):
        """Test suite for PasswordHasher"""

        def setUp(self):
            self.hasher = PasswordHasher(rounds=4)

        def test_hash_and_verify(self):
            hashed = self.hasher.hash("secret123")
            self.assertTrue(self.hasher.verify("secret123", hashed))
            self.assertFalse(self.hasher.verify("wrong", hashed))

        def test_malformed_hash_is_not_a_match(self):
            self.assertFalse(self.hasher.verify("secret123", "not-a-bcrypt-hash"))

        def test_invalid_rounds_rejected(self):
            with self.assertRaises(ValueError):
                PasswordHasher(rounds=2)

    unittest.main()
