"""
Unit Tests - Auth Service

Module: tests.test_auth_service
Date: 2026-10-19
Version: 0.1.0

DESCRIPTION:
Tests for AuthService login and registration:
- Tokens issued on success verify with the shared codec
- Unknown email and wrong password are indistinguishable
- Store, hashing and signing failures map to fixed error kinds
"""

import asyncio
import logging
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from auth_server.core.errors import ErrorKind, ServiceError
from auth_server.persistence import SQLUserStore, User, UserStore, UserStoreError
from auth_server.security.authentication import (
    PasswordHasher,
    PasswordHashError,
    TokenCodec,
    TokenIssueError,
)
from auth_server.services.auth_service import (
    INVALID_CREDENTIALS_MESSAGE,
    TOKEN_GENERATION_MESSAGE,
    USER_CREATION_MESSAGE,
    USER_EXISTS_MESSAGE,
    AuthService,
)

logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s - %(levelname)s - %(message)s"
)

SECRET_KEY = "test-secret-key-at-least-32-characters-long!!!!"


class TestAuthServiceWithDatabase(unittest.TestCase):
    """Test login / register against a real SQLite store"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.store = SQLUserStore.from_url(f"sqlite:///{os.path.join(self.test_dir, 'users.db')}")
        self.store.create_schema()
        self.codec = TokenCodec(SECRET_KEY)
        self.service = AuthService(self.store, PasswordHasher(rounds=4), self.codec)

    def tearDown(self):
        self.store.close()
        shutil.rmtree(self.test_dir)

    def test_register_issues_valid_token(self):
        """Test that a registration token carries the new user's id"""
        async def test():
            token = await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            user = self.store.find_by_email("ada@example.com")

            self.assertTrue(self.codec.verify(token.access_token))
            self.assertEqual(self.codec.decode(token.access_token)["sub"], str(user.id))

        asyncio.run(test())

    def test_register_stores_hash_not_password(self):
        async def test():
            await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            user = self.store.find_by_email("ada@example.com")
            self.assertNotEqual(user.password_hash, "secret123")
            self.assertTrue(user.password_hash.startswith("$2"))

        asyncio.run(test())

    def test_login_after_register(self):
        async def test():
            await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            token = await self.service.login("ada@example.com", "secret123")
            self.assertTrue(self.codec.verify(token.access_token))

        asyncio.run(test())

    def test_wrong_password_and_unknown_email_look_the_same(self):
        async def test():
            await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")

            with self.assertRaises(ServiceError) as wrong_password:
                await self.service.login("ada@example.com", "not-the-password")
            with self.assertRaises(ServiceError) as unknown_email:
                await self.service.login("nobody@example.com", "secret123")

            self.assertEqual(wrong_password.exception.kind, ErrorKind.UNAUTHENTICATED)
            self.assertEqual(unknown_email.exception.kind, ErrorKind.UNAUTHENTICATED)
            self.assertEqual(wrong_password.exception.message, INVALID_CREDENTIALS_MESSAGE)
            self.assertEqual(unknown_email.exception.message, INVALID_CREDENTIALS_MESSAGE)

        asyncio.run(test())

    def test_duplicate_register_rejected(self):
        async def test():
            await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")

            with self.assertRaises(ServiceError) as ctx:
                await self.service.register("Eve", "Imposter", "ada@example.com", "other")

            self.assertEqual(ctx.exception.kind, ErrorKind.ALREADY_EXISTS)
            self.assertEqual(ctx.exception.message, USER_EXISTS_MESSAGE)

            # First registration is kept: its password works, the second does not
            await self.service.login("ada@example.com", "secret123")
            with self.assertRaises(ServiceError):
                await self.service.login("ada@example.com", "other")

        asyncio.run(test())

    def test_concurrent_logins(self):
        async def test():
            await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            tokens = await asyncio.gather(
                *[self.service.login("ada@example.com", "secret123") for _ in range(5)]
            )
            for token in tokens:
                self.assertTrue(self.codec.verify(token.access_token))

        asyncio.run(test())


class TestAuthServiceFailures(unittest.TestCase):
    """Test error mapping with mocked collaborators"""

    def setUp(self):
        self.store = MagicMock(spec=UserStore)
        self.hasher = PasswordHasher(rounds=4)
        self.codec = TokenCodec(SECRET_KEY)
        self.service = AuthService(self.store, self.hasher, self.codec)

    def _user(self, password_hash: str) -> User:
        return User(
            id=1,
            firstname="Ada",
            lastname="Lovelace",
            email="ada@example.com",
            password_hash=password_hash,
        )

    def test_store_failure_on_register_is_internal(self):
        self.store.create.side_effect = UserStoreError("connection refused")

        async def test():
            with self.assertRaises(ServiceError) as ctx:
                await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            self.assertEqual(ctx.exception.kind, ErrorKind.INTERNAL)
            self.assertEqual(ctx.exception.message, USER_CREATION_MESSAGE)

        asyncio.run(test())

    def test_hash_failure_on_register_is_unknown(self):
        async def test():
            with patch.object(self.hasher, "hash", side_effect=PasswordHashError("boom")):
                with self.assertRaises(ServiceError) as ctx:
                    await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            self.assertEqual(ctx.exception.kind, ErrorKind.UNKNOWN)
            self.assertEqual(ctx.exception.message, USER_CREATION_MESSAGE)
            self.store.create.assert_not_called()

        asyncio.run(test())

    def test_signing_failure_on_register_is_unknown(self):
        self.store.create.return_value = self._user("$2b$04$unused")

        async def test():
            with patch.object(self.codec, "issue", side_effect=TokenIssueError("boom")):
                with self.assertRaises(ServiceError) as ctx:
                    await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            self.assertEqual(ctx.exception.kind, ErrorKind.UNKNOWN)
            self.assertEqual(ctx.exception.message, TOKEN_GENERATION_MESSAGE)

        asyncio.run(test())

    def test_store_failure_on_login_is_unauthenticated(self):
        self.store.find_by_email.side_effect = UserStoreError("connection refused")

        async def test():
            with self.assertRaises(ServiceError) as ctx:
                await self.service.login("ada@example.com", "secret123")
            self.assertEqual(ctx.exception.kind, ErrorKind.UNAUTHENTICATED)
            self.assertEqual(ctx.exception.message, INVALID_CREDENTIALS_MESSAGE)

        asyncio.run(test())

    def test_malformed_stored_hash_is_unauthenticated(self):
        self.store.find_by_email.return_value = self._user("corrupted")

        async def test():
            with self.assertRaises(ServiceError) as ctx:
                await self.service.login("ada@example.com", "secret123")
            self.assertEqual(ctx.exception.kind, ErrorKind.UNAUTHENTICATED)
            self.assertEqual(ctx.exception.message, INVALID_CREDENTIALS_MESSAGE)

        asyncio.run(test())

    def test_signing_failure_on_login_is_unauthenticated(self):
        self.store.find_by_email.return_value = self._user(self.hasher.hash("secret123"))

        async def test():
            with patch.object(self.codec, "issue", side_effect=TokenIssueError("boom")):
                with self.assertRaises(ServiceError) as ctx:
                    await self.service.login("ada@example.com", "secret123")
            self.assertEqual(ctx.exception.kind, ErrorKind.UNAUTHENTICATED)
            self.assertEqual(ctx.exception.message, INVALID_CREDENTIALS_MESSAGE)

        asyncio.run(test())

    def test_error_messages_carry_no_detail(self):
        self.store.create.side_effect = UserStoreError("password authentication failed for db")

        async def test():
            with self.assertRaises(ServiceError) as ctx:
                await self.service.register("Ada", "Lovelace", "ada@example.com", "secret123")
            self.assertNotIn("db", ctx.exception.message)

        asyncio.run(test())


if __name__ == "__main__":
    unittest.main()
