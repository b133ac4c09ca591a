"""
Auth Service - Login and registration

Module: services.auth_service
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - login: credential check, token issuance
  - register: user creation, token issuance
  - Internal errors mapped to coarse ServiceError kinds

ARCHITECTURE:
AuthService combines:
  - UserStore (lookup / create)
  - PasswordHasher (bcrypt)
  - TokenCodec (HS256 tokens)
bcrypt and database calls block, so they run in worker threads via
asyncio.to_thread and the event loop keeps serving other calls.

SECURITY NOTES:
- Unknown email, wrong password, a failed lookup and token signing
  failure during login all produce the same UNAUTHENTICATED error
- Store, hashing and signing errors never reach the caller; they are
  logged here and replaced by a fixed message
- Passwords are never logged
"""

import asyncio
import logging

from ..core.errors import ServiceError
from ..persistence.user_store import DuplicateUserError, User, UserStore, UserStoreError
from ..protocol.messages import Token
from ..security.authentication.password_hasher import PasswordHasher, PasswordHashError
from ..security.authentication.token_codec import TokenCodec, TokenIssueError

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
USER_CREATION_MESSAGE = "Error while creating the user"
USER_EXISTS_MESSAGE = "User already exists in the database"
TOKEN_GENERATION_MESSAGE = "Cannot generate a token for the User"


class AuthService:
    """
    Issues bearer tokens for registered users

    Typical usage:
        service = AuthService(store, PasswordHasher(), TokenCodec(app_key))
        token = await service.login("alice@example.com", "secret")
    """

    def __init__(
        self,
        user_store: UserStore,
        password_hasher: PasswordHasher,
        token_codec: TokenCodec,
    ):
        self.logger = logging.getLogger("services.auth")
        self.user_store = user_store
        self.password_hasher = password_hasher
        self.token_codec = token_codec

    async def login(self, email: str, password: str) -> Token:
        """
        Verify credentials and issue a token

        Args:
            email: User email
            password: Plaintext password

        Returns:
            Token for the user

        Raises:
            ServiceError: UNAUTHENTICATED on bad credentials or a failed lookup
        """
        try:
            user = await asyncio.to_thread(self.user_store.find_by_email, email)
        except UserStoreError as e:
            self.logger.error(f"User lookup failed: {e}")
            raise ServiceError.unauthenticated(INVALID_CREDENTIALS_MESSAGE) from e

        if user is None:
            self.logger.warning("Login failed: unknown email")
            raise ServiceError.unauthenticated(INVALID_CREDENTIALS_MESSAGE)

        matched = await asyncio.to_thread(
            self.password_hasher.verify, password, user.password_hash
        )
        if not matched:
            self.logger.warning(f"Login failed: bad password for user {user.id}")
            raise ServiceError.unauthenticated(INVALID_CREDENTIALS_MESSAGE)

        try:
            token = self._generate_token(user)
        except TokenIssueError as e:
            self.logger.error(f"Token issuance failed for user {user.id}: {e}")
            raise ServiceError.unauthenticated(INVALID_CREDENTIALS_MESSAGE) from e

        self.logger.info(f"User authenticated: {user.id}")
        return token

    async def register(self, firstname: str, lastname: str, email: str, password: str) -> Token:
        """
        Create a user and issue a token

        Args:
            firstname: First name
            lastname: Last name
            email: Email (must be unique)
            password: Plaintext password (will be hashed)

        Returns:
            Token for the new user

        Raises:
            ServiceError: ALREADY_EXISTS for a registered email,
                UNKNOWN if hashing or signing fails,
                INTERNAL on other store failures
        """
        try:
            password_hash = await asyncio.to_thread(self.password_hasher.hash, password)
        except PasswordHashError as e:
            raise ServiceError.unknown(USER_CREATION_MESSAGE) from e

        try:
            user = await asyncio.to_thread(
                self.user_store.create, firstname, lastname, email, password_hash
            )
        except DuplicateUserError as e:
            self.logger.warning("Registration rejected: email already registered")
            raise ServiceError.already_exists(USER_EXISTS_MESSAGE) from e
        except UserStoreError as e:
            self.logger.error(f"User creation failed: {e}")
            raise ServiceError.internal(USER_CREATION_MESSAGE) from e

        try:
            token = self._generate_token(user)
        except TokenIssueError as e:
            self.logger.error(f"Token issuance failed for user {user.id}: {e}")
            raise ServiceError.unknown(TOKEN_GENERATION_MESSAGE) from e

        self.logger.info(f"User registered: {user.id}")
        return token

    def _generate_token(self, user: User) -> Token:
        claims = self.token_codec.build_claims(user.id)
        return Token(access_token=self.token_codec.issue(claims))
