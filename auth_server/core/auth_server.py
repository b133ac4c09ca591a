"""
Auth Server - Main server orchestrator

Module: core.auth_server
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Wiring: config -> store -> hasher -> codec -> services
  - RPC handlers for Login, Register, Greet
  - TCP transport lifecycle (start/stop/run)
  - Status reporting

ARCHITECTURE:
AuthServer is the main entry point that:
1. Builds the components from a ServerConfig
2. Injects the single TokenCodec into both AuthService and GreetingService
3. Registers RPC methods on the dispatcher
4. Runs the TCP transport

This is the class that applications will use directly.

SECURITY NOTES:
- The signing secret lives only in the TokenCodec instance
- Handler errors are converted to fixed messages by the dispatcher
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .config import ServerConfig
from .constants import (
    SERVER_NAME,
    SERVER_VERSION,
    METHOD_LOGIN,
    METHOD_REGISTER,
    METHOD_GREET,
)
from ..persistence.user_store import UserStore
from ..persistence.sql_user_store import SQLUserStore
from ..protocol.messages import LoginRequest, RegisterRequest
from ..protocol.rpc_dispatcher import RPCDispatcher
from ..security.authentication.password_hasher import PasswordHasher
from ..security.authentication.token_codec import TokenCodec
from ..security.call_context import CallContext
from ..services.auth_service import AuthService
from ..services.greeting_service import GreetingService
from ..transport.tcp_transport import TCPConfig, TCPTransport


@dataclass
class ServerStatus:
    """Status information about the server"""
    name: str
    version: str
    is_running: bool
    address: Optional[str]
    uptime_seconds: float
    total_requests: int
    active_connections: int
    methods: List[str]
    timestamp: datetime


class AuthServer:
    """
    Main Auth Server

    Typical usage:
        server = AuthServer(ServerConfig.from_env())
        await server.run()
    """

    def __init__(
        self,
        config: ServerConfig,
        tcp_config: Optional[TCPConfig] = None,
        user_store: Optional[UserStore] = None,
    ):
        """
        Initialize Auth Server

        Args:
            config: Server configuration
            tcp_config: Listening endpoint (defaults to [::1]:50051)
            user_store: Store to use instead of the configured database

        Raises:
            ValueError: If the key or work factor is unusable
        """
        self.logger = logging.getLogger("core.auth_server")
        self.config = config

        self.user_store = user_store or SQLUserStore.from_url(
            config.database_url,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_timeout=config.db_pool_timeout,
        )
        self.password_hasher = PasswordHasher(rounds=config.bcrypt_rounds)
        self.token_codec = TokenCodec(
            config.app_key,
            token_ttl_seconds=config.token_ttl_seconds,
        )

        self.auth_service = AuthService(self.user_store, self.password_hasher, self.token_codec)
        self.greeting_service = GreetingService(self.token_codec)

        self.dispatcher = RPCDispatcher()
        self.dispatcher.register_method(METHOD_LOGIN, self._handle_login)
        self.dispatcher.register_method(METHOD_REGISTER, self._handle_register)
        self.dispatcher.register_method(METHOD_GREET, self._handle_greet)

        self.transport = TCPTransport(tcp_config)
        self.transport.set_message_handler(self.dispatcher.handle_message)

        self._startup_time: Optional[datetime] = None

        self.logger.info(f"Server initialized: {SERVER_NAME} v{SERVER_VERSION}")

    @property
    def is_running(self) -> bool:
        return self.transport.is_running

    @property
    def uptime_seconds(self) -> float:
        if not self._startup_time:
            return 0.0
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    async def start(self) -> None:
        """
        Start listening

        Raises:
            OSError: If the endpoint cannot be bound
        """
        if self.is_running:
            self.logger.warning("Server already running")
            return

        await self.transport.start()
        self._startup_time = datetime.now(timezone.utc)
        self.logger.info(f"Server started on {self.transport.address}")

    async def stop(self) -> None:
        """Stop transport and release the store"""
        if self.is_running:
            await self.transport.stop()
        self.user_store.close()
        self._startup_time = None
        self.logger.info("Server stopped")

    async def run(self) -> None:
        """Serve until cancelled"""
        await self.start()
        try:
            await self.transport.serve_forever()
        finally:
            await self.stop()

    def get_status(self) -> ServerStatus:
        address = self.transport.address
        return ServerStatus(
            name=SERVER_NAME,
            version=SERVER_VERSION,
            is_running=self.is_running,
            address=f"{address[0]}:{address[1]}" if address else None,
            uptime_seconds=self.uptime_seconds,
            total_requests=self.dispatcher.total_requests,
            active_connections=self.transport.get_client_count(),
            methods=self.dispatcher.methods,
            timestamp=datetime.now(timezone.utc),
        )

    # ========================================================================
    # RPC Handlers
    # ========================================================================

    async def _handle_login(self, context: CallContext, params: Dict[str, Any]) -> Dict[str, Any]:
        """auth.Auth/Login: {email, password} -> {access_token}"""
        request = LoginRequest.from_params(params)
        token = await self.auth_service.login(request.email, request.password)
        return token.to_dict()

    async def _handle_register(self, context: CallContext, params: Dict[str, Any]) -> Dict[str, Any]:
        """auth.Auth/Register: {firstname, lastname, email, password} -> {access_token}"""
        request = RegisterRequest.from_params(params)
        token = await self.auth_service.register(
            request.firstname,
            request.lastname,
            request.email,
            request.password,
        )
        return token.to_dict()

    async def _handle_greet(self, context: CallContext, params: Dict[str, Any]) -> Dict[str, Any]:
        """greeting.Greeting/Greet: {message} + x-authorization -> {message}"""
        response = await self.greeting_service.greet(context, params)
        return response.to_dict()
