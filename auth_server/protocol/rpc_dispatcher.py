"""
RPC Dispatcher - Routes JSON-RPC requests to service handlers

Module: protocol.rpc_dispatcher
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Method registration and routing
  - Per-call CallContext
  - ServiceError to JSON-RPC error conversion
  - Generic internal error for unexpected exceptions

ARCHITECTURE:
RPCDispatcher is the bridge between the transport and the services:
1. Validate params shape
2. Build a CallContext for the call
3. Route to the registered handler
4. Turn the handler's result or ServiceError into a reply

SECURITY NOTES:
- Unexpected exceptions are logged with traceback server-side and
  answered with a fixed "Internal error" message
- Authentication is the handler's job (see token_gate)
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..core.constants import (
    ERROR_MESSAGES,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
)
from ..core.errors import ServiceError, to_rpc_error
from ..security.call_context import CallContext
from ..transport.base_transport import (
    Reply,
    TransportError,
    TransportMessage,
    TransportResponse,
)

Handler = Callable[[CallContext, Dict[str, Any]], Awaitable[Dict[str, Any]]]


class RPCDispatcher:
    """
    JSON-RPC method router

    Handlers are async callables (context, params) -> result dict.
    """

    def __init__(self):
        self.logger = logging.getLogger("protocol.rpc_dispatcher")
        self._method_handlers: Dict[str, Handler] = {}
        self.total_requests = 0

    def register_method(self, method: str, handler: Handler) -> None:
        """
        Register a method handler

        Args:
            method: Method name (e.g., "auth.Auth/Login")
            handler: Async callable(context, params) -> result
        """
        self._method_handlers[method] = handler
        self.logger.debug(f"Method handler registered: {method}")

    @property
    def methods(self):
        return sorted(self._method_handlers)

    async def handle_message(self, message: TransportMessage) -> Optional[Reply]:
        """
        Handle incoming message

        Args:
            message: Incoming request

        Returns:
            TransportResponse, TransportError, or None for notifications

        Raises:
            Nothing - errors returned as responses
        """
        self.total_requests += 1
        context = CallContext.from_message(message)

        self.logger.debug(f"Request {context.get_info()}")

        handler = self._method_handlers.get(message.method)
        if handler is None:
            return self._error_response(
                message.request_id,
                METHOD_NOT_FOUND,
                f"Method not found: {message.method}",
            )

        params = message.params if message.params is not None else {}
        if not isinstance(params, dict):
            return self._error_response(
                message.request_id,
                INVALID_PARAMS,
                ERROR_MESSAGES[INVALID_PARAMS],
            )

        try:
            result = await handler(context, params)
        except ServiceError as e:
            self.logger.info(f"{message.method} failed: {e.kind.value}")
            return to_rpc_error(e, message.request_id)
        except Exception as e:
            self.logger.error(f"Error in handler {message.method}: {e}", exc_info=True)
            return self._error_response(
                message.request_id,
                INTERNAL_ERROR,
                ERROR_MESSAGES[INTERNAL_ERROR],
            )

        if message.is_notification:
            return None

        return TransportResponse(result=result, request_id=message.request_id)

    def _error_response(
        self,
        request_id: Optional[Any],
        error_code: int,
        message: str,
    ) -> TransportError:
        return TransportError(code=error_code, message=message, request_id=request_id)
