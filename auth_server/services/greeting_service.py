"""
Greeting Service - Token-gated example operation

Module: services.greeting_service
Date: 2026-10-19
Version: 0.1.0

Every call is checked with require_token() before the business logic
runs. New protected operations follow the same pattern.
"""

import logging
from typing import Any, Mapping

from ..protocol.messages import GreetRequest, GreetResponse
from ..security.authentication.token_codec import TokenCodec
from ..security.authentication.token_gate import require_token
from ..security.call_context import CallContext

GREETING_SUFFIX = "Pong!"


class GreetingService:
    """Echoes a message back to an authenticated caller"""

    def __init__(self, token_codec: TokenCodec):
        self.logger = logging.getLogger("services.greeting")
        self.token_codec = token_codec

    async def greet(self, context: CallContext, params: Mapping[str, Any]) -> GreetResponse:
        """
        Echo the message with a fixed suffix

        The token is checked before the request is even parsed.

        Raises:
            ServiceError: UNAUTHENTICATED if the bearer token is missing or invalid,
                INVALID_ARGUMENT if the message is missing
        """
        require_token(self.token_codec, context)
        request = GreetRequest.from_params(params)
        return GreetResponse(message=f"{request.message} {GREETING_SUFFIX}")
