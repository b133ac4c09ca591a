"""
Token Gate - Bearer-token pre-check for protected operations

Module: security.authentication.token_gate
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - require_token() pre-check on call metadata

The check is stateless and runs on every call; nothing is cached between
calls on the same connection.
"""

import logging

from .token_codec import TokenCodec
from ..call_context import CallContext
from ...core.constants import AUTHORIZATION_METADATA_KEY
from ...core.errors import ServiceError

logger = logging.getLogger("security.token_gate")

NO_TOKEN_MESSAGE = "No access token specified"
INVALID_TOKEN_MESSAGE = "Invalid token"


def require_token(token_codec: TokenCodec, context: CallContext) -> str:
    """
    Return the caller's bearer token if it verifies

    Args:
        token_codec: Codec holding the shared secret
        context: Call context carrying the metadata

    Returns:
        The verified token

    Raises:
        ServiceError: UNAUTHENTICATED if the token is missing or invalid
    """
    token = context.get_metadata(AUTHORIZATION_METADATA_KEY)
    if token is None or not isinstance(token, str):
        logger.warning(f"{context.method}: no access token ({context.peer})")
        raise ServiceError.unauthenticated(NO_TOKEN_MESSAGE)

    if not token_codec.verify(token):
        logger.warning(f"{context.method}: invalid token ({context.peer})")
        raise ServiceError.unauthenticated(INVALID_TOKEN_MESSAGE)

    return token
