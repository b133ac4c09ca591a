#!/usr/bin/env python3
"""
Example Client for the Auth Server

Registers (or logs in) a user, then calls the token-gated Greet
operation with and without the token.

Usage:
    # Terminal 1: Start the server
    APP_KEY=change-me DATABASE_URL=sqlite:///users.db python -m auth_server

    # Terminal 2: Run this client
    python examples/example_client.py
"""

import asyncio
import logging

from auth_server import AuthClient, RPCError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("example_client")

EMAIL = "ada@example.com"
PASSWORD = "correct horse battery staple"


async def run(host: str = "::1", port: int = 50051) -> None:
    """Run example client"""
    async with AuthClient(host, port) as client:
        logger.info("=== Auth Server Client Demo ===")

        try:
            token = await client.register("Ada", "Lovelace", EMAIL, PASSWORD)
            logger.info("Registered new user")
        except RPCError as e:
            if e.status != "ALREADY_EXISTS":
                raise
            logger.info("User already registered, logging in")
            token = await client.login(EMAIL, PASSWORD)

        reply = await client.greet("Ping?", token)
        logger.info(f"Greet with token: {reply}")

        try:
            await client.greet("Ping?")
        except RPCError as e:
            logger.info(f"Greet without token refused: {e.status} ({e.message})")


async def main():
    """Main entry point"""
    await run()


if __name__ == "__main__":
    asyncio.run(main())
