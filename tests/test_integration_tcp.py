"""
Integration Tests - Auth Server over TCP

Module: tests.test_integration_tcp
Date: 2026-10-19
Version: 0.1.0

DESCRIPTION:
End-to-end tests: a real AuthServer on an ephemeral local port with a
temporary SQLite database, driven by AuthClient.
- Register / Login / Greet flows
- Error statuses as seen by a remote caller
- Framing errors and concurrent clients
"""

import asyncio
import json
import logging
import os
import shutil
import tempfile
import unittest

from auth_server import AuthClient, AuthServer, RPCError, ServerConfig
from auth_server.core.constants import (
    ALREADY_EXISTS_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    UNAUTHENTICATED_ERROR,
)
from auth_server.persistence import SQLUserStore
from auth_server.transport.tcp_transport import TCPConfig

logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s - %(levelname)s - %(message)s"
)


class TestAuthServerEndToEnd(unittest.TestCase):
    """Test the full request path through the TCP transport"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config = ServerConfig(
            app_key="integration-secret-key-at-least-32-chars!!",
            database_url=f"sqlite:///{os.path.join(self.test_dir, 'users.db')}",
            bcrypt_rounds=4,
        )

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _run(self, scenario):
        """Start a server, run scenario(server, host, port), stop the server"""
        async def main():
            store = SQLUserStore.from_url(self.config.database_url)
            store.create_schema()
            server = AuthServer(
                self.config,
                TCPConfig(host="127.0.0.1", port=0),
                user_store=store,
            )
            await server.start()
            host, port = server.transport.address
            try:
                await scenario(server, host, port)
            finally:
                await server.stop()

        asyncio.run(main())

    def test_register_then_greet(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                token = await client.register("Ada", "Lovelace", "ada@example.com", "secret123")
                self.assertEqual(await client.greet("hi", token), "hi Pong!")

        self._run(scenario)

    def test_login_then_greet(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                await client.register("Ada", "Lovelace", "ada@example.com", "secret123")
                token = await client.login("ada@example.com", "secret123")
                self.assertEqual(await client.greet("hello", token), "hello Pong!")

        self._run(scenario)

    def test_login_failures_share_one_error(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                await client.register("Ada", "Lovelace", "ada@example.com", "secret123")

                with self.assertRaises(RPCError) as wrong_password:
                    await client.login("ada@example.com", "wrong")
                with self.assertRaises(RPCError) as unknown_email:
                    await client.login("nobody@example.com", "secret123")

            for error in (wrong_password.exception, unknown_email.exception):
                self.assertEqual(error.code, UNAUTHENTICATED_ERROR)
                self.assertEqual(error.status, "UNAUTHENTICATED")
                self.assertEqual(error.message, "Invalid email or password")

        self._run(scenario)

    def test_duplicate_registration(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                await client.register("Ada", "Lovelace", "ada@example.com", "secret123")
                with self.assertRaises(RPCError) as ctx:
                    await client.register("Ada", "Lovelace", "ada@example.com", "secret123")

            self.assertEqual(ctx.exception.code, ALREADY_EXISTS_ERROR)
            self.assertEqual(ctx.exception.status, "ALREADY_EXISTS")

        self._run(scenario)

    def test_greet_without_token(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                with self.assertRaises(RPCError) as ctx:
                    await client.greet("hi")

            self.assertEqual(ctx.exception.code, UNAUTHENTICATED_ERROR)
            self.assertEqual(ctx.exception.message, "No access token specified")

        self._run(scenario)

    def test_greet_with_invalid_token(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                with self.assertRaises(RPCError) as ctx:
                    await client.greet("hi", "abc")

            self.assertEqual(ctx.exception.code, UNAUTHENTICATED_ERROR)
            self.assertEqual(ctx.exception.message, "Invalid token")

        self._run(scenario)

    def test_missing_field(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                with self.assertRaises(RPCError) as ctx:
                    await client.call("auth.Auth/Login", {"email": "ada@example.com"})

            self.assertEqual(ctx.exception.code, INVALID_PARAMS)
            self.assertEqual(ctx.exception.status, "INVALID_ARGUMENT")

        self._run(scenario)

    def test_unknown_method(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                with self.assertRaises(RPCError) as ctx:
                    await client.call("auth.Auth/Logout", {})

            self.assertEqual(ctx.exception.code, METHOD_NOT_FOUND)

        self._run(scenario)

    def test_malformed_frame(self):
        async def scenario(server, host, port):
            reader, writer = await asyncio.open_connection(host, port)
            try:
                body = b"{not json"
                writer.write(len(body).to_bytes(4, byteorder="big") + body)
                await writer.drain()

                length = int.from_bytes(await reader.readexactly(4), byteorder="big")
                response = json.loads(await reader.readexactly(length))
            finally:
                writer.close()
                await writer.wait_closed()

            self.assertEqual(response["error"]["code"], PARSE_ERROR)
            self.assertIsNone(response["id"])

        self._run(scenario)

    def test_token_works_across_connections(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                token = await client.register("Ada", "Lovelace", "ada@example.com", "secret123")
            async with AuthClient(host, port) as client:
                self.assertEqual(await client.greet("again", token), "again Pong!")

        self._run(scenario)

    def test_concurrent_clients(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                token = await client.register("Ada", "Lovelace", "ada@example.com", "secret123")

            async def greet(i):
                async with AuthClient(host, port) as client:
                    return await client.greet(f"msg-{i}", token)

            replies = await asyncio.gather(*[greet(i) for i in range(5)])
            self.assertEqual(replies, [f"msg-{i} Pong!" for i in range(5)])

        self._run(scenario)

    def test_status(self):
        async def scenario(server, host, port):
            async with AuthClient(host, port) as client:
                with self.assertRaises(RPCError):
                    await client.greet("hi")

            status = server.get_status()
            self.assertTrue(status.is_running)
            self.assertEqual(status.address, f"{host}:{port}")
            self.assertEqual(status.total_requests, 1)
            self.assertEqual(
                status.methods,
                ["auth.Auth/Login", "auth.Auth/Register", "greeting.Greeting/Greet"],
            )

        self._run(scenario)


if __name__ == "__main__":
    unittest.main()
