"""
Unit Tests - Server Configuration

Module: tests.test_config
Date: 2026-10-19
Version: 0.1.0

DESCRIPTION:
Tests for ServerConfig.from_env(): required values, defaults, parsing.
"""

import logging
import unittest

from auth_server.core.config import ConfigurationError, ServerConfig
from auth_server.core.constants import (
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_DB_POOL_SIZE,
    DEFAULT_TOKEN_TTL_SECONDS,
)

logging.basicConfig(
    level=logging.WARNING,
    format="%(name)s - %(levelname)s - %(message)s"
)

BASE_ENV = {
    "APP_KEY": "test-secret-key-at-least-32-characters-long!!!!",
    "DATABASE_URL": "sqlite:///users.db",
}


class TestServerConfig(unittest.TestCase):
    """Test loading configuration from a mapping"""

    def _load(self, **overrides):
        env = dict(BASE_ENV)
        env.update(overrides)
        return ServerConfig.from_env(environ=env, load_env_file=False)

    def test_defaults(self):
        config = self._load()
        self.assertEqual(config.app_key, BASE_ENV["APP_KEY"])
        self.assertEqual(config.database_url, BASE_ENV["DATABASE_URL"])
        self.assertEqual(config.bcrypt_rounds, DEFAULT_BCRYPT_ROUNDS)
        self.assertEqual(config.token_ttl_seconds, DEFAULT_TOKEN_TTL_SECONDS)
        self.assertEqual(config.db_pool_size, DEFAULT_DB_POOL_SIZE)
        self.assertEqual(config.log_level, "INFO")

    def test_missing_app_key(self):
        env = {"DATABASE_URL": BASE_ENV["DATABASE_URL"]}
        with self.assertRaises(ConfigurationError) as ctx:
            ServerConfig.from_env(environ=env, load_env_file=False)
        self.assertIn("APP_KEY", str(ctx.exception))

    def test_empty_app_key(self):
        with self.assertRaises(ConfigurationError):
            self._load(APP_KEY="")

    def test_missing_database_url(self):
        env = {"APP_KEY": BASE_ENV["APP_KEY"]}
        with self.assertRaises(ConfigurationError) as ctx:
            ServerConfig.from_env(environ=env, load_env_file=False)
        self.assertIn("DATABASE_URL", str(ctx.exception))

    def test_overrides_parsed(self):
        config = self._load(
            BCRYPT_ROUNDS="12",
            TOKEN_TTL_SECONDS="600",
            DB_POOL_SIZE="8",
            DB_MAX_OVERFLOW="2",
            DB_POOL_TIMEOUT="1.5",
            LOG_LEVEL="debug",
        )
        self.assertEqual(config.bcrypt_rounds, 12)
        self.assertEqual(config.token_ttl_seconds, 600)
        self.assertEqual(config.db_pool_size, 8)
        self.assertEqual(config.db_max_overflow, 2)
        self.assertEqual(config.db_pool_timeout, 1.5)
        self.assertEqual(config.log_level, "DEBUG")

    def test_invalid_integer(self):
        with self.assertRaises(ConfigurationError):
            self._load(BCRYPT_ROUNDS="ten")

    def test_invalid_float(self):
        with self.assertRaises(ConfigurationError):
            self._load(DB_POOL_TIMEOUT="soon")

    def test_secrets_not_in_repr(self):
        config = self._load()
        self.assertNotIn(BASE_ENV["APP_KEY"], repr(config))
        self.assertNotIn("users.db", repr(config))


if __name__ == "__main__":
    unittest.main()
