"""
Server Configuration - Environment-based settings

Module: core.config
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - ServerConfig loaded once at startup
  - .env support via python-dotenv
  - Fail-fast validation of required settings

Environment variables:
  APP_KEY            required, shared token signing secret
  DATABASE_URL       required, SQLAlchemy URL of the user database
  BCRYPT_ROUNDS      bcrypt work factor (default 10)
  TOKEN_TTL_SECONDS  token lifetime (default 3600)
  DB_POOL_SIZE       pooled connections (default 5)
  DB_MAX_OVERFLOW    extra connections under load (default 0)
  DB_POOL_TIMEOUT    seconds to wait for a connection (default 30)
  LOG_LEVEL          logging level (default INFO)

SECURITY NOTES:
- The configuration object is immutable
- APP_KEY is excluded from repr() so it never lands in logs
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from .constants import (
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_DB_MAX_OVERFLOW,
    DEFAULT_DB_POOL_SIZE,
    DEFAULT_DB_POOL_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TOKEN_TTL_SECONDS,
)


class ConfigurationError(Exception):
    """Required configuration missing or invalid"""
    pass


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, read once at startup"""
    app_key: str = field(repr=False)
    database_url: str = field(repr=False)
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    db_pool_size: int = DEFAULT_DB_POOL_SIZE
    db_max_overflow: int = DEFAULT_DB_MAX_OVERFLOW
    db_pool_timeout: float = DEFAULT_DB_POOL_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        load_env_file: bool = True,
    ) -> "ServerConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)
            load_env_file: Load a .env file into os.environ first

        Returns:
            ServerConfig

        Raises:
            ConfigurationError: If a required value is missing or a value
                cannot be parsed
        """
        if load_env_file:
            load_dotenv()
        env = os.environ if environ is None else environ

        return cls(
            app_key=_required(env, "APP_KEY"),
            database_url=_required(env, "DATABASE_URL"),
            bcrypt_rounds=_int(env, "BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS),
            token_ttl_seconds=_int(env, "TOKEN_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS),
            db_pool_size=_int(env, "DB_POOL_SIZE", DEFAULT_DB_POOL_SIZE),
            db_max_overflow=_int(env, "DB_MAX_OVERFLOW", DEFAULT_DB_MAX_OVERFLOW),
            db_pool_timeout=_float(env, "DB_POOL_TIMEOUT", DEFAULT_DB_POOL_TIMEOUT),
            log_level=env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if not value:
        raise ConfigurationError(f"env {name} is not defined")
    return value


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"env {name} must be an integer, got {raw!r}")


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"env {name} must be a number, got {raw!r}")


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import unittest

    class TestServerConfig(unittest.TestCase):
        """Test suite for ServerConfig"""

        def test_required_values(self):
            with self.assertRaises(ConfigurationError):
                ServerConfig.from_env(environ={"APP_KEY": "key"}, load_env_file=False)

        def test_defaults(self):
            config = ServerConfig.from_env(
                environ={"APP_KEY": "config-test-secret", "DATABASE_URL": "sqlite://"},
                load_env_file=False,
            )
            self.assertEqual(config.bcrypt_rounds, DEFAULT_BCRYPT_ROUNDS)
            self.assertNotIn("config-test-secret", repr(config))

    unittest.main()
