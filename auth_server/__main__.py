"""
Auth Server Entry Point

Allows running the server directly via `python -m auth_server`.
Configures logging to stderr, loads configuration (fatal if APP_KEY or
DATABASE_URL is missing) and serves on [::1]:50051.
"""

import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from .core.auth_server import AuthServer
from .core.config import ConfigurationError, ServerConfig
from .core.constants import LOG_FORMAT
from .persistence.sql_user_store import SQLUserStore
from .persistence.user_store import UserStoreError


def setup_logging(level: str = "INFO"):
    """Configure logging to stderr"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


async def serve(config: ServerConfig) -> None:
    user_store = SQLUserStore.from_url(
        config.database_url,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=config.db_pool_timeout,
    )
    user_store.create_schema()

    server = AuthServer(config, user_store=user_store)
    await server.run()


def main() -> None:
    """Main entry point"""
    setup_logging()
    logger = logging.getLogger("main")

    try:
        config = ServerConfig.from_env()
    except ConfigurationError as e:
        logger.critical(f"Fatal configuration error: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except (ValueError, OSError, ImportError, SQLAlchemyError, UserStoreError) as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
