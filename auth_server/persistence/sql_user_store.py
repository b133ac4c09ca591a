"""
SQL User Store - Relational UserStore on a pooled SQLAlchemy engine

Module: persistence.sql_user_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - users table (SQLAlchemy Core)
  - Bounded QueuePool, one checkout per operation
  - Unique-violation detection for duplicate emails

ARCHITECTURE:
SQLUserStore provides:
  - create() and find_by_email() over SQLAlchemy Core statements
  - A connection pool of pool_size (+ max_overflow) connections; each
    operation checks a connection out and returns it on exit, so calls
    only contend when the pool is exhausted
  - pool_timeout bounds how long a call waits for a free connection

Methods are blocking; async callers run them in a worker thread.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import Column, Integer, MetaData, Table, Text, create_engine, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import QueuePool

from .user_store import DuplicateUserError, User, UserStore, UserStoreError
from ..core.constants import (
    DEFAULT_DB_MAX_OVERFLOW,
    DEFAULT_DB_POOL_SIZE,
    DEFAULT_DB_POOL_TIMEOUT,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("firstname", Text, nullable=False),
    Column("lastname", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("password", Text, nullable=False),
)

# SQLSTATE for unique_violation
_PG_UNIQUE_VIOLATION = "23505"


def create_store_engine(
    database_url: str,
    pool_size: int = DEFAULT_DB_POOL_SIZE,
    max_overflow: int = DEFAULT_DB_MAX_OVERFLOW,
    pool_timeout: float = DEFAULT_DB_POOL_TIMEOUT,
) -> Engine:
    """
    Create a pooled engine for the user store

    Args:
        database_url: SQLAlchemy database URL
        pool_size: Connections kept in the pool
        max_overflow: Extra connections allowed under load
        pool_timeout: Seconds to wait for a free connection

    Returns:
        Engine backed by a QueuePool
    """
    url = make_url(database_url)
    connect_args: Dict[str, Any] = {}
    if url.get_backend_name() == "sqlite":
        # Pooled connections are used from worker threads
        connect_args["check_same_thread"] = False

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_schema(engine: Engine) -> None:
    """Create the users table if it does not exist"""
    metadata.create_all(engine)


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    if getattr(orig, "pgcode", None) == _PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlstate", None) == _PG_UNIQUE_VIOLATION:
        return True
    text = str(orig).lower()
    return "unique" in text or "duplicate" in text


class SQLUserStore(UserStore):
    """SQLAlchemy implementation of the UserStore interface"""

    def __init__(self, engine: Engine):
        """
        Initialize SQL user store

        Args:
            engine: Pooled SQLAlchemy engine (see create_store_engine)
        """
        self.logger = logging.getLogger("persistence.sql_user_store")
        self.engine = engine
        self.logger.info(f"SQLUserStore initialized (backend={engine.url.get_backend_name()})")

    @classmethod
    def from_url(
        cls,
        database_url: str,
        pool_size: int = DEFAULT_DB_POOL_SIZE,
        max_overflow: int = DEFAULT_DB_MAX_OVERFLOW,
        pool_timeout: float = DEFAULT_DB_POOL_TIMEOUT,
    ) -> "SQLUserStore":
        engine = create_store_engine(database_url, pool_size, max_overflow, pool_timeout)
        return cls(engine)

    def create_schema(self) -> None:
        try:
            create_schema(self.engine)
        except SQLAlchemyError as e:
            raise UserStoreError("Failed to create schema") from e

    def create(self, firstname: str, lastname: str, email: str, password_hash: str) -> User:
        stmt = users.insert().values(
            firstname=firstname,
            lastname=lastname,
            email=email,
            password=password_hash,
        )

        try:
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
                user_id = result.inserted_primary_key[0]
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateUserError(f"User '{email}' already exists") from e
            raise UserStoreError("Failed to create user") from e
        except SQLAlchemyError as e:
            raise UserStoreError("Failed to create user") from e

        self.logger.info(f"User created: {user_id}")
        return User(
            id=user_id,
            firstname=firstname,
            lastname=lastname,
            email=email,
            password_hash=password_hash,
        )

    def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(users).where(users.c.email == email)

        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            raise UserStoreError("Failed to look up user") from e

        if row is None:
            return None

        return User(
            id=row.id,
            firstname=row.firstname,
            lastname=row.lastname,
            email=row.email,
            password_hash=row.password,
        )

    def close(self) -> None:
        self.engine.dispose()
        self.logger.info("SQLUserStore closed")


# ============================================================================
# Unit Tests
# ============================================================================

if __name__ == "__main__":
    import os
    import shutil
    import tempfile
    import unittest

    class TestSQLUserStore(unittest.TestCase):
        """Test suite for SQLUserStore"""

        def setUp(self):
            self.test_dir = tempfile.mkdtemp()
            self.store = SQLUserStore.from_url(f"sqlite:///{os.path.join(self.test_dir, 'users.db')}")
            self.store.create_schema()

        def tearDown(self):
            self.store.close()
            shutil.rmtree(self.test_dir)

        def test_create_and_find(self):
            user = self.store.create("Ada", "Lovelace", "ada@example.com", "hash")
            self.assertEqual(self.store.find_by_email("ada@example.com"), user)

        def test_duplicate_email(self):
            self.store.create("Ada", "Lovelace", "ada@example.com", "hash")
            with self.assertRaises(DuplicateUserError):
                self.store.create("Ada", "Lovelace", "ada@example.com", "hash")

    unittest.main()
