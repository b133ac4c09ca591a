"""
Persistence module - user record storage

Provides:
- UserStore: Credential store interface
- SQLUserStore: Pooled SQLAlchemy implementation
- User: Stored user record
"""

from .user_store import User, UserStore, UserStoreError, DuplicateUserError
from .sql_user_store import SQLUserStore, create_store_engine, create_schema, users

__all__ = [
    "User",
    "UserStore",
    "UserStoreError",
    "DuplicateUserError",
    "SQLUserStore",
    "create_store_engine",
    "create_schema",
    "users",
]
