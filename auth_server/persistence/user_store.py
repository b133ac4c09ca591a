"""
User Store - Credential store interface

Module: persistence.user_store
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - User record
  - UserStore abstract interface
  - Store error hierarchy

ARCHITECTURE:
Services only see UserStore. Users are created once at registration and
never updated or deleted through this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class UserStoreError(Exception):
    """Base user store error"""
    pass


class DuplicateUserError(UserStoreError):
    """A user with this email already exists"""
    pass


@dataclass(frozen=True)
class User:
    """Stored user record"""
    id: int
    firstname: str
    lastname: str
    email: str
    password_hash: str

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r})"


class UserStore(ABC):
    """Persistence of user records keyed by email"""

    @abstractmethod
    def create(self, firstname: str, lastname: str, email: str, password_hash: str) -> User:
        """
        Create a user

        Raises:
            DuplicateUserError: If the email is already registered
            UserStoreError: On any other storage failure
        """

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """
        Look up a user by email

        Returns:
            User if found, None otherwise

        Raises:
            UserStoreError: On storage failure
        """

    def close(self) -> None:
        """Release resources held by the store"""
