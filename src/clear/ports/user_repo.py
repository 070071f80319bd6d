"""User registry interface."""

from typing import Protocol


class UserRepository(Protocol):
    """Interface for the set of known users. Authentication lives elsewhere."""

    def add_user(self, email: str) -> str:
        """Register a user and return its id."""
        ...

    def list_user_ids(self) -> list[str]:
        ...
