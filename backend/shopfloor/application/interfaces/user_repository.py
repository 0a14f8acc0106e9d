"""Abstract repository interface (port) for User persistence."""

from abc import ABC, abstractmethod

from shopfloor.domain.entities import User


class UserRepository(ABC):
    """Port for personnel persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a single user by unique username."""
        ...

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user and return it with the generated ID."""
        ...

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update an existing user."""
        ...
