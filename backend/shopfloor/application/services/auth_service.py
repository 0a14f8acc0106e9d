"""Application service (use case) for personnel registration, login and updates."""

import logging

from shopfloor.application.interfaces import AccessScope, PasswordHasher, UserRepository
from shopfloor.application.services.access_guard import AccessGuard
from shopfloor.domain.entities import User
from shopfloor.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidCredentialsError,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Orchestrates personnel accounts. Depends on ports only (DI)."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        guard: AccessGuard,
    ):
        self._users = users
        self._hasher = hasher
        self._guard = guard

    async def register(self, username: str, password: str, setup_key: str | None) -> User:
        self._guard.require(setup_key, AccessScope.SETUP)

        if await self._users.get_by_username(username) is not None:
            raise DuplicateEntityError("User", "username", username)

        user = User(username=username, password_hash=await self._hasher.hash(password))
        created = await self._users.create(user)
        logger.info("Registered user '%s'", created.username)
        return created

    async def login(self, username: str, password: str) -> User:
        """Return the user on a match; any mismatch raises the same generic error."""
        user = await self._users.get_by_username(username)
        if user is None or not await self._hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()
        return user

    async def update_personnel(
        self,
        current_username: str,
        *,
        new_username: str | None = None,
        new_password: str | None = None,
        admin_key: str | None = None,
    ) -> User:
        """Rename and/or reset the password of an existing user."""
        self._guard.require(admin_key, AccessScope.ADMIN)

        user = await self._users.get_by_username(current_username)
        if user is None:
            raise EntityNotFoundError("User", current_username)

        if new_username and new_username != user.username:
            if await self._users.get_by_username(new_username) is not None:
                raise DuplicateEntityError("User", "username", new_username)

        password_hash = await self._hasher.hash(new_password) if new_password else None
        user.update(username=new_username or None, password_hash=password_hash)
        updated = await self._users.update(user)
        logger.info("Updated personnel record '%s'", updated.username)
        return updated
