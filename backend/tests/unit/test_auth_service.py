"""Unit tests for the AuthService."""

import pytest

from shopfloor.application.interfaces import AccessPolicy, PasswordHasher, UserRepository
from shopfloor.application.services import AccessGuard, AuthService
from shopfloor.domain.entities import User
from shopfloor.domain.exceptions import (
    AccessDeniedError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidCredentialsError,
)
from shopfloor.infrastructure.security import BcryptPasswordHasher


class FakeUserRepository(UserRepository):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._next_id = 1

    async def get_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def create(self, user: User) -> User:
        user.id = str(self._next_id)
        self._next_id += 1
        self._users[user.id] = user
        return user

    async def update(self, user: User) -> User:
        if user.id not in self._users:
            raise ValueError(f"User {user.id} not found")
        self._users[user.id] = user
        return user


class PlainHasher(PasswordHasher):
    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


class FixedKeyPolicy(AccessPolicy):
    def authorize(self, provided_key, scope):
        return provided_key == f"{scope.value}-key"


@pytest.fixture
def service() -> AuthService:
    return AuthService(FakeUserRepository(), PlainHasher(), AccessGuard(FixedKeyPolicy()))


@pytest.mark.asyncio
async def test_register_requires_setup_key(service: AuthService):
    with pytest.raises(AccessDeniedError):
        await service.register("ana", "pw", "wrong")
    with pytest.raises(AccessDeniedError):
        await service.register("ana", "pw", "admin-key")


@pytest.mark.asyncio
async def test_register_creates_admin_with_hashed_password(service: AuthService):
    user = await service.register("ana", "pw", "setup-key")
    assert user.id is not None
    assert user.role == "admin"
    assert user.password_hash == "hashed:pw"


@pytest.mark.asyncio
async def test_register_duplicate_username(service: AuthService):
    await service.register("ana", "pw", "setup-key")
    with pytest.raises(DuplicateEntityError):
        await service.register("ana", "other", "setup-key")


@pytest.mark.asyncio
async def test_login_errors_are_indistinguishable(service: AuthService):
    await service.register("ana", "pw", "setup-key")

    with pytest.raises(InvalidCredentialsError) as unknown:
        await service.login("nobody", "pw")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await service.login("ana", "bad")

    assert str(unknown.value) == str(wrong.value) == "Invalid credentials"
    assert (await service.login("ana", "pw")).username == "ana"


@pytest.mark.asyncio
async def test_update_requires_admin_key(service: AuthService):
    await service.register("ana", "pw", "setup-key")
    with pytest.raises(AccessDeniedError):
        await service.update_personnel("ana", new_username="anna", admin_key="setup-key")


@pytest.mark.asyncio
async def test_update_unknown_user(service: AuthService):
    with pytest.raises(EntityNotFoundError):
        await service.update_personnel("ghost", new_password="x", admin_key="admin-key")


@pytest.mark.asyncio
async def test_update_renames_and_resets_password(service: AuthService):
    await service.register("ana", "pw", "setup-key")

    user = await service.update_personnel(
        "ana", new_username="anna", new_password="new-pw", admin_key="admin-key"
    )

    assert user.username == "anna"
    assert user.updated_at is not None
    assert (await service.login("anna", "new-pw")).username == "anna"
    with pytest.raises(InvalidCredentialsError):
        await service.login("ana", "pw")


@pytest.mark.asyncio
async def test_update_rename_to_taken_username(service: AuthService):
    await service.register("ana", "pw", "setup-key")
    await service.register("ben", "pw", "setup-key")
    with pytest.raises(DuplicateEntityError):
        await service.update_personnel("ana", new_username="ben", admin_key="admin-key")


@pytest.mark.asyncio
async def test_bcrypt_hasher_round_trip():
    hasher = BcryptPasswordHasher(rounds=4)
    hashed = await hasher.hash("s3cret")
    assert hashed.startswith("$2")
    assert await hasher.verify("s3cret", hashed)
    assert not await hasher.verify("wrong", hashed)
    assert not await hasher.verify("s3cret", "not-a-bcrypt-hash")
