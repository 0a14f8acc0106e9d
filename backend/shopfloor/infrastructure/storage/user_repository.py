"""Concrete repository implementation backed by the application document store."""

from datetime import datetime

from shopfloor.application.interfaces import ID_FIELD, DocumentStore, Record, UserRepository
from shopfloor.domain.entities import User

_USER_TYPE = "user"


class DocumentUserRepository(UserRepository):
    """Implements the UserRepository port on top of a DocumentStore."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def _to_entity(self, doc: Record) -> User:
        """Map stored document → domain entity."""
        updated_at = doc.get("updatedAt")
        return User(
            id=doc[ID_FIELD],
            username=doc["username"],
            password_hash=doc["passwordHash"],
            role=doc.get("role", "admin"),
            created_at=datetime.fromisoformat(doc["createdAt"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    def _to_document(self, entity: User) -> Record:
        """Map domain entity → stored document."""
        doc: Record = {
            "type": _USER_TYPE,
            "username": entity.username,
            "passwordHash": entity.password_hash,
            "role": entity.role,
            "createdAt": entity.created_at.isoformat(),
        }
        if entity.updated_at is not None:
            doc["updatedAt"] = entity.updated_at.isoformat()
        return doc

    async def get_by_username(self, username: str) -> User | None:
        doc = await self._store.find_one(type=_USER_TYPE, username=username)
        return self._to_entity(doc) if doc else None

    async def create(self, user: User) -> User:
        doc = await self._store.insert(self._to_document(user))
        return self._to_entity(doc)

    async def update(self, user: User) -> User:
        if user.id is None:
            raise ValueError("Cannot update a user that was never stored")
        doc = await self._store.update_by_id(user.id, self._to_document(user))
        if doc is None:
            raise ValueError(f"User {user.id} not found in store")
        return self._to_entity(doc)
