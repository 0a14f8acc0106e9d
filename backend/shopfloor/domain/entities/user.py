"""Domain entity — a personnel account stored in the application collection."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class User:
    """Core domain entity for an operator who can sign in."""

    username: str
    password_hash: str
    role: str = "admin"
    id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    def update(
        self,
        username: str | None = None,
        password_hash: str | None = None,
    ) -> None:
        """Rename and/or replace the password hash, refreshing updated_at."""
        if username is not None:
            self.username = username
        if password_hash is not None:
            self.password_hash = password_hash
        self.updated_at = datetime.now(timezone.utc)
