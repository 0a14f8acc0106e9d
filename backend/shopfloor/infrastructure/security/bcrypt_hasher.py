"""bcrypt password hashing, run off the event loop."""

import asyncio

import bcrypt

from shopfloor.application.interfaces import PasswordHasher

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher(PasswordHasher):

    def __init__(self, rounds: int = 10):
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, _encode(password), bcrypt.gensalt(rounds=self._rounds)
        )
        return hashed.decode("ascii")

    async def verify(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(
                bcrypt.checkpw, _encode(password), password_hash.encode("ascii")
            )
        except ValueError:
            # Malformed stored hash
            return False
