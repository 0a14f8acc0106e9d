"""Authorization port — decides whether a caller-supplied key grants a scope."""

from abc import ABC, abstractmethod
from enum import Enum


class AccessScope(str, Enum):
    """Administrative capabilities that require a key."""

    SETUP = "setup"   # registering new personnel
    ADMIN = "admin"   # personnel changes, restore, import, factory reset


class AccessPolicy(ABC):
    """Pluggable authorization capability.

    The shared-secret implementation can be swapped for per-user tokens
    without touching any caller.
    """

    @abstractmethod
    def authorize(self, provided_key: str | None, scope: AccessScope) -> bool:
        ...
