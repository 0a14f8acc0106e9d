"""Shared-secret authorization — one configured key per scope.

Known weakness kept from the original deployment: a single key per scope
instead of per-user credentials. Swap in another AccessPolicy to change it.
"""

import hmac
from collections.abc import Mapping

from shopfloor.application.interfaces import AccessPolicy, AccessScope
from shopfloor.config import Settings


class SharedSecretAccessPolicy(AccessPolicy):

    def __init__(self, keys: Mapping[AccessScope, str]):
        self._keys = dict(keys)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SharedSecretAccessPolicy":
        return cls(
            {
                AccessScope.SETUP: settings.master_setup_key,
                AccessScope.ADMIN: settings.admin_key,
            }
        )

    def authorize(self, provided_key: str | None, scope: AccessScope) -> bool:
        expected = self._keys.get(scope, "")
        if not expected or not provided_key:
            return False
        return hmac.compare_digest(expected.encode("utf-8"), provided_key.encode("utf-8"))
