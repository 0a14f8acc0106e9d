"""Application service that enforces key-gated administrative scopes."""

import logging

from shopfloor.application.interfaces import AccessPolicy, AccessScope
from shopfloor.domain.exceptions import AccessDeniedError

logger = logging.getLogger(__name__)


class AccessGuard:
    """Turns a policy decision into an AccessDeniedError.

    Nothing logged or raised here ever contains the expected key.
    """

    def __init__(self, policy: AccessPolicy):
        self._policy = policy

    def require(self, provided_key: str | None, scope: AccessScope) -> None:
        if not self._policy.authorize(provided_key, scope):
            logger.warning("Rejected request for %s scope", scope.value)
            raise AccessDeniedError(scope.value)
