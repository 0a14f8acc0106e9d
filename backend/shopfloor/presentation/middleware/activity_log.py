"""ASGI middleware that audits successful mutating requests.

For POST/PUT/PATCH/DELETE the JSON request body is captured as it is
read; once the response status is known and below 400, one LogEntry is
appended before the response body goes out. DELETE requests log their
path parameters instead of a body, and anything under an auth path is
redacted by the LogEntry itself.
"""

import json
import logging
from typing import Any

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shopfloor.application.services.activity_log_service import AUDITED_METHODS

logger = logging.getLogger(__name__)


class ActivityLogMiddleware:

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"].upper() not in AUDITED_METHODS:
            await self.app(scope, receive, send)
            return

        capture_body = _is_json(scope)
        body = bytearray()

        async def receive_wrapper() -> Message:
            message = await receive()
            if capture_body and message["type"] == "http.request":
                body.extend(message.get("body", b""))
            return message

        async def send_wrapper(message: Message) -> None:
            await send(message)
            if message["type"] == "http.response.start":
                await self._record(scope, message["status"], bytes(body))

        await self.app(scope, receive_wrapper, send_wrapper)

    async def _record(self, scope: Scope, status: int, body: bytes) -> None:
        service = scope["app"].state.container.activity_log
        if not service.should_record(scope["method"], status):
            return

        method = scope["method"].upper()
        if method == "DELETE":
            payload: Any = dict(scope.get("path_params", {}))
        else:
            payload = _decode_json(body)

        path = scope["path"]
        if scope.get("query_string"):
            path = f"{path}?{scope['query_string'].decode('latin-1')}"

        try:
            await service.record(method, path, payload, status)
        except OSError:
            logger.exception("Could not write activity log entry for %s %s", method, path)


def _is_json(scope: Scope) -> bool:
    for name, value in scope.get("headers", []):
        if name == b"content-type":
            return value.split(b";", 1)[0].strip().lower() == b"application/json"
    return False


def _decode_json(body: bytes) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None
