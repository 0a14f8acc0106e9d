"""API test fixtures — an app per test on its own directories, never restarting."""

import pytest
from httpx import ASGITransport, AsyncClient

from shopfloor.application.interfaces import ProcessRestarter
from shopfloor.main import create_app


class RecordingRestarter(ProcessRestarter):

    def __init__(self):
        self.reasons: list[str] = []

    async def restart(self, reason: str) -> None:
        self.reasons.append(reason)


@pytest.fixture
def restarter() -> RecordingRestarter:
    return RecordingRestarter()


@pytest.fixture
def app_factory(settings_factory, restarter):
    async def make(**overrides):
        app = create_app(settings_factory(**overrides), restarter=restarter)
        # ASGITransport does not run the lifespan
        await app.state.container.startup()
        return app

    return make


@pytest.fixture
async def app(app_factory):
    return await app_factory()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
