"""API tests for personnel registration, login and updates."""

import pytest


async def _register(client, app, username="ana", password="pw-123"):
    return await client.post(
        "/auth/register",
        json={
            "username": username,
            "password": password,
            "setupKey": app.state.container.settings.master_setup_key,
        },
    )


@pytest.mark.asyncio
async def test_register_and_login(app, client):
    response = await _register(client, app)
    assert response.status_code == 201
    assert response.json()["data"] == {"username": "ana"}

    login = await client.post("/auth/login", json={"username": "ana", "password": "pw-123"})
    assert login.status_code == 200
    assert login.json()["user"] == {"username": "ana", "role": "admin"}


@pytest.mark.asyncio
async def test_register_with_wrong_setup_key(client):
    response = await client.post(
        "/auth/register", json={"username": "ana", "password": "pw", "setupKey": "guess"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid Master Setup Key"


@pytest.mark.asyncio
async def test_register_duplicate(app, client):
    await _register(client, app)
    response = await _register(client, app)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_failures_are_generic(app, client):
    await _register(client, app)

    unknown = await client.post("/auth/login", json={"username": "zed", "password": "pw-123"})
    wrong = await client.post("/auth/login", json={"username": "ana", "password": "nope"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


@pytest.mark.asyncio
async def test_password_hash_is_stored_not_password(app, client):
    await _register(client, app)
    raw = (app.state.container.settings.storage_dir / "application.db").read_text()
    assert "pw-123" not in raw
    assert '"passwordHash":"$2' in raw


@pytest.mark.asyncio
async def test_update_personnel(app, client):
    await _register(client, app)
    key = app.state.container.settings.admin_key

    denied = await client.post(
        "/auth/update", json={"currentUsername": "ana", "newUsername": "anna", "key": "x"}
    )
    missing = await client.post(
        "/auth/update", json={"currentUsername": "ghost", "newPassword": "x", "key": key}
    )
    updated = await client.post(
        "/auth/update",
        json={"currentUsername": "ana", "newUsername": "anna", "newPassword": "fresh", "key": key},
    )

    assert denied.status_code == 401
    assert missing.status_code == 404
    assert updated.status_code == 200
    login = await client.post("/auth/login", json={"username": "anna", "password": "fresh"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_accepts_admin_header(app, client):
    await _register(client, app)
    response = await client.post(
        "/auth/update",
        json={"currentUsername": "ana", "newPassword": "fresh"},
        headers={"X-Admin-Key": app.state.container.settings.admin_key},
    )
    assert response.status_code == 200
