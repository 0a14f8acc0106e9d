"""API tests for snapshot maintenance and live database inspection."""

import asyncio
import io
import zipfile

import pytest
from httpx import ASGITransport, AsyncClient

from shopfloor.main import lifespan


async def _create_pallet(client: AsyncClient, code: str) -> dict:
    response = await client.post("/pallets", json={"code": code, "x": 1, "y": 2})
    assert response.status_code == 201
    return response.json()["data"]


def _admin(app) -> dict[str, str]:
    return {"X-Admin-Key": app.state.container.settings.admin_key}


@pytest.mark.asyncio
async def test_trigger_then_list(client):
    await _create_pallet(client, "P-1")

    response = await client.post("/maintenance/backups/trigger")
    assert response.status_code == 200
    details = response.json()["details"]
    assert details["versionName"] == "DB_v001"
    assert details["activeVersions"] == ["DB_v001"]

    listing = (await client.get("/maintenance/backups")).json()
    assert listing["status"] == "success"
    assert listing["config"] == {"prefix": "DB_v", "maxBackups": 3}
    [version] = listing["data"]
    assert version["versionName"] == "DB_v001"
    assert "pallets.db" in version["files"]
    assert "application.db" not in version["files"]
    assert version["fileCount"] == len(version["files"])
    assert version["sizeFormatted"].endswith(" KB")


@pytest.mark.asyncio
async def test_startup_snapshot_is_taken(app_factory):
    app = await app_factory(backup_on_startup=True)
    settings = app.state.container.settings
    assert (settings.backup_dir / "DB_v001").is_dir()


@pytest.mark.asyncio
async def test_startup_survives_failed_snapshot(app_factory, tmp_path):
    blocked = tmp_path / "blocked"
    blocked.write_text("")
    app = await app_factory(backup_on_startup=True, backup_dir=blocked)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/pallets")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_rotation_through_api(client):
    for _ in range(5):
        await client.post("/maintenance/backups/trigger")

    names = [v["versionName"] for v in (await client.get("/maintenance/backups")).json()["data"]]
    assert names == ["DB_v005", "DB_v004", "DB_v003"]


@pytest.mark.asyncio
async def test_inspect_backup_file(client):
    await _create_pallet(client, "P-1")
    await client.post("/maintenance/backups/trigger")

    response = await client.get("/maintenance/backups/DB_v001/files/pallets.db")

    assert response.status_code == 200
    body = response.json()
    assert body["fileName"] == "pallets.db"
    assert body["data"][0]["code"] == "P-1"


@pytest.mark.asyncio
async def test_inspect_protected_backup_file_is_forbidden(client):
    response = await client.get("/maintenance/backups/DB_v003/files/application.db")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_inspect_missing_backup_file_is_not_found(client):
    await client.post("/maintenance/backups/trigger")
    response = await client.get("/maintenance/backups/DB_v001/files/nothing.db")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_restore_requires_admin_key(client, restarter):
    await client.post("/maintenance/backups/trigger")

    response = await client.post(
        "/maintenance/backups/DB_v001/restore", headers={"X-Admin-Key": "wrong"}
    )

    assert response.status_code == 401
    assert restarter.reasons == []


@pytest.mark.asyncio
async def test_restore_schedules_restart(app, client, restarter):
    await _create_pallet(client, "P-1")
    await client.post("/maintenance/backups/trigger")

    response = await client.post("/maintenance/backups/DB_v001/restore", headers=_admin(app))

    assert response.status_code == 200
    body = response.json()
    assert body["refresh"] == "restart"
    assert "pallets.db" in body["filesRestored"]
    assert restarter.reasons == ["restore of DB_v001"]


@pytest.mark.asyncio
async def test_restore_in_reload_mode_refreshes_records(app_factory, restarter):
    app = await app_factory(refresh_mode="reload")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await _create_pallet(client, "P-1")
        await client.post("/maintenance/backups/trigger")
        await _create_pallet(client, "P-2")

        response = await client.post("/maintenance/backups/DB_v001/restore", headers=_admin(app))
        assert response.status_code == 200
        assert response.json()["refresh"] == "reload"

        pallets = (await client.get("/pallets")).json()["data"]

    assert [p["code"] for p in pallets] == ["P-1"]
    assert restarter.reasons == []


@pytest.mark.asyncio
async def test_restore_unknown_version(app, client):
    response = await client.post("/maintenance/backups/DB_v404/restore", headers=_admin(app))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_download_streams_zip(client):
    await _create_pallet(client, "P-1")
    await client.post("/maintenance/backups/trigger")

    response = await client.get("/maintenance/backups/DB_v001/download")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert "DB_v001.zip" in response.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert "pallets.db" in archive.namelist()
        assert "application.db" not in archive.namelist()


@pytest.mark.asyncio
async def test_download_unknown_version(client):
    response = await client.get("/maintenance/backups/DB_v404/download")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_restore_from_zip(app, client, restarter):
    await _create_pallet(client, "P-1")
    await client.post("/maintenance/backups/trigger")
    archive = (await client.get("/maintenance/backups/DB_v001/download")).content

    response = await client.post(
        "/maintenance/backups/restore-from-zip",
        files={"backupZip": ("DB_v001.zip", archive, "application/zip")},
        headers=_admin(app),
    )

    assert response.status_code == 200
    assert "pallets.db" in response.json()["filesRestored"]
    assert restarter.reasons == ["import of DB_v001.zip"]


@pytest.mark.asyncio
async def test_restore_from_zip_rejects_traversal(app, client, restarter):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("../escape.db", b"{}\n")

    response = await client.post(
        "/maintenance/backups/restore-from-zip",
        files={"backupZip": ("evil.zip", buffer.getvalue(), "application/zip")},
        headers=_admin(app),
    )

    assert response.status_code == 400
    assert restarter.reasons == []


@pytest.mark.asyncio
async def test_restore_from_zip_requires_file_and_key(app, client):
    no_key = await client.post(
        "/maintenance/backups/restore-from-zip",
        files={"backupZip": ("a.zip", b"x", "application/zip")},
    )
    no_file = await client.post("/maintenance/backups/restore-from-zip", headers=_admin(app))

    assert no_key.status_code == 401
    assert no_file.status_code == 400


@pytest.mark.asyncio
async def test_delete_backup(client):
    await client.post("/maintenance/backups/trigger")

    assert (await client.delete("/maintenance/backups/DB_v001")).status_code == 200
    assert (await client.delete("/maintenance/backups/DB_v001")).status_code == 404


@pytest.mark.asyncio
async def test_delete_refuses_non_prefixed_directory(app, client):
    backup_dir = app.state.container.settings.backup_dir
    (backup_dir / "keepme").mkdir(parents=True)

    response = await client.delete("/maintenance/backups/keepme")

    assert response.status_code == 404
    assert (backup_dir / "keepme").is_dir()


@pytest.mark.asyncio
async def test_live_database_listing_and_inspection(client):
    await _create_pallet(client, "P-1")

    files = (await client.get("/maintenance/database")).json()["data"]
    names = [f["name"] for f in files]
    assert "application.db" not in names
    assert "pallets.db" in names

    body = (await client.get("/maintenance/database/pallets.db")).json()
    assert body["data"][0]["code"] == "P-1"
    assert body["meta"] == {"totalLines": 1, "showingLast": 1, "truncated": False}


@pytest.mark.asyncio
async def test_live_protected_file_is_forbidden(client):
    response = await client.get("/maintenance/database/application.db")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_factory_reset(app, client):
    await _create_pallet(client, "P-1")
    key = app.state.container.settings.admin_key

    denied = await client.post("/maintenance/database/factory-reset", json={"key": "nope"})
    assert denied.status_code == 401

    response = await client.post("/maintenance/database/factory-reset", json={"key": key})
    assert response.status_code == 200
    assert response.json()["collectionsCleared"] == 6
    assert (await client.get("/pallets")).json()["data"] == []


@pytest.mark.asyncio
async def test_restore_from_zip_with_undecodable_bytes_still_loads(app_factory, restarter):
    app = await app_factory(refresh_mode="reload")
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("pallets.db", b'{"_id":"a","name":"caf\xe9"}\n{"_id":["x"],"n":1}\n')

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/maintenance/backups/restore-from-zip",
            files={"backupZip": ("legacy.zip", buffer.getvalue(), "application/zip")},
            headers=_admin(app),
        )
        assert response.status_code == 200
        pallets = (await client.get("/pallets")).json()["data"]

    assert [p["_id"] for p in pallets] == ["a"]
    assert restarter.reasons == []
    # What a restarted process does on boot
    await app.state.container.registry.load_all()


@pytest.mark.asyncio
async def test_lifespan_runs_periodic_compaction(app_factory):
    app = await app_factory(compaction_interval_seconds=0.01)
    pallets = app.state.container.registry.get("pallets")

    async with lifespan(app):
        record = await pallets.insert({"code": "P-1"})
        await pallets.update_by_id(record["_id"], {"code": "P-2"})
        for _ in range(100):
            if pallets.stale_lines == 0:
                break
            await asyncio.sleep(0.01)

    assert pallets.stale_lines == 0
    assert pallets.file_path.read_text().count("\n") == 1
