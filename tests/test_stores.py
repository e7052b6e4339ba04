"""Tests for the SQLite, filesystem and Supabase stores."""

import json

import httpx
import pytest

from schedcast.broadcast import BroadcastCreate, BroadcastUpdate
from schedcast.config import settings
from schedcast.errors import StoreError
from schedcast.stores import LocalBlobStore, SQLiteRecordStore, SupabaseBlobStore


def _create(**overrides) -> BroadcastCreate:
    values = {
        "code": "ABC234",
        "owner_id": "user-123",
        "file_name": "Day_3_Shoot",
        "title": "Day 3 Shoot",
    }
    values.update(overrides)
    return BroadcastCreate(**values)


class TestSQLiteRecordStore:
    """Test SQLite broadcast record storage."""

    @pytest.mark.asyncio
    async def test_create_and_find(self, sqlite_record_store):
        created = await sqlite_record_store.create(_create(auto_update=True))

        found = await sqlite_record_store.find("user-123", "Day_3_Shoot")

        assert found is not None
        assert found.id == created.id
        assert found.code == "ABC234"
        assert found.auto_update is True
        assert found.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, sqlite_record_store):
        assert await sqlite_record_store.find("user-123", "Nope") is None
        assert await sqlite_record_store.get_by_code("ZZZZZZ") is None

    @pytest.mark.asyncio
    async def test_get_by_code(self, sqlite_record_store):
        created = await sqlite_record_store.create(_create())
        found = await sqlite_record_store.get_by_code("ABC234")
        assert found.id == created.id

    @pytest.mark.asyncio
    async def test_duplicate_schedule_rejected(self, sqlite_record_store):
        """A second record for the same owner and file name is refused."""
        await sqlite_record_store.create(_create())
        with pytest.raises(StoreError):
            await sqlite_record_store.create(_create(code="XYZ789"))

        # The store is still usable after the rollback
        other = await sqlite_record_store.create(_create(code="XYZ789", file_name="Other"))
        assert other.code == "XYZ789"

    @pytest.mark.asyncio
    async def test_duplicate_code_rejected(self, sqlite_record_store):
        await sqlite_record_store.create(_create())
        with pytest.raises(StoreError):
            await sqlite_record_store.create(_create(file_name="Other"))

    @pytest.mark.asyncio
    async def test_same_file_name_for_other_owner(self, sqlite_record_store):
        await sqlite_record_store.create(_create())
        other = await sqlite_record_store.create(_create(code="XYZ789", owner_id="user-456"))
        assert other.owner_id == "user-456"

    @pytest.mark.asyncio
    async def test_update_keeps_identity(self, sqlite_record_store):
        created = await sqlite_record_store.create(_create())

        updated = await sqlite_record_store.update(
            created.id, BroadcastUpdate(title="Day 3 Shoot", auto_update=True)
        )

        assert updated.id == created.id
        assert updated.code == created.code
        assert updated.auto_update is True
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_record(self, sqlite_record_store):
        with pytest.raises(StoreError):
            await sqlite_record_store.update(
                "missing", BroadcastUpdate(title="x", auto_update=False)
            )

    @pytest.mark.asyncio
    async def test_records_persist_across_connections(self, tmp_path):
        db_path = tmp_path / "persist.db"
        store = SQLiteRecordStore(db_path)
        await store.initialize()
        await store.create(_create())
        await store.close()

        reopened = SQLiteRecordStore(db_path)
        await reopened.initialize()
        try:
            assert (await reopened.get_by_code("ABC234")) is not None
        finally:
            await reopened.close()

    @pytest.mark.asyncio
    async def test_uninitialized_store_raises(self, tmp_path):
        store = SQLiteRecordStore(tmp_path / "unused.db")
        with pytest.raises(StoreError):
            await store.find("user-123", "Day_3_Shoot")


class TestSQLiteSettingsStore:
    """Test persisted settings."""

    @pytest.mark.asyncio
    async def test_get_missing(self, sqlite_settings_store):
        assert await sqlite_settings_store.get("broadcastAutoUpdate") is None

    @pytest.mark.asyncio
    async def test_set_and_overwrite(self, sqlite_settings_store):
        await sqlite_settings_store.set("broadcastAutoUpdate", "true")
        assert await sqlite_settings_store.get("broadcastAutoUpdate") == "true"

        await sqlite_settings_store.set("broadcastAutoUpdate", "false")
        assert await sqlite_settings_store.get("broadcastAutoUpdate") == "false"


class TestLocalBlobStore:
    """Test the filesystem blob store."""

    @pytest.fixture
    def store(self, tmp_path):
        return LocalBlobStore(root=tmp_path, bucket="schedule-files")

    @pytest.mark.asyncio
    async def test_upload_and_download(self, store, tmp_path):
        await store.upload("user-123/Day_3_Shoot.html", "<p>hi</p>")

        assert await store.download("user-123/Day_3_Shoot.html") == "<p>hi</p>"
        assert (tmp_path / "schedule-files" / "user-123" / "Day_3_Shoot.html").exists()

    @pytest.mark.asyncio
    async def test_upload_without_overwrite_refuses_existing(self, store):
        await store.upload("user-123/a.html", "one")
        with pytest.raises(StoreError):
            await store.upload("user-123/a.html", "two")
        assert await store.download("user-123/a.html") == "one"

    @pytest.mark.asyncio
    async def test_remove_then_upload_replaces(self, store):
        await store.upload("user-123/a.html", "one")
        await store.remove("user-123/a.html")
        await store.upload("user-123/a.html", "two")
        assert await store.download("user-123/a.html") == "two"

    @pytest.mark.asyncio
    async def test_overwrite(self, store):
        await store.upload("user-123/a.html", "one")
        await store.upload("user-123/a.html", "two", overwrite=True)
        assert await store.download("user-123/a.html") == "two"

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self, store):
        await store.remove("user-123/never.html")

    @pytest.mark.asyncio
    async def test_download_missing(self, store):
        assert await store.download("user-123/never.html") is None

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, store, tmp_path):
        await store.upload("user-123/a.html", "one")
        files = [p.name for p in (tmp_path / "schedule-files" / "user-123").iterdir()]
        assert files == ["a.html"]

    @pytest.mark.asyncio
    async def test_path_traversal_rejected(self, store):
        with pytest.raises(StoreError):
            await store.upload("../outside.html", "x")
        with pytest.raises(StoreError):
            await store.download("../../etc/passwd")


class TestSupabaseBlobStore:
    """Test the Supabase Storage client against a mock transport."""

    def _store(self, handler) -> SupabaseBlobStore:
        return SupabaseBlobStore(
            base_url="https://project.supabase.co/",
            api_key="service-key",
            bucket="schedule-files",
            transport=httpx.MockTransport(handler),
        )

    def test_requires_credentials(self, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", None)
        monkeypatch.setattr(settings, "supabase_key", None)
        with pytest.raises(ValueError):
            SupabaseBlobStore()

    @pytest.mark.asyncio
    async def test_upload_sends_headers(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"Key": "schedule-files/user-123/a.html"})

        await self._store(handler).upload("user-123/a.html", "<p>hi</p>", cache_control="60")

        [request] = requests
        assert request.method == "POST"
        assert str(request.url) == (
            "https://project.supabase.co/storage/v1/object/schedule-files/user-123/a.html"
        )
        assert request.headers["cache-control"] == "max-age=60"
        assert request.headers["content-type"] == "text/html"
        assert request.headers["x-upsert"] == "false"
        assert request.headers["authorization"] == "Bearer service-key"
        assert request.content == b"<p>hi</p>"

    @pytest.mark.asyncio
    async def test_upload_conflict_is_store_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"error": "Duplicate", "message": "The resource already exists"})

        with pytest.raises(StoreError):
            await self._store(handler).upload("user-123/a.html", "x")

    @pytest.mark.asyncio
    async def test_upload_network_error_is_store_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(StoreError):
            await self._store(handler).upload("user-123/a.html", "x")

    @pytest.mark.asyncio
    async def test_remove_sends_prefixes(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=[])

        await self._store(handler).remove("user-123/a.html")

        [request] = requests
        assert request.method == "DELETE"
        assert str(request.url) == "https://project.supabase.co/storage/v1/object/schedule-files"
        assert json.loads(request.content) == {"prefixes": ["user-123/a.html"]}

    @pytest.mark.asyncio
    async def test_remove_missing_object_is_ignored(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Object not found"})

        await self._store(handler).remove("user-123/a.html")

    @pytest.mark.asyncio
    async def test_remove_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal error")

        with pytest.raises(StoreError):
            await self._store(handler).remove("user-123/a.html")

    @pytest.mark.asyncio
    async def test_download(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/a.html"):
                return httpx.Response(200, text="<p>hi</p>")
            return httpx.Response(400, json={"message": "Object not found"})

        store = self._store(handler)
        assert await store.download("user-123/a.html") == "<p>hi</p>"
        assert await store.download("user-123/missing.html") is None
