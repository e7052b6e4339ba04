"""Pytest configuration and shared fixtures."""

import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio

from schedcast.broadcast import (
    BroadcastContext,
    BroadcastCreate,
    BroadcastRecord,
    BroadcastUpdate,
    PublishCoordinator,
)
from schedcast.errors import StoreError
from schedcast.stores import (
    BlobStore,
    RecordStore,
    SettingsStore,
    SQLiteRecordStore,
    SQLiteSettingsStore,
    StaticAuthProvider,
)
from schedcast.table import (
    Cell,
    ColumnDef,
    ColumnSpec,
    EditorState,
    HeaderCell,
    InlineSourceProvider,
    Node,
    ProjectMeta,
    Row,
    SourceDocument,
)


class InMemoryRecordStore(RecordStore):
    """Record store fake that enforces the same uniqueness as the database."""

    def __init__(self):
        self.records: dict[str, BroadcastRecord] = {}
        self.calls: list[str] = []

    async def find(self, owner_id: str, file_name: str) -> Optional[BroadcastRecord]:
        self.calls.append("find")
        await asyncio.sleep(0)
        for record in self.records.values():
            if record.owner_id == owner_id and record.file_name == file_name:
                return record
        return None

    async def create(self, fields: BroadcastCreate) -> BroadcastRecord:
        self.calls.append("create")
        await asyncio.sleep(0)
        for record in self.records.values():
            if (record.owner_id, record.file_name) == (fields.owner_id, fields.file_name):
                raise StoreError("duplicate key value violates unique constraint")
            if record.code == fields.code:
                raise StoreError("duplicate code")
        record = BroadcastRecord(id=str(uuid.uuid4()), **fields.model_dump())
        self.records[record.id] = record
        return record

    async def update(self, record_id: str, fields: BroadcastUpdate) -> BroadcastRecord:
        self.calls.append("update")
        await asyncio.sleep(0)
        if record_id not in self.records:
            raise StoreError(f"Broadcast {record_id} not found")
        record = self.records[record_id].model_copy(update=fields.model_dump())
        self.records[record_id] = record
        return record

    async def get_by_code(self, code: str) -> Optional[BroadcastRecord]:
        self.calls.append("get_by_code")
        for record in self.records.values():
            if record.code == code:
                return record
        return None


class InMemoryBlobStore(BlobStore):
    """Blob store fake recording every call."""

    def __init__(self):
        self.objects: dict[str, str] = {}
        self.calls: list[tuple] = []
        self.fail_upload = False
        self.fail_remove = False

    async def remove(self, path: str) -> None:
        self.calls.append(("remove", path))
        await asyncio.sleep(0)
        if self.fail_remove:
            raise StoreError("remove failed")
        self.objects.pop(path, None)

    async def upload(self, path, body, cache_control="60", overwrite=False, content_type="text/html"):
        self.calls.append(("upload", path, cache_control, overwrite))
        await asyncio.sleep(0)
        if self.fail_upload:
            raise StoreError("upload failed")
        if path in self.objects and not overwrite:
            raise StoreError("The resource already exists")
        self.objects[path] = body

    async def download(self, path: str) -> Optional[str]:
        self.calls.append(("download", path))
        return self.objects.get(path)


class InMemorySettingsStore(SettingsStore):
    """Settings store fake."""

    def __init__(self, values: Optional[dict[str, str]] = None):
        self.values = dict(values or {})

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value


@pytest.fixture
def sample_document() -> SourceDocument:
    """A schedule table with control columns, editor affordances and row types."""
    keys = ["drag", "time", "scene", "notes", "sharpie", "actions"]
    return SourceDocument(
        attrs={"id": "scheduleTable"},
        columns=[ColumnDef(key=k, width="80px") for k in keys],
        headers=[
            HeaderCell(key="drag", label="", classes=["drag-cell"]),
            HeaderCell(key="time", label="Time"),
            HeaderCell(
                key="scene",
                label="Scene",
                children=[Node(tag="button", text="sort", classes=["sort-btn"])],
            ),
            HeaderCell(key="notes", label="Notes"),
            HeaderCell(key="sharpie", label="", classes=["sharpie"]),
            HeaderCell(key="actions", label="", attrs={"draggable": "true"}),
        ],
        rows=[
            Row(
                id="r1",
                row_type="CALLTIME",
                attrs={"draggable": "true"},
                cells=[
                    Cell(key="drag", classes=["drag-cell"], text="::"),
                    Cell(key="time", text="7:00 AM"),
                    Cell(key="scene", text="Crew call", style={"color": "#d32f2f"}),
                    Cell(key="notes", text="Coffee <hot>"),
                    Cell(key="sharpie", children=[Node(tag="canvas", classes=["sharpie"])]),
                    Cell(
                        key="actions",
                        classes=["actions-cell"],
                        children=[Node(tag="button", text="Delete")],
                    ),
                ],
            ),
            Row(
                id="r2",
                row_type="EVENT",
                complete=True,
                attrs={"draggable": "true", "onclick": "select(this)"},
                cells=[
                    Cell(key="time", text="8:00 AM", attrs={"contenteditable": "true"}),
                    Cell(
                        key="scene",
                        text="Scene 12",
                        children=[
                            Node(tag="input", attrs={"type": "checkbox"}),
                            Node(tag="img", attrs={"src": "thumb.png", "draggable": "true"}),
                        ],
                    ),
                    Cell(key="notes", text="Exterior"),
                ],
            ),
            Row(
                id="r3",
                cells=[
                    Cell(key="time", text="9:30 AM"),
                    Cell(
                        key="scene",
                        children=[
                            Node(
                                tag="div",
                                text="Scene 14",
                                children=[Node(tag="script", text="alert(1)")],
                            )
                        ],
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def editor_state() -> EditorState:
    """Editor state with the notes column excluded from print."""
    return EditorState(
        cols=[
            ColumnSpec(key="time", print=True),
            ColumnSpec(key="scene", print=True),
            ColumnSpec(key="notes", print=False),
        ],
        project_meta=ProjectMeta(title="Day 3 Shoot"),
    )


@pytest.fixture
def source(sample_document, editor_state) -> InlineSourceProvider:
    return InlineSourceProvider(sample_document, editor_state)


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def context() -> BroadcastContext:
    return BroadcastContext()


@pytest.fixture
def auth() -> StaticAuthProvider:
    return StaticAuthProvider("user-123")


@pytest.fixture
def coordinator(auth, record_store, blob_store, source, context) -> PublishCoordinator:
    return PublishCoordinator(
        auth=auth,
        record_store=record_store,
        blob_store=blob_store,
        source=source,
        context=context,
        viewer_base_url="https://viewer.example/",
    )


@pytest_asyncio.fixture
async def sqlite_record_store(tmp_path: Path) -> AsyncGenerator[SQLiteRecordStore, None]:
    """A SQLite record store in a temporary database."""
    store = SQLiteRecordStore(tmp_path / "test_broadcasts.db")
    await store.initialize()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def sqlite_settings_store(tmp_path: Path) -> AsyncGenerator[SQLiteSettingsStore, None]:
    """A SQLite settings store in a temporary database."""
    store = SQLiteSettingsStore(tmp_path / "test_settings.db")
    await store.initialize()
    yield store
    await store.close()


def _make_record(**overrides) -> BroadcastRecord:
    values = {
        "id": "rec-1",
        "code": "ABC234",
        "owner_id": "user-123",
        "file_name": "Day_3_Shoot",
        "title": "Day 3 Shoot",
        "auto_update": False,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return BroadcastRecord(**values)


@pytest.fixture
def make_record():
    """Factory for broadcast records with test defaults."""
    return _make_record
