"""SQLite-backed broadcast record and settings stores."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiosqlite

from ..broadcast.models import BroadcastCreate, BroadcastRecord, BroadcastUpdate
from ..config import settings
from ..errors import StoreError
from .base import RecordStore, SettingsStore

logger = logging.getLogger(__name__)


class _SQLiteStore:
    """Connection lifecycle shared by the SQLite stores."""

    schema = ""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path or settings.database_path)
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self):
        """Initialize the database and create tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(str(self.db_path))
        await self._connection.executescript(self.schema)
        await self._connection.commit()
        logger.info(f"{type(self).__name__} initialized at {self.db_path}")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StoreError(f"{type(self).__name__} is not initialized")
        return self._connection


class SQLiteRecordStore(_SQLiteStore, RecordStore):
    """Broadcast records with database-enforced uniqueness per schedule and code."""

    schema = """
        CREATE TABLE IF NOT EXISTS broadcasts (
            id TEXT PRIMARY KEY,
            code TEXT NOT NULL UNIQUE,
            user_id TEXT NOT NULL,
            file_name TEXT NOT NULL,
            title TEXT NOT NULL,
            auto_update INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE(user_id, file_name)
        );

        CREATE INDEX IF NOT EXISTS idx_broadcasts_owner
            ON broadcasts(user_id, file_name);
        """

    _columns = "id, code, user_id, file_name, title, auto_update, created_at, updated_at"

    async def find(self, owner_id: str, file_name: str) -> Optional[BroadcastRecord]:
        try:
            async with self.connection.execute(
                f"SELECT {self._columns} FROM broadcasts WHERE user_id = ? AND file_name = ?",
                (owner_id, file_name),
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Broadcast lookup failed: {e}") from e
        return self._row_to_record(row) if row else None

    async def get_by_code(self, code: str) -> Optional[BroadcastRecord]:
        try:
            async with self.connection.execute(
                f"SELECT {self._columns} FROM broadcasts WHERE code = ?", (code,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Broadcast lookup failed: {e}") from e
        return self._row_to_record(row) if row else None

    async def create(self, fields: BroadcastCreate) -> BroadcastRecord:
        now = datetime.now(timezone.utc)
        record = BroadcastRecord(
            id=str(uuid.uuid4()),
            code=fields.code,
            owner_id=fields.owner_id,
            file_name=fields.file_name,
            title=fields.title,
            auto_update=fields.auto_update,
            created_at=now,
            updated_at=now,
        )
        try:
            await self.connection.execute(
                f"INSERT INTO broadcasts ({self._columns}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.id,
                    record.code,
                    record.owner_id,
                    record.file_name,
                    record.title,
                    1 if record.auto_update else 0,
                    record.created_at.isoformat(),
                    record.updated_at.isoformat(),
                ),
            )
            await self.connection.commit()
        except aiosqlite.IntegrityError as e:
            await self.connection.rollback()
            raise StoreError(
                f"Broadcast already exists for {fields.owner_id}/{fields.file_name} "
                f"or code {fields.code} is taken: {e}"
            ) from e
        except aiosqlite.Error as e:
            raise StoreError(f"Broadcast create failed: {e}") from e

        logger.info(f"Created broadcast {record.code} for {record.owner_id}/{record.file_name}")
        return record

    async def update(self, record_id: str, fields: BroadcastUpdate) -> BroadcastRecord:
        try:
            cursor = await self.connection.execute(
                """
                UPDATE broadcasts SET title = ?, auto_update = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    fields.title,
                    1 if fields.auto_update else 0,
                    fields.updated_at.isoformat(),
                    record_id,
                ),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Broadcast update failed: {e}") from e

        if cursor.rowcount == 0:
            raise StoreError(f"Broadcast {record_id} not found")

        try:
            async with self.connection.execute(
                f"SELECT {self._columns} FROM broadcasts WHERE id = ?", (record_id,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Broadcast lookup failed: {e}") from e
        if row is None:
            raise StoreError(f"Broadcast {record_id} not found")
        return self._row_to_record(row)

    def _row_to_record(self, row) -> BroadcastRecord:
        return BroadcastRecord(
            id=row[0],
            code=row[1],
            owner_id=row[2],
            file_name=row[3],
            title=row[4],
            auto_update=bool(row[5]),
            created_at=datetime.fromisoformat(row[6]),
            updated_at=datetime.fromisoformat(row[7]),
        )


class SQLiteSettingsStore(_SQLiteStore, SettingsStore):
    """Key-value settings persisted across restarts."""

    schema = """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """

    async def get(self, key: str) -> Optional[str]:
        try:
            async with self.connection.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Settings read failed: {e}") from e
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        try:
            await self.connection.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                (key, value),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Settings write failed: {e}") from e
