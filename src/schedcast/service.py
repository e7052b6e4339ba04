"""Broadcast service wiring stores, session state and the coordinator."""

import asyncio
import logging
from typing import Optional

from .broadcast import (
    AutoPublishHook,
    BroadcastContext,
    BroadcastRecord,
    HookResult,
    PublishCoordinator,
    PublishOptions,
    PublishResult,
    SessionState,
    snapshot_path,
    viewer_url,
)
from .config import settings
from .stores import (
    AuthProvider,
    BlobStore,
    LocalBlobStore,
    RecordStore,
    SettingsStore,
    SQLiteRecordStore,
    SQLiteSettingsStore,
    StaticAuthProvider,
    SupabaseBlobStore,
)
from .table import FileSourceProvider, InlineSourceProvider, SourceDocumentProvider

logger = logging.getLogger(__name__)


def create_blob_store() -> BlobStore:
    """Create the blob store selected by configuration."""
    if settings.blob_backend == "supabase":
        return SupabaseBlobStore()
    if settings.blob_backend != "local":
        raise ValueError(f"Unknown BLOB_BACKEND: {settings.blob_backend!r}")
    return LocalBlobStore()


def create_source() -> SourceDocumentProvider:
    """Create the configured table source (an editor export, if one is set)."""
    if settings.source_path:
        return FileSourceProvider(settings.source_path)
    return InlineSourceProvider(None)


class BroadcastService:
    """Publishing entry point used by the API and the CLI."""

    def __init__(
        self,
        auth: Optional[AuthProvider] = None,
        record_store: Optional[RecordStore] = None,
        blob_store: Optional[BlobStore] = None,
        settings_store: Optional[SettingsStore] = None,
        source: Optional[SourceDocumentProvider] = None,
        context: Optional[BroadcastContext] = None,
    ):
        self.auth = auth or StaticAuthProvider(settings.broadcast_user_id)
        self.record_store = record_store or SQLiteRecordStore()
        self.blob_store = blob_store or create_blob_store()
        self.settings_store = settings_store or SQLiteSettingsStore()
        self.context = context or BroadcastContext()

        self.coordinator = PublishCoordinator(
            auth=self.auth,
            record_store=self.record_store,
            blob_store=self.blob_store,
            source=source or create_source(),
            context=self.context,
        )
        self.session = SessionState(self.settings_store, self.context)
        self.hook = AutoPublishHook(self.coordinator, self.session)
        self._pending: set[asyncio.Task] = set()

    async def initialize(self):
        """Open the stores and load the persisted session flag."""
        for store in (self.record_store, self.settings_store):
            initialize = getattr(store, "initialize", None)
            if initialize is not None:
                await initialize()
        await self.session.load()

    async def shutdown(self):
        """Wait for pending auto-publishes and close the stores."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        for store in (self.record_store, self.settings_store):
            close = getattr(store, "close", None)
            if close is not None:
                await close()

    async def publish(
        self,
        options: Optional[PublishOptions] = None,
        source: Optional[SourceDocumentProvider] = None,
    ) -> PublishResult:
        return await self.coordinator.publish(options, source=source)

    async def refresh(self, source: Optional[SourceDocumentProvider] = None) -> PublishResult:
        """Re-publish now, keeping auto-update in line with the session flag."""
        return await self.coordinator.publish(
            PublishOptions(auto_update=self.session.is_enabled()), source=source
        )

    def is_auto_publish_enabled(self) -> bool:
        return self.session.is_enabled()

    async def set_auto_publish_enabled(self, enabled: bool) -> None:
        await self.session.set_enabled(enabled)

    async def on_save_hook(self) -> HookResult:
        """Run the auto-publish hook after a successful save."""
        return await self.hook.on_save()

    def schedule_on_save(self) -> asyncio.Task:
        """Fire-and-forget variant of on_save_hook for the save workflow."""
        task = asyncio.create_task(self.hook.on_save())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def lookup(self, code: str) -> Optional[tuple[BroadcastRecord, Optional[str]]]:
        """
        Find a broadcast by share code.

        Returns the record and its snapshot HTML (None if the body is gone),
        or None if no broadcast has this code.
        """
        record = await self.record_store.get_by_code(code.strip().upper())
        if record is None:
            return None
        body = await self.blob_store.download(snapshot_path(record.owner_id, record.file_name))
        return record, body

    def url_for(self, code: str) -> str:
        return viewer_url(code, self.coordinator.viewer_base_url)
