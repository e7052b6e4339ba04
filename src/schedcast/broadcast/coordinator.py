"""Publish coordinator: snapshot, upload and record upsert."""

import logging
from typing import TYPE_CHECKING, Optional

from ..config import settings
from ..errors import AuthError, CaptureError, StoreError
from ..snapshot import SnapshotExtractor
from ..table.models import EditorState
from ..table.source import SourceDocumentProvider
from .identity import IdentityResolver, derive_file_name, generate_code
from .models import (
    BroadcastContext,
    BroadcastCreate,
    BroadcastUpdate,
    PublishOptions,
    PublishResult,
)

if TYPE_CHECKING:
    from ..stores.base import AuthProvider, BlobStore, RecordStore

logger = logging.getLogger(__name__)


def snapshot_path(owner_id: str, file_name: str) -> str:
    """Storage key of a schedule's snapshot body."""
    return f"{owner_id}/{file_name}.html"


def viewer_url(code: str, base_url: Optional[str] = None) -> str:
    """Public viewer URL for a share code."""
    return f"{base_url or settings.viewer_base_url}?c={code}"


class PublishCoordinator:
    """
    Publishes the schedule table as a broadcast.

    A publish captures a snapshot, uploads it under the schedule's storage
    key, then updates the schedule's broadcast record or creates one with a
    fresh share code. Any failure aborts the publish and is raised to the
    caller; nothing is retried here.
    """

    def __init__(
        self,
        auth: "AuthProvider",
        record_store: "RecordStore",
        blob_store: "BlobStore",
        source: SourceDocumentProvider,
        context: Optional[BroadcastContext] = None,
        extractor: Optional[SnapshotExtractor] = None,
        viewer_base_url: Optional[str] = None,
        default_title: Optional[str] = None,
        cache_control: Optional[str] = None,
    ):
        self.auth = auth
        self.record_store = record_store
        self.blob_store = blob_store
        self.source = source
        self.context = context or BroadcastContext()
        self.extractor = extractor or SnapshotExtractor()
        self.resolver = IdentityResolver(record_store, self.context)
        self.viewer_base_url = viewer_base_url or settings.viewer_base_url
        self.default_title = default_title or settings.default_title
        self.cache_control = cache_control or settings.cache_control

    def _owner_id(self) -> str:
        if not self.auth.is_authenticated():
            raise AuthError("Not authenticated")
        user = self.auth.get_current_user()
        if user is None or not user.id:
            raise AuthError("No user")
        return user.id

    def resolve_title(self, options: PublishOptions, state: EditorState) -> str:
        """Explicit title, then the project's title, then the default."""
        if options.title:
            return options.title
        project_title = state.project_meta.title
        if project_title:
            return project_title
        return self.default_title

    async def publish(
        self,
        options: Optional[PublishOptions] = None,
        source: Optional[SourceDocumentProvider] = None,
    ) -> PublishResult:
        """
        Publish the current schedule.

        Args:
            options: Title and auto-update overrides
            source: Table source for this publish (defaults to the configured one)

        Returns:
            PublishResult with the share code and viewer URL

        Raises:
            AuthError: No authenticated user; nothing was sent to the stores
            CaptureError: The table could not be captured; nothing was sent
            StoreError: A record or blob store call failed
        """
        options = options or PublishOptions()
        source = source or self.source

        owner_id = self._owner_id()

        document, state = source.load()
        if document is None:
            logger.error("No schedule table found")
            raise CaptureError("Could not capture table")
        snapshot = self.extractor.snapshot(document, state)

        title = self.resolve_title(options, state)
        file_name = derive_file_name(title)

        existing = await self.resolver.resolve(owner_id, file_name)
        code = existing.code if existing else generate_code()

        path = snapshot_path(owner_id, file_name)
        try:
            await self.blob_store.remove(path)
        except StoreError as e:
            logger.warning(f"Could not remove previous snapshot {path}: {e}")

        await self.blob_store.upload(
            path,
            snapshot.to_html(),
            cache_control=self.cache_control,
            overwrite=False,
        )

        if existing:
            auto_update = (
                options.auto_update if options.auto_update is not None else existing.auto_update
            )
            record = await self.record_store.update(
                existing.id, BroadcastUpdate(title=title, auto_update=auto_update)
            )
        else:
            record = await self.record_store.create(
                BroadcastCreate(
                    code=code,
                    owner_id=owner_id,
                    file_name=file_name,
                    title=title,
                    auto_update=bool(options.auto_update),
                )
            )

        self.context.current_broadcast = record
        logger.info(f"Pushed broadcast {record.code} ({title})")

        return PublishResult(
            code=record.code,
            url=viewer_url(record.code, self.viewer_base_url),
            title=title,
        )
