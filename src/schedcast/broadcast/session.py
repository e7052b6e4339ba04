"""Auto-publish toggle and the post-save hook."""

import logging
from typing import TYPE_CHECKING

from ..errors import BroadcastError, StoreError
from .models import BroadcastContext, HookOutcome, HookResult, PublishOptions

if TYPE_CHECKING:
    from ..stores.base import SettingsStore
    from .coordinator import PublishCoordinator

logger = logging.getLogger(__name__)

AUTO_PUBLISH_KEY = "broadcastAutoUpdate"


class SessionState:
    """The persisted auto-publish flag, mirrored into the session context."""

    def __init__(self, settings_store: "SettingsStore", context: BroadcastContext):
        self.settings_store = settings_store
        self.context = context

    async def load(self) -> bool:
        """Read the persisted flag. Missing or unreadable values mean off."""
        try:
            value = await self.settings_store.get(AUTO_PUBLISH_KEY)
        except StoreError as e:
            logger.warning(f"Could not read auto-publish setting, defaulting to off: {e}")
            value = None

        self.context.auto_publish_enabled = value is not None and value.strip().lower() == "true"
        logger.info(f"Broadcast session loaded, auto-update: {self.context.auto_publish_enabled}")
        return self.context.auto_publish_enabled

    def is_enabled(self) -> bool:
        return self.context.auto_publish_enabled

    async def set_enabled(self, enabled: bool) -> None:
        """Persist the flag, then apply it. A failed write leaves the flag unchanged."""
        await self.settings_store.set(AUTO_PUBLISH_KEY, "true" if enabled else "false")
        self.context.auto_publish_enabled = bool(enabled)


class AutoPublishHook:
    """
    Re-publishes after every successful save when auto-publish is on.

    The hook never raises: failures are logged and reported in the
    returned HookResult so the save workflow is never interrupted.
    """

    def __init__(self, coordinator: "PublishCoordinator", session: SessionState):
        self.coordinator = coordinator
        self.session = session

    async def on_save(self) -> HookResult:
        if not self.session.is_enabled():
            return HookResult(outcome=HookOutcome.SKIPPED)

        logger.info("Auto-broadcasting...")
        try:
            result = await self.coordinator.publish(PublishOptions(auto_update=True))
        except BroadcastError as e:
            logger.error(f"Auto-broadcast failed ({e.kind}): {e}")
            return HookResult(outcome=HookOutcome.FAILED, kind=e.kind, message=str(e))
        except Exception as e:
            logger.exception("Auto-broadcast failed unexpectedly")
            return HookResult(outcome=HookOutcome.FAILED, kind="unexpected", message=str(e))

        return HookResult(outcome=HookOutcome.OK, result=result)
