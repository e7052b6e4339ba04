"""Broadcast identity, publishing and session state."""

from .models import (
    BroadcastRecord,
    BroadcastCreate,
    BroadcastUpdate,
    PublishOptions,
    PublishResult,
    BroadcastContext,
    HookOutcome,
    HookResult,
)
from .identity import (
    CODE_ALPHABET,
    CODE_LENGTH,
    IdentityResolver,
    derive_file_name,
    generate_code,
)
from .coordinator import PublishCoordinator, snapshot_path, viewer_url
from .session import AUTO_PUBLISH_KEY, AutoPublishHook, SessionState

__all__ = [
    "BroadcastRecord",
    "BroadcastCreate",
    "BroadcastUpdate",
    "PublishOptions",
    "PublishResult",
    "BroadcastContext",
    "HookOutcome",
    "HookResult",
    "CODE_ALPHABET",
    "CODE_LENGTH",
    "IdentityResolver",
    "derive_file_name",
    "generate_code",
    "PublishCoordinator",
    "snapshot_path",
    "viewer_url",
    "AUTO_PUBLISH_KEY",
    "AutoPublishHook",
    "SessionState",
]
