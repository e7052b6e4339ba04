"""Error taxonomy for the publish pipeline."""


class BroadcastError(Exception):
    """Base class for publish failures surfaced to callers."""

    kind = "broadcast"


class AuthError(BroadcastError):
    """Raised when no authenticated identity is available."""

    kind = "auth"


class CaptureError(BroadcastError):
    """Raised when the schedule table cannot be captured."""

    kind = "capture"


class StoreError(BroadcastError):
    """Raised when a record or blob store operation fails."""

    kind = "store"
