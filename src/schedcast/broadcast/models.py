"""Data models for broadcasts and publishing."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class BroadcastRecord(BaseModel):
    """The durable published identity of one schedule."""

    id: str
    code: str  # 6-character share code, fixed for the record's lifetime
    owner_id: str
    file_name: str  # Derived from the title; unique per owner
    title: str
    auto_update: bool = False
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class BroadcastCreate(BaseModel):
    """Fields for inserting a new broadcast record."""

    code: str
    owner_id: str
    file_name: str
    title: str
    auto_update: bool = False


class BroadcastUpdate(BaseModel):
    """Fields rewritten on every re-publish."""

    title: str
    auto_update: bool
    updated_at: datetime = Field(default_factory=_utc_now)


class PublishOptions(BaseModel):
    """Caller options for a publish."""

    title: Optional[str] = None
    auto_update: Optional[bool] = None


class PublishResult(BaseModel):
    """Shareable outcome of a successful publish."""

    code: str
    url: str
    title: str


@dataclass
class BroadcastContext:
    """Session-scoped publish state shared by coordinators and the auto-publish hook."""

    auto_publish_enabled: bool = False
    current_broadcast: Optional[BroadcastRecord] = None


class HookOutcome(str, Enum):
    """Outcome of an auto-publish hook invocation."""

    OK = "ok"
    SKIPPED = "skipped"  # Auto-publish is turned off
    FAILED = "failed"  # Publish failed; the error was logged, not raised


class HookResult(BaseModel):
    """Result of running the auto-publish hook after a save."""

    outcome: HookOutcome
    kind: Optional[str] = None  # "auth", "capture", "store" or "unexpected" on failure
    message: Optional[str] = None
    result: Optional[PublishResult] = None

    @property
    def ok(self) -> bool:
        return self.outcome == HookOutcome.OK
