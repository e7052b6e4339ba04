"""Interfaces of the collaborators the publish pipeline talks to."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..broadcast.models import BroadcastCreate, BroadcastRecord, BroadcastUpdate


@dataclass
class User:
    """An authenticated user."""

    id: str


class AuthProvider(ABC):
    """Source of the current user's identity."""

    @abstractmethod
    def is_authenticated(self) -> bool:
        pass

    @abstractmethod
    def get_current_user(self) -> Optional[User]:
        pass


class RecordStore(ABC):
    """
    Durable storage for broadcast records.

    Implementations must reject a second record for the same
    ``(owner_id, file_name)`` pair, and must raise ``StoreError`` on failure.
    """

    @abstractmethod
    async def find(self, owner_id: str, file_name: str) -> Optional[BroadcastRecord]:
        """Find the record for a schedule, if one exists."""
        pass

    @abstractmethod
    async def create(self, fields: BroadcastCreate) -> BroadcastRecord:
        """Insert a new record."""
        pass

    @abstractmethod
    async def update(self, record_id: str, fields: BroadcastUpdate) -> BroadcastRecord:
        """Update a record in place and return it."""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[BroadcastRecord]:
        """Find a record by its share code."""
        pass


class BlobStore(ABC):
    """Object storage for snapshot bodies."""

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Remove an object. A missing object is not an error."""
        pass

    @abstractmethod
    async def upload(
        self,
        path: str,
        body: str,
        cache_control: str = "60",
        overwrite: bool = False,
        content_type: str = "text/html",
    ) -> None:
        """Upload an object. Raises StoreError if it exists and overwrite is False."""
        pass

    @abstractmethod
    async def download(self, path: str) -> Optional[str]:
        """Return an object's body, or None if it does not exist."""
        pass


class SettingsStore(ABC):
    """Persisted key-value settings."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        pass


class StaticAuthProvider(AuthProvider):
    """Auth provider with a fixed (possibly absent) user id."""

    def __init__(self, user_id: Optional[str] = None):
        self.user_id = user_id

    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def get_current_user(self) -> Optional[User]:
        if not self.user_id:
            return None
        return User(id=self.user_id)
