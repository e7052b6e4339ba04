"""Storage and identity collaborators for publishing."""

from .base import (
    User,
    AuthProvider,
    StaticAuthProvider,
    RecordStore,
    BlobStore,
    SettingsStore,
)
from .sqlite import SQLiteRecordStore, SQLiteSettingsStore
from .local import LocalBlobStore
from .supabase import SupabaseBlobStore

__all__ = [
    "User",
    "AuthProvider",
    "StaticAuthProvider",
    "RecordStore",
    "BlobStore",
    "SettingsStore",
    "SQLiteRecordStore",
    "SQLiteSettingsStore",
    "LocalBlobStore",
    "SupabaseBlobStore",
]
