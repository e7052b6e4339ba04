"""Broadcast identity: file names, share codes and record lookup."""

import logging
import re
import secrets
from typing import TYPE_CHECKING, Optional

from ..errors import AuthError
from .models import BroadcastContext, BroadcastRecord

if TYPE_CHECKING:
    from ..stores.base import RecordStore

logger = logging.getLogger(__name__)

# Uppercase letters and digits without I, O, 0 and 1
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def derive_file_name(title: str) -> str:
    """Map a title to its storage-safe file name, e.g. "Q1 Launch!" -> "Q1_Launch_"."""
    return _UNSAFE_CHARS.sub("_", title)


def generate_code(length: int = CODE_LENGTH) -> str:
    """Generate a random share code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class IdentityResolver:
    """Finds the single broadcast record belonging to a schedule."""

    def __init__(self, record_store: "RecordStore", context: BroadcastContext):
        self.record_store = record_store
        self.context = context

    def cached(self, owner_id: str, file_name: str) -> Optional[BroadcastRecord]:
        """Return the session's cached record if it belongs to this schedule."""
        record = self.context.current_broadcast
        if record and record.owner_id == owner_id and record.file_name == file_name:
            return record
        return None

    async def resolve(self, owner_id: str, file_name: str) -> Optional[BroadcastRecord]:
        """
        Look up the existing record for ``(owner_id, file_name)``.

        The session cache is consulted first; the record store is only
        queried on a cache miss. Returns None when the schedule has never
        been published.
        """
        if not owner_id:
            raise AuthError("No authenticated user")

        record = self.cached(owner_id, file_name)
        if record is not None:
            logger.debug(f"Using cached broadcast {record.code} for {file_name}")
            return record

        record = await self.record_store.find(owner_id, file_name)
        if record is not None:
            logger.debug(f"Found existing broadcast {record.code} for {file_name}")
        return record
