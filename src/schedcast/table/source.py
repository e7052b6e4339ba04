"""Providers that give the snapshot pipeline access to the live table."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import CaptureError
from .models import EditorState, SourceDocument

logger = logging.getLogger(__name__)


class SourceDocumentProvider(ABC):
    """Abstract access to the editor's table and state."""

    @abstractmethod
    def get_document(self) -> Optional[SourceDocument]:
        """Return the current table, or None if it cannot be located."""
        pass

    @abstractmethod
    def read_state(self) -> EditorState:
        """
        Return column visibility and project metadata.

        Missing state reads as an empty EditorState. State that is present
        but malformed raises CaptureError.
        """
        pass

    def load(self) -> tuple[Optional[SourceDocument], EditorState]:
        """Return the table and editor state as one consistent pair."""
        return self.get_document(), self.read_state()


class InlineSourceProvider(SourceDocumentProvider):
    """Provider over models already held in memory (posted payloads, fixtures)."""

    def __init__(
        self,
        document: Optional[SourceDocument],
        state: Optional[EditorState] = None,
    ):
        self.document = document
        self.state = state or EditorState()

    def get_document(self) -> Optional[SourceDocument]:
        return self.document

    def read_state(self) -> EditorState:
        return self.state


class FileSourceProvider(SourceDocumentProvider):
    """
    Provider backed by an editor export on disk.

    The file is a JSON object with a ``document`` entry (the table model) and an
    optional ``state`` entry (columns and project metadata). The file is re-read
    on every call so each publish sees the latest export; ``load()`` reads it
    once so the table and state always come from the same export.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Optional[dict]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.error(f"No schedule export found at {self.path}")
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read schedule export {self.path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.error(f"Schedule export {self.path} is not a JSON object")
            return None
        return data

    def _parse_document(self, data: Optional[dict]) -> Optional[SourceDocument]:
        if data is None or data.get("document") is None:
            return None
        try:
            return SourceDocument.model_validate(data["document"])
        except ValidationError as e:
            logger.error(f"Malformed schedule table in {self.path}: {e}")
            return None

    def _parse_state(self, data: Optional[dict]) -> EditorState:
        if data is None or data.get("state") is None:
            return EditorState()
        try:
            return EditorState.model_validate(data["state"])
        except ValidationError as e:
            raise CaptureError(f"Malformed editor state in {self.path}: {e}") from e

    def get_document(self) -> Optional[SourceDocument]:
        return self._parse_document(self._load())

    def read_state(self) -> EditorState:
        return self._parse_state(self._load())

    def load(self) -> tuple[Optional[SourceDocument], EditorState]:
        data = self._load()
        return self._parse_document(data), self._parse_state(data)
