"""Schedule table model and source providers."""

from .models import (
    ColumnSpec,
    ProjectMeta,
    EditorState,
    Node,
    ColumnDef,
    HeaderCell,
    Cell,
    Row,
    SourceDocument,
)
from .source import SourceDocumentProvider, InlineSourceProvider, FileSourceProvider

__all__ = [
    "ColumnSpec",
    "ProjectMeta",
    "EditorState",
    "Node",
    "ColumnDef",
    "HeaderCell",
    "Cell",
    "Row",
    "SourceDocument",
    "SourceDocumentProvider",
    "InlineSourceProvider",
    "FileSourceProvider",
]
