"""Snapshot extraction from the live schedule table."""

import logging
import re
from typing import Iterable, Optional

from ..table.models import EditorState, Node, SourceDocument
from ..table.source import SourceDocumentProvider
from .columns import suppressed_columns
from .models import Snapshot
from .render import render_table
from .styles import package_snapshot

logger = logging.getLogger(__name__)

# Elements allowed inside cells; anything else is dropped with its subtree
PRESENTATIONAL_TAGS = frozenset({
    "span", "div", "p", "br", "hr", "img",
    "b", "i", "u", "s", "strong", "em", "small", "mark", "sub", "sup",
    "ul", "ol", "li",
})

# Editor affordances that must not survive into a read-only snapshot
INTERACTIVE_CLASSES = frozenset({"drag-cell", "sharpie", "actions-cell"})
STRIPPED_ATTRIBUTES = frozenset({"draggable", "contenteditable", "srcdoc", "formaction"})
URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "srcset", "background", "poster"})
UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:")

_URL_IGNORED_CHARS = re.compile(r"[\x00-\x20]+")


def _is_interactive(classes: Iterable[str]) -> bool:
    return any(c in INTERACTIVE_CLASSES for c in classes)


def _is_unsafe_url(value: str) -> bool:
    # Browsers ignore whitespace and control characters inside the scheme
    normalized = _URL_IGNORED_CHARS.sub("", value).lower()
    return normalized.startswith(UNSAFE_URL_SCHEMES)


def _strip_attributes(attrs: dict[str, str]) -> None:
    for name in list(attrs):
        lowered = name.lower()
        if lowered in STRIPPED_ATTRIBUTES or lowered.startswith("on"):
            del attrs[name]
        elif lowered in URL_ATTRIBUTES and _is_unsafe_url(attrs[name]):
            del attrs[name]


def _sanitize_nodes(nodes: list[Node]) -> list[Node]:
    kept = []
    for node in nodes:
        if node.tag.lower() not in PRESENTATIONAL_TAGS or _is_interactive(node.classes):
            continue
        _strip_attributes(node.attrs)
        node.children = _sanitize_nodes(node.children)
        kept.append(node)
    return kept


class SnapshotExtractor:
    """
    Builds read-only snapshots of the schedule table.

    Extraction always works on a deep copy of the source document:
    suppressed columns are hidden (kept in the tree, removed from layout),
    interactive controls are removed, and drag/edit markers are stripped.
    """

    def prepare(self, document: SourceDocument, suppressed: Iterable[str]) -> SourceDocument:
        """Return a sanitized, independent copy of the document."""
        clone = document.model_copy(deep=True)
        hidden = set(suppressed)

        for column in clone.columns:
            if column.key in hidden:
                column.style["width"] = "0"
        for header in clone.headers:
            if header.key in hidden:
                header.style["display"] = "none"
        for row in clone.rows:
            for cell in row.cells:
                if cell.key in hidden:
                    cell.style["display"] = "none"

        _strip_attributes(clone.attrs)
        for column in clone.columns:
            _strip_attributes(column.attrs)

        clone.headers = [
            h for h in clone.headers if not _is_interactive(h.classes)
        ]
        for header in clone.headers:
            _strip_attributes(header.attrs)
            header.children = _sanitize_nodes(header.children)

        clone.rows = [r for r in clone.rows if not _is_interactive(r.classes)]
        for row in clone.rows:
            _strip_attributes(row.attrs)
            row.cells = [c for c in row.cells if not _is_interactive(c.classes)]
            for cell in row.cells:
                _strip_attributes(cell.attrs)
                cell.children = _sanitize_nodes(cell.children)

        return clone

    def extract(self, document: SourceDocument, suppressed: Iterable[str]) -> str:
        """Return the filtered <table> markup for a document."""
        return render_table(self.prepare(document, suppressed))

    def capture(self, source: SourceDocumentProvider) -> Optional[Snapshot]:
        """
        Capture a packaged snapshot from a source provider.

        Returns None when the table cannot be located; callers treat that
        as a capture failure.
        CaptureError propagates when the source's editor state is malformed.
        """
        document, state = source.load()
        if document is None:
            logger.error("No schedule table found")
            return None
        return self.snapshot(document, state)

    def snapshot(self, document: SourceDocument, state: EditorState) -> Snapshot:
        """Filter, sanitize and package a document using its editor state."""
        suppressed = suppressed_columns(state.cols)
        markup = self.extract(document, suppressed)
        logger.debug(
            f"Captured schedule table: {len(document.rows)} rows, "
            f"{len(suppressed)} suppressed columns"
        )
        return package_snapshot(markup)
