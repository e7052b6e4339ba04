"""Snapshot capture: column filtering, extraction and style packaging."""

from .columns import BUILTIN_EXCLUDED_COLUMNS, suppressed_columns
from .extractor import SnapshotExtractor
from .models import ROOT_CLASS, Snapshot
from .render import render_table
from .styles import broadcast_stylesheet, package_snapshot

__all__ = [
    "BUILTIN_EXCLUDED_COLUMNS",
    "suppressed_columns",
    "SnapshotExtractor",
    "ROOT_CLASS",
    "Snapshot",
    "render_table",
    "broadcast_stylesheet",
    "package_snapshot",
]
