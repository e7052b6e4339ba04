"""Structural model of the editor's schedule table."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ColumnSpec(BaseModel):
    """Per-column visibility configuration from the editor."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    print_: bool = Field(default=True, alias="print")  # False excludes the column from broadcasts


class ProjectMeta(BaseModel):
    """Project-level metadata shown in the editor."""

    title: Optional[str] = None


class EditorState(BaseModel):
    """Editor state readable alongside the table."""

    model_config = ConfigDict(populate_by_name=True)

    cols: list[ColumnSpec] = Field(default_factory=list)
    project_meta: ProjectMeta = Field(default_factory=ProjectMeta, alias="projectMeta")


class Node(BaseModel):
    """An element nested inside a cell (text span, image, control...)."""

    tag: str = "span"
    text: str = ""
    attrs: dict[str, str] = Field(default_factory=dict)
    classes: list[str] = Field(default_factory=list)
    style: dict[str, str] = Field(default_factory=dict)
    children: list["Node"] = Field(default_factory=list)


class ColumnDef(BaseModel):
    """A colgroup entry."""

    key: str
    width: Optional[str] = None
    attrs: dict[str, str] = Field(default_factory=dict)
    style: dict[str, str] = Field(default_factory=dict)


class HeaderCell(BaseModel):
    """A header cell in the table head."""

    key: str
    label: str = ""
    attrs: dict[str, str] = Field(default_factory=dict)
    classes: list[str] = Field(default_factory=list)
    style: dict[str, str] = Field(default_factory=dict)
    children: list[Node] = Field(default_factory=list)


class Cell(BaseModel):
    """A body cell, keyed by its column."""

    key: str
    text: str = ""
    attrs: dict[str, str] = Field(default_factory=dict)
    classes: list[str] = Field(default_factory=list)
    style: dict[str, str] = Field(default_factory=dict)
    children: list[Node] = Field(default_factory=list)


class Row(BaseModel):
    """A body row with its cells and row-level metadata."""

    id: Optional[str] = None
    row_type: Optional[str] = None  # "EVENT", "CALLTIME", ...
    complete: bool = False
    attrs: dict[str, str] = Field(default_factory=dict)
    classes: list[str] = Field(default_factory=list)
    style: dict[str, str] = Field(default_factory=dict)
    cells: list[Cell] = Field(default_factory=list)

    def cell(self, key: str) -> Optional[Cell]:
        """Return the first cell for a column key, if the row has one."""
        for cell in self.cells:
            if cell.key == key:
                return cell
        return None


class SourceDocument(BaseModel):
    """The live schedule table: colgroup, header and body rows."""

    classes: list[str] = Field(default_factory=lambda: ["schedule"])
    attrs: dict[str, str] = Field(default_factory=dict)
    columns: list[ColumnDef] = Field(default_factory=list)
    headers: list[HeaderCell] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)

    @property
    def column_keys(self) -> list[str]:
        """Column keys in header order."""
        return [header.key for header in self.headers]
