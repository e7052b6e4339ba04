"""HTML rendering of a (sanitized) schedule table."""

import html
import re
from typing import Iterable, Optional

from ..table.models import Cell, ColumnDef, HeaderCell, Node, Row, SourceDocument

VOID_TAGS = frozenset({"area", "br", "col", "hr", "img", "input", "wbr"})

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_:.-]*$")


def _escape(value) -> str:
    return html.escape(str(value), quote=True)


def _style_text(style: dict[str, str]) -> str:
    return "; ".join(f"{name}: {value}" for name, value in style.items())


def _attributes(
    attrs: dict[str, str],
    classes: Iterable[str] = (),
    style: Optional[dict[str, str]] = None,
) -> str:
    parts = []
    for name, value in attrs.items():
        if not _NAME_RE.match(name) or name in ("class", "style"):
            continue
        parts.append(f' {name}="{_escape(value)}"')

    class_list = [c for c in classes if c]
    if class_list:
        parts.append(f' class="{_escape(" ".join(class_list))}"')
    if style:
        parts.append(f' style="{_escape(_style_text(style))}"')
    return "".join(parts)


def render_node(node: Node) -> str:
    tag = node.tag.lower() if _NAME_RE.match(node.tag) else "span"
    attributes = _attributes(node.attrs, node.classes, node.style)
    if tag in VOID_TAGS:
        return f"<{tag}{attributes}>"
    inner = _escape(node.text) + "".join(render_node(child) for child in node.children)
    return f"<{tag}{attributes}>{inner}</{tag}>"


def _render_col(column: ColumnDef) -> str:
    style = {}
    if column.width is not None:
        style["width"] = column.width
    style.update(column.style)
    attrs = {"data-key": column.key, **column.attrs}
    return f"<col{_attributes(attrs, style=style)}>"


def _render_header(header: HeaderCell) -> str:
    attrs = {"data-key": header.key, **header.attrs}
    inner = _escape(header.label) + "".join(render_node(n) for n in header.children)
    return f"<th{_attributes(attrs, header.classes, header.style)}>{inner}</th>"


def _render_cell(cell: Cell) -> str:
    attrs = {"data-key": cell.key, **cell.attrs}
    inner = _escape(cell.text) + "".join(render_node(n) for n in cell.children)
    return f"<td{_attributes(attrs, cell.classes, cell.style)}>{inner}</td>"


def _render_row(row: Row) -> str:
    attrs = {}
    if row.id is not None:
        attrs["data-id"] = row.id
    if row.row_type:
        attrs["data-type"] = row.row_type
    attrs.update(row.attrs)

    classes = list(row.classes)
    if row.complete and "row-complete" not in classes:
        classes.append("row-complete")

    cells = "".join(_render_cell(cell) for cell in row.cells)
    return f"<tr{_attributes(attrs, classes, row.style)}>{cells}</tr>"


def render_table(document: SourceDocument) -> str:
    """Render a table model as a single <table> element."""
    parts = [f"<table{_attributes(document.attrs, document.classes)}>"]
    if document.columns:
        parts.append("<colgroup>")
        parts.extend(_render_col(column) for column in document.columns)
        parts.append("</colgroup>")
    parts.append("<thead><tr>")
    parts.extend(_render_header(header) for header in document.headers)
    parts.append("</tr></thead>")
    parts.append("<tbody>")
    parts.extend(_render_row(row) for row in document.rows)
    parts.append("</tbody>")
    parts.append("</table>")
    return "".join(parts)
