"""Self-contained stylesheet packaged with every snapshot."""

from .models import ROOT_CLASS, Snapshot

STYLESHEET_VERSION = "1"

# Rules only use class and attribute selectors, so inline styles on cells win.
_STYLESHEET = f"""
/* schedcast broadcast stylesheet v{STYLESHEET_VERSION} */
.{ROOT_CLASS} {{
  font-family: 'Avenir', 'Century Gothic', -apple-system, sans-serif;
  font-size: 12px;
  background: #fff;
  color: #000;
}}

.{ROOT_CLASS} table {{
  width: 100%;
  border-collapse: collapse;
  table-layout: fixed;
}}

.{ROOT_CLASS} th,
.{ROOT_CLASS} td {{
  padding: 8px 6px;
  text-align: left;
  vertical-align: middle;
  border: 1px solid #ddd;
}}

.{ROOT_CLASS} thead th {{
  background: #f5f5f5;
  font-weight: 600;
  text-transform: uppercase;
  font-size: 11px;
  letter-spacing: 0.5px;
}}

.{ROOT_CLASS} tbody tr:nth-child(even) {{
  background: #fafafa;
}}

.{ROOT_CLASS} .row-complete {{
  opacity: 0.5;
}}

.{ROOT_CLASS} .row-complete td {{
  text-decoration: line-through;
  text-decoration-color: #e53935;
}}

.{ROOT_CLASS} tbody tr.event-row,
.{ROOT_CLASS} tbody tr[data-type="EVENT"] {{
  background: #e3f2fd;
}}

.{ROOT_CLASS} tbody tr.calltime-row,
.{ROOT_CLASS} tbody tr[data-type="CALLTIME"] {{
  background: #e8f5e9;
  font-weight: 600;
}}

.{ROOT_CLASS} img {{
  max-width: 100px;
  max-height: 60px;
  object-fit: contain;
}}
"""


def broadcast_stylesheet() -> str:
    """Return the packaged stylesheet. Identical on every call."""
    return _STYLESHEET


def package_snapshot(markup: str) -> Snapshot:
    """Attach the packaged stylesheet to an extracted table fragment."""
    return Snapshot(markup=markup, style_sheet=broadcast_stylesheet())
