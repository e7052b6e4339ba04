"""Column eligibility for broadcast snapshots."""

from typing import Iterable, Optional

from ..table.models import ColumnSpec

# Editor control columns that never belong in a published schedule
BUILTIN_EXCLUDED_COLUMNS = frozenset({"drag", "sharpie", "actions"})


def suppressed_columns(cols: Optional[Iterable[ColumnSpec]]) -> set[str]:
    """
    Return the column keys to hide from a snapshot.

    A column is suppressed if it is a built-in control column or its
    ``print`` flag is off. A missing configuration suppresses only the
    built-in set.
    """
    suppressed = set(BUILTIN_EXCLUDED_COLUMNS)
    for col in cols or ():
        if not col.print_:
            suppressed.add(col.key)
    return suppressed
