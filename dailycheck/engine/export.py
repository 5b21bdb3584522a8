"""CSV export of checklist rows."""

import csv
import io
from pathlib import Path
from typing import Any, Mapping, Sequence, Union

from pydantic import BaseModel

Row = Union[Mapping[str, Any], BaseModel]


def _as_mapping(row: Row) -> Mapping[str, Any]:
    if isinstance(row, BaseModel):
        return row.model_dump()
    return row


def _write_row(writer, output: io.StringIO, values: list[Any]) -> None:
    # csv quotes a lone empty field; write it as an empty line instead.
    if len(values) == 1 and values[0] in (None, ""):
        output.write("\n")
    else:
        writer.writerow(values)


def build_csv(rows: Sequence[Row]) -> str:
    """Serialize rows to CSV text.

    The header is the key order of the first row; every row is emitted in
    that order, and keys missing from a row render empty. Fields containing
    a comma, a double quote or a line break are quoted with embedded quotes
    doubled.

    Args:
        rows: Mappings or pydantic models.

    Returns:
        CSV text without a trailing newline, or ``""`` for no rows.
    """
    if not rows:
        return ""
    mappings = [_as_mapping(row) for row in rows]
    headers = list(mappings[0].keys())

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    _write_row(writer, output, headers)
    for mapping in mappings:
        _write_row(writer, output, [mapping.get(h) for h in headers])

    return output.getvalue()[: -len("\n")]


def write_csv(rows: Sequence[Row], path: Path) -> bool:
    """Write rows as CSV to a file.

    Args:
        rows: Rows to export.
        path: Destination file.

    Returns:
        True if a file was written, False when there was nothing to export.
    """
    if not rows:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_csv(rows), encoding="utf-8")
    return True
