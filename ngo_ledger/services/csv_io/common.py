"""CSV reading/writing helpers shared by the importers and exporters."""

import csv
import io
from typing import Iterable, Sequence


def read_rows(text: str) -> list[list[str]]:
    """
    Parse CSV text into rows, dropping blank lines.

    Cells are stripped. Quoted fields may contain commas.
    """
    reader = csv.reader(io.StringIO(text.replace("\r\n", "\n")))
    rows = []
    for row in reader:
        cells = [cell.strip() for cell in row]
        if any(cells):
            rows.append(cells)
    return rows


def cell(row: Sequence[str], index: int) -> str:
    """Column value or '' when the row is short."""
    return row[index] if index < len(row) else ""


def write_rows(header: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """
    Serialize a header plus rows.

    Fields containing commas, quotes or newlines are quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue()
