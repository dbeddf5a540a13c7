"""
Reading shape dumps and persisting tidy tables.

The parser never touches the filesystem; this module is the only place that
does. Tables are written as comma-separated text with the header row
``shape,x,y`` and one row per record, in table order.

Floats are written with ``repr`` so a written table reads back to the exact
same values.
"""

from __future__ import annotations

import csv
from pathlib import Path

from pydantic import ValidationError

from tidyshapes.core.contracts.shapes import TidyRecord, TidyTable
from tidyshapes.core.errors import FormatError, ParseError

CSV_HEADER: tuple[str, str, str] = ("shape", "x", "y")


def read_source(path: str | Path) -> str:
    """Return the UTF-8 text of a shape dump.

    Bytes that do not decode as UTF-8 raise :class:`FormatError` at the
    ``split`` stage, the first stage that would have consumed them.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(
            f"{path} is not valid UTF-8 (byte {exc.start}: {exc.reason})", stage="split"
        ) from exc


def write_csv(table: TidyTable, path: str | Path) -> Path:
    """Write ``table`` to ``path`` as ``shape,x,y`` CSV and return the path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for rec in table.records:
            writer.writerow((rec.shape, repr(rec.x), repr(rec.y)))
    return out


def read_csv(path: str | Path) -> TidyTable:
    """Load a table previously written by :func:`write_csv`.

    Raises
    ------
    FormatError
        The header row is not ``shape,x,y`` or a row has the wrong width.
    ParseError
        A cell is not numeric, a coordinate is not finite, or shapes are not grouped.
    """
    records: list[TidyRecord] = []
    with Path(path).open(encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None or tuple(h.strip() for h in header) != CSV_HEADER:
            expected = ",".join(CSV_HEADER)
            raise FormatError(f"expected header {expected!r}, got {header!r}", stage="csv")
        for lineno, row in enumerate(reader, start=2):
            if not row:
                continue
            if len(row) != 3:
                raise FormatError(f"line {lineno}: expected 3 cells, got {len(row)}", stage="csv")
            try:
                records.append(TidyRecord(shape=int(row[0]), x=float(row[1]), y=float(row[2])))
            except (ValueError, ValidationError) as exc:
                raise ParseError(
                    f"line {lineno}: invalid row {row!r}: {exc}",
                    field="row",
                    raw=",".join(row),
                    stage="csv",
                ) from exc
    try:
        return TidyTable(records=records)
    except ValidationError as exc:
        raise ParseError(str(exc), field="shape", raw="", stage="csv") from exc


__all__ = ["CSV_HEADER", "read_source", "write_csv", "read_csv"]
