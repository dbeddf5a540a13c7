"""
Shape contracts: the intermediate and final units of the coordinate pipeline.

This module defines the Pydantic v2 models passed between parser stages:

- `ShapeBlock` : one shape body cut out of the raw text, with its sequential id.
- `PairToken`  : one still-wrapped ``"(x,y)"`` substring of a block.
- `TidyRecord` : a single ``(shape, x, y)`` observation.
- `TidyTable`  : the ordered, shape-grouped sequence of records.

Ordering
--------
Row order is meaningful: within a shape it is the draw order of the path or
polygon. `TidyTable` therefore validates that shape ids never decrease, so
every shape's rows are contiguous and can be grouped without re-sorting.

Notes
-----
- Records reject NaN and infinity (`allow_inf_nan=False`); a table can only
  hold finite coordinates.
- `ShapeBlock.header` keeps the matched header text (e.g. ``"# Shape 07"``)
  for diagnostics only. The id is always the occurrence order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator

Point = tuple[float, float]


class ShapeBlock(BaseModel):
    """A shape body between two headers, labeled by order of appearance."""

    model_config = ConfigDict(frozen=True)

    shape_id: int = Field(..., ge=1, description="1-based occurrence index.")
    header: str = Field(default="", description="Matched header text, unused for ids.")
    text: str = Field(..., description="Body text following the header.")


class PairToken(BaseModel):
    """A single wrapped coordinate pair, e.g. ``"(1.5,-2)"``."""

    model_config = ConfigDict(frozen=True)

    shape_id: int = Field(..., ge=1)
    offset: int = Field(..., ge=0, description="0-based position inside the shape.")
    text: str


class TidyRecord(BaseModel):
    """One row of the tidy table."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    shape: int = Field(..., ge=1, description="Shape id (occurrence order).")
    x: float
    y: float

    def as_row(self) -> tuple[int, float, float]:
        """Return the record as a plain ``(shape, x, y)`` tuple."""
        return (self.shape, self.x, self.y)


class TidyTable(BaseModel):
    """Ordered sequence of records, grouped by ascending shape id."""

    records: list[TidyRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _shapes_are_grouped(self) -> TidyTable:
        """Shape ids must be non-decreasing so each shape is contiguous."""
        last = 0
        for i, rec in enumerate(self.records):
            if rec.shape < last:
                raise ValueError(
                    f"row {i}: shape {rec.shape} follows shape {last}; "
                    "records must be grouped by ascending shape id"
                )
            last = rec.shape
        return self

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[int, float, float]]) -> TidyTable:
        """Build a table from ``(shape, x, y)`` tuples."""
        return cls(records=[TidyRecord(shape=s, x=x, y=y) for s, x, y in rows])

    # ----- Sequence helpers --------------------------------------------------
    def __len__(self) -> int:
        return len(self.records)

    def iter_records(self) -> Iterator[TidyRecord]:
        """Iterate records in table order."""
        return iter(self.records)

    def to_rows(self) -> list[tuple[int, float, float]]:
        """Return all records as ``(shape, x, y)`` tuples, in table order."""
        return [r.as_row() for r in self.records]

    def columns(self) -> tuple[list[int], list[float], list[float]]:
        """Return the three columns as parallel lists."""
        return (
            [r.shape for r in self.records],
            [r.x for r in self.records],
            [r.y for r in self.records],
        )

    # ----- Grouping ----------------------------------------------------------
    def shape_ids(self) -> list[int]:
        """Distinct shape ids in ascending (= table) order."""
        seen: list[int] = []
        for r in self.records:
            if not seen or seen[-1] != r.shape:
                seen.append(r.shape)
        return seen

    def groups(self) -> dict[int, list[Point]]:
        """Map each shape id to its points, keeping row order."""
        out: dict[int, list[Point]] = {}
        for r in self.records:
            out.setdefault(r.shape, []).append((r.x, r.y))
        return out

    def summary(self) -> dict[int, int]:
        """Map each shape id to its number of points."""
        return {sid: len(pts) for sid, pts in self.groups().items()}

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Return ``(xmin, ymin, xmax, ymax)`` or ``None`` for an empty table."""
        if not self.records:
            return None
        _, xs, ys = self.columns()
        return (min(xs), min(ys), max(xs), max(ys))


__all__ = ["Point", "ShapeBlock", "PairToken", "TidyRecord", "TidyTable"]
