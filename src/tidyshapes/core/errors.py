"""Typed failures raised by the coordinate pipeline.

Every error records the pipeline *stage* that failed and, where known, the
shape id and pair offset, so a malformed line in a large dump can be found
without bisecting the input by hand.

Stages
------
``split``
    Header detection / shape-block splitting.
``pair-split``
    Splitting a shape body into ``(x,y)`` tokens, or a token into two fields.
``numeric-parse``
    Converting a stripped field into a finite float.

Hierarchy
---------
- :class:`TidyShapesError`
    - :class:`FormatError`
        - :class:`EmptyInputError`
    - :class:`ParseError`
"""

from __future__ import annotations

from typing import Literal

Stage = Literal["split", "pair-split", "numeric-parse", "csv"]


class TidyShapesError(Exception):
    """Base class for all tidyshapes failures."""

    def __init__(
        self,
        message: str,
        *,
        stage: Stage,
        shape_id: int | None = None,
        pair_offset: int | None = None,
    ) -> None:
        self.message = message
        self.stage = stage
        self.shape_id = shape_id
        self.pair_offset = pair_offset
        super().__init__(str(self))

    def location(self) -> str:
        """Return a short ``shape 2, pair 5`` style locator (may be empty)."""
        parts: list[str] = []
        if self.shape_id is not None:
            parts.append(f"shape {self.shape_id}")
        if self.pair_offset is not None:
            parts.append(f"pair {self.pair_offset}")
        return ", ".join(parts)

    def __str__(self) -> str:
        where = self.location()
        suffix = f" ({where})" if where else ""
        return f"[{self.stage}] {self.message}{suffix}"


class FormatError(TidyShapesError):
    """The text does not have the expected header / pair structure."""


class EmptyInputError(FormatError):
    """The text is empty or contains no shape header at all."""

    def __init__(self, message: str = "input contains no shape headers") -> None:
        super().__init__(message, stage="split")


class ParseError(TidyShapesError):
    """A coordinate field is not a finite numeric literal after stripping."""

    def __init__(
        self,
        message: str,
        *,
        field: str,
        raw: str,
        stage: Stage = "numeric-parse",
        shape_id: int | None = None,
        pair_offset: int | None = None,
    ) -> None:
        self.field = field
        self.raw = raw
        super().__init__(message, stage=stage, shape_id=shape_id, pair_offset=pair_offset)


__all__ = ["Stage", "TidyShapesError", "FormatError", "EmptyInputError", "ParseError"]
