"""
Tidy coordinate parser: raw shape dump → ``(shape, x, y)`` table.

Input format
------------
An optional preamble followed by repeated shape headers, each immediately
followed by a body of wrapped coordinate pairs::

    notes about the drawing
    # Shape 01(1,2) , (3,4) , (5,6)
    # Shape 02(0,0) , (2,0)
     , (1,1)

Line breaks may appear anywhere, including inside a body.

Stages
------
1. :func:`normalize_whitespace` drops every line-break character.
2. :func:`split_into_shape_blocks` splits on the header pattern
   (one non-alphanumeric character, optional blank, the marker word,
   optional blank, two alphanumeric characters). Fragment 0 is always the
   preamble, possibly empty, and is never a shape.
3. :func:`assign_shape_ids` drops the preamble and numbers the remaining
   bodies ``1..N`` in order of appearance. The two characters inside the
   header (``01``, ``07``...) are matched but never read: ``# Shape 09``
   followed by ``# Shape 03`` yields shapes 1 and 2.
4. :func:`split_block_into_pairs` splits a body on the literal ``" , "``.
5. :func:`parse_pair` trims one wrapper character from each outer edge of
   ``"(x,y)"`` and converts both fields to finite floats.

Wrapper trimming touches only the first character of the x field and the
last character of the y field, and never a sign or a decimal point, so
``"(-1.5,.25)"`` parses to ``(-1.5, 0.25)`` and interior punctuation is left
in place to fail loudly.

Examples
--------
>>> parse_text("# Shape 01(1,2) , (3,4)# Shape 02(5,6)").to_rows()
[(1, 1.0, 2.0), (1, 3.0, 4.0), (2, 5.0, 6.0)]
"""

from __future__ import annotations

import math
import re
import string
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

from tidyshapes.core.contracts.shapes import PairToken, Point, ShapeBlock, TidyRecord, TidyTable
from tidyshapes.core.errors import EmptyInputError, FormatError, ParseError
from tidyshapes.core.settings import get_logger, load_settings

DEFAULT_MARKER = "Shape"
DEFAULT_PAIR_DELIMITER = " , "

# Every character str.splitlines() treats as a line boundary.
_LINE_BREAKS = re.compile("[\n\r\v\f\x1c\x1d\x1e\x85\u2028\u2029]")

_ALNUM = frozenset(string.ascii_letters + string.digits)
_NUMERIC_PUNCT = frozenset("+-.")
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

logger = get_logger(__name__)


# --------------------------------------------------------------------------- #
# Stage 1-3: text → shape blocks
# --------------------------------------------------------------------------- #


def normalize_whitespace(text: str) -> str:
    """Remove all line-break characters; other whitespace is kept."""
    return _LINE_BREAKS.sub("", text)


@lru_cache(maxsize=16)
def header_pattern(marker: str = DEFAULT_MARKER) -> re.Pattern[str]:
    """Compile the shape-header pattern for ``marker``."""
    return re.compile(rf"[^A-Za-z0-9][ \t]?{re.escape(marker)}[ \t]?[A-Za-z0-9]{{2}}")


def find_shape_headers(text: str, marker: str = DEFAULT_MARKER) -> list[str]:
    """Return every matched header (e.g. ``"# Shape 01"``) in order."""
    return header_pattern(marker).findall(text)


def split_into_shape_blocks(text: str, marker: str = DEFAULT_MARKER) -> list[str]:
    """Split ``text`` on shape headers.

    Returns ``N + 1`` fragments for ``N`` headers. ``result[0]`` is the
    preamble (empty when the text starts with a header) and must be excluded
    from shape-id assignment; ``result[1:]`` are the shape bodies in order.
    """
    return header_pattern(marker).split(text)


def assign_shape_ids(
    blocks: Sequence[str],
    headers: Sequence[str] | None = None,
) -> list[ShapeBlock]:
    """Drop the preamble fragment and label the bodies ``1..N``.

    Parameters
    ----------
    blocks : Sequence[str]
        Full output of :func:`split_into_shape_blocks`, preamble included.
    headers : Sequence[str] | None
        Optional matched headers, one per body, kept for diagnostics.
    """
    bodies = list(blocks[1:])
    if headers is None:
        headers = [""] * len(bodies)
    elif len(headers) != len(bodies):
        raise ValueError(f"got {len(headers)} headers for {len(bodies)} shape bodies")
    return [
        ShapeBlock(shape_id=i, header=h, text=body)
        for i, (h, body) in enumerate(zip(headers, bodies, strict=True), start=1)
    ]


# --------------------------------------------------------------------------- #
# Stage 4-5: block → pairs → floats
# --------------------------------------------------------------------------- #


def split_block_into_pairs(
    block: ShapeBlock,
    delimiter: str = DEFAULT_PAIR_DELIMITER,
) -> list[PairToken]:
    """Split a shape body on ``delimiter``, keeping source order.

    ``delimiter.join(t.text for t in result) == block.text`` always holds.
    """
    if not block.text.strip():
        raise FormatError(
            f"shape body after {block.header or 'header'!r} has no coordinate pairs",
            stage="pair-split",
            shape_id=block.shape_id,
        )
    return [
        PairToken(shape_id=block.shape_id, offset=i, text=part)
        for i, part in enumerate(block.text.split(delimiter))
    ]


def _is_wrapper(ch: str) -> bool:
    return ch not in _ALNUM and ch not in _NUMERIC_PUNCT


def _trim_leading_wrapper(field: str) -> str:
    """Drop one wrapper character from the start of ``field``, if present."""
    if field and _is_wrapper(field[0]):
        return field[1:].strip()
    return field


def _trim_trailing_wrapper(field: str) -> str:
    """Drop one wrapper character from the end of ``field``, if present."""
    if field and _is_wrapper(field[-1]):
        return field[:-1].strip()
    return field


def _to_float(
    text: str,
    *,
    field: str,
    token: str,
    shape_id: int | None,
    offset: int | None,
) -> float:
    """Convert a stripped field to a finite float or raise :class:`ParseError`."""
    if not text:
        raise ParseError(
            f"empty {field} field in pair {token!r}",
            field=field,
            raw=text,
            shape_id=shape_id,
            pair_offset=offset,
        )
    if not _NUMBER.fullmatch(text):
        raise ParseError(
            f"{field} field {text!r} in pair {token!r} is not a number",
            field=field,
            raw=text,
            shape_id=shape_id,
            pair_offset=offset,
        )
    value = float(text)
    if not math.isfinite(value):
        raise ParseError(
            f"{field} field {text!r} in pair {token!r} is out of range",
            field=field,
            raw=text,
            shape_id=shape_id,
            pair_offset=offset,
        )
    return value


def parse_pair(token: str | PairToken) -> Point:
    """Parse one wrapped pair such as ``"(1,2)"`` into ``(1.0, 2.0)``.

    Raises
    ------
    FormatError
        The token does not contain exactly one comma.
    ParseError
        A field is empty or not a finite numeric literal after trimming.
    """
    if isinstance(token, PairToken):
        text, shape_id, offset = token.text, token.shape_id, token.offset
    else:
        text, shape_id, offset = token, None, None

    fields = text.strip().split(",")
    if len(fields) != 2:
        raise FormatError(
            f"pair {text!r} must hold exactly two comma-separated fields, got {len(fields)}",
            stage="pair-split",
            shape_id=shape_id,
            pair_offset=offset,
        )
    x_raw, y_raw = (f.strip() for f in fields)
    x = _to_float(
        _trim_leading_wrapper(x_raw), field="x", token=text, shape_id=shape_id, offset=offset
    )
    y = _to_float(
        _trim_trailing_wrapper(y_raw), field="y", token=text, shape_id=shape_id, offset=offset
    )
    return (x, y)


# --------------------------------------------------------------------------- #
# Composition
# --------------------------------------------------------------------------- #


class TidyCoordinateParser:
    """Compose the stages into ``raw text → TidyTable``.

    Parameters
    ----------
    marker : str | None
        Header marker word; defaults to ``settings.marker`` (``"Shape"``).
    pair_delimiter : str | None
        Separator between pairs; defaults to ``settings.pair_delimiter``.
    max_workers : int | None
        Threads used to normalize blocks. ``1`` runs sequentially; any value
        yields the same row order.
    """

    def __init__(
        self,
        *,
        marker: str | None = None,
        pair_delimiter: str | None = None,
        max_workers: int | None = None,
    ) -> None:
        cfg = load_settings()
        self.marker = marker or cfg.marker
        self.pair_delimiter = pair_delimiter or cfg.pair_delimiter
        self.max_workers = max(1, max_workers if max_workers is not None else cfg.workers)

    def split(self, raw_text: str) -> list[ShapeBlock]:
        """Run stages 1-3 and return the numbered shape blocks."""
        if not raw_text.strip():
            raise EmptyInputError("input text is empty")
        text = normalize_whitespace(raw_text)
        fragments = split_into_shape_blocks(text, self.marker)
        if len(fragments) < 2:
            raise EmptyInputError(f"input contains no {self.marker!r} headers")
        if fragments[0].strip():
            logger.debug("Ignoring %d-char preamble before first header", len(fragments[0]))
        blocks = assign_shape_ids(fragments, find_shape_headers(text, self.marker))
        logger.debug("split: %d shape blocks", len(blocks))
        return blocks

    def parse_block(self, block: ShapeBlock) -> list[TidyRecord]:
        """Run stages 4-5 for one block."""
        return [
            TidyRecord(shape=block.shape_id, x=x, y=y)
            for x, y in map(parse_pair, split_block_into_pairs(block, self.pair_delimiter))
        ]

    def build_table(self, blocks: Sequence[ShapeBlock]) -> TidyTable:
        """Normalize every block and concatenate in shape order."""
        if self.max_workers > 1 and len(blocks) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                per_block = list(pool.map(self.parse_block, blocks))
        else:
            per_block = [self.parse_block(b) for b in blocks]
        records = [rec for recs in per_block for rec in recs]
        return TidyTable(records=records)

    def run(self, raw_text: str) -> TidyTable:
        """Parse ``raw_text`` into a tidy table (shape order, then pair order)."""
        table = self.build_table(self.split(raw_text))
        logger.debug("run: %d records", len(table))
        return table


def parse_text(
    raw_text: str,
    *,
    marker: str | None = None,
    pair_delimiter: str | None = None,
    max_workers: int | None = None,
) -> TidyTable:
    """Shortcut for ``TidyCoordinateParser(...).run(raw_text)``."""
    parser = TidyCoordinateParser(
        marker=marker, pair_delimiter=pair_delimiter, max_workers=max_workers
    )
    return parser.run(raw_text)


__all__ = [
    "DEFAULT_MARKER",
    "DEFAULT_PAIR_DELIMITER",
    "normalize_whitespace",
    "header_pattern",
    "find_shape_headers",
    "split_into_shape_blocks",
    "assign_shape_ids",
    "split_block_into_pairs",
    "parse_pair",
    "TidyCoordinateParser",
    "parse_text",
]
