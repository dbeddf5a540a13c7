"""Text → tidy table parsing stages."""

from __future__ import annotations

from .parser import (
    TidyCoordinateParser,
    assign_shape_ids,
    normalize_whitespace,
    parse_pair,
    parse_text,
    split_block_into_pairs,
    split_into_shape_blocks,
)

__all__ = [
    "TidyCoordinateParser",
    "normalize_whitespace",
    "split_into_shape_blocks",
    "assign_shape_ids",
    "split_block_into_pairs",
    "parse_pair",
    "parse_text",
]
