"""Pydantic contracts shared by the parser, pipeline, I/O and renderer."""

from __future__ import annotations

from .shapes import PairToken, Point, ShapeBlock, TidyRecord, TidyTable

__all__ = ["Point", "ShapeBlock", "PairToken", "TidyRecord", "TidyTable"]
