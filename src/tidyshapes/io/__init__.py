"""File input/output for shape dumps and tidy CSV tables."""

from __future__ import annotations

from .table_io import CSV_HEADER, read_csv, read_source, write_csv

__all__ = ["CSV_HEADER", "read_source", "write_csv", "read_csv"]
