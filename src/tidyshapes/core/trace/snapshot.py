"""
Stage snapshot definition.

A snapshot is the immutable record of a :class:`StageRecorder` at one point of
a pipeline run (e.g. "after split: 3 blocks"). It lives apart from
``recorder.py`` so the writer and the CLI can import it without pulling in
the recorder.

Design Notes
------------
- **Immutability**: ``frozen=True``; a snapshot never changes after capture.
- **Serialization**: the timestamp is already an ISO-8601 string, so
  ``dataclasses.asdict`` output can be dumped to JSON as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class StageSnapshot:
    """
    Immutable record of the recorder state after a pipeline stage.

    Attributes
    ----------
    timestamp : str
        UTC capture time, e.g. ``"2026-10-18T10:00:00.123456Z"``.
    revision : int
        Recorder revision at capture time.
    note : str | None
        Human-readable label such as ``"split: 3 shape blocks"``.
    data : dict[str, Any]
        JSON-safe, shallow copy of the recorder content.
    """

    timestamp: str
    revision: int
    note: str | None
    data: dict[str, Any] = field(default_factory=dict)
