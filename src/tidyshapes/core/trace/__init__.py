"""Per-run stage recording: snapshots in memory and on disk."""

from __future__ import annotations

from .recorder import StageRecorder
from .snapshot import StageSnapshot
from .writer import SnapshotWriter

__all__ = ["StageRecorder", "StageSnapshot", "SnapshotWriter"]
