"""
In-memory stage recorder for one pipeline run.

The pipeline stores each intermediate artifact (block count, pair tokens,
the final table) under a string key and takes a snapshot after every stage.
When a run fails, the snapshots show how far it got and what the last good
intermediate state looked like.

- ``put(key, value)``: insert or update an entry and bump the revision.
- ``get(key, default=None)``: retrieve a value.
- ``snapshot(note=None)``: capture a JSON-safe copy of the current state.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, TypeVar, cast

from pydantic import BaseModel

from .snapshot import StageSnapshot

T = TypeVar("T")


def _jsonify(value: Any) -> Any:
    """
    Return a JSON-safe representation of ``value``.

    - Primitives are returned as-is.
    - Pydantic models are dumped with ``model_dump(mode="json")``.
    - dict / list / tuple are converted recursively (dict keys become str).
    - anything else falls back to ``repr``.
    """
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(k): _jsonify(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonify(v) for v in value]
    return repr(value)


class StageRecorder:
    """
    Key-value store with revisioned snapshots, scoped to a single run.

    Attributes
    ----------
    _store : dict[str, Any]
        Current artifacts.
    _rev : int
        Monotonically increasing revision (bumps on every ``put``).
    _snapshots : list[StageSnapshot]
        Captured history.
    """

    __slots__ = ("_store", "_rev", "_snapshots")

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}
        self._rev: int = 0
        self._snapshots: list[StageSnapshot] = []

    # ------------------------------- KV API ---------------------------------

    def put(self, key: str, value: Any) -> None:
        """Insert or update ``key`` and bump the revision counter."""
        self._store[key] = value
        self._rev += 1

    def get(self, key: str, default: T | None = None) -> T | None:
        """Return the stored value for ``key``, or ``default`` if missing."""
        if key in self._store:
            return cast(T | None, self._store[key])
        return default

    def keys(self) -> tuple[str, ...]:
        """Return the current keys as a sorted tuple."""
        return tuple(sorted(self._store.keys()))

    @property
    def revision(self) -> int:
        return self._rev

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._store)

    # ------------------------------- Snapshot API ---------------------------

    def snapshot(self, note: str | None = None) -> StageSnapshot:
        """
        Capture an immutable, JSON-safe snapshot of the current state.

        Parameters
        ----------
        note : str | None
            Optional label, e.g. ``"pair-split: 12 tokens"``.
        """
        data = {k: _jsonify(v) for k, v in self._store.items()}
        ts = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        snap = StageSnapshot(timestamp=ts, revision=self._rev, note=note, data=data)
        self._snapshots.append(snap)
        return snap

    def snapshots(self) -> tuple[StageSnapshot, ...]:
        """Return all captured snapshots in capture order."""
        return tuple(self._snapshots)


__all__ = ["StageRecorder"]
