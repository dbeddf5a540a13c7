"""Integration tests for ``run_pipeline``.

These tests drive the full flow (load → split → normalize → export) and check
the stage snapshots that the CLI persists with ``--trace``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tidyshapes.core.errors import EmptyInputError, FormatError, ParseError
from tidyshapes.core.trace.recorder import StageRecorder
from tidyshapes.io.table_io import read_csv
from tidyshapes.parsing.parser import TidyCoordinateParser
from tidyshapes.pipelines.tidy_pipeline import run_pipeline

DUMP = """Line art exported from sketch tool
# Shape 07(0,0) , (4,0) , (4,3)
 , (0,3)
# Shape 02(1,1) , (3,1) , (2,2.5)
"""


def test_pipeline_from_text_returns_table_and_snapshots() -> None:
    """Text input produces the tidy table and one snapshot per stage."""
    result = run_pipeline(DUMP)

    table = result["table"]
    assert table.to_rows() == [
        (1, 0.0, 0.0),
        (1, 4.0, 0.0),
        (1, 4.0, 3.0),
        (1, 0.0, 3.0),
        (2, 1.0, 1.0),
        (2, 3.0, 1.0),
        (2, 2.0, 2.5),
    ]
    assert result["csv_path"] is None and result["figure_path"] is None

    rec = result["recorder"]
    notes = [s.note or "" for s in rec.snapshots()]
    assert notes[0].startswith("load:")
    assert notes[1] == "split: 2 shape blocks"
    assert notes[2] == "normalize: 7 records"
    assert rec.get("shape_blocks") == [
        {"shape_id": 1, "header": "# Shape 07"},
        {"shape_id": 2, "header": "# Shape 02"},
    ]
    assert rec.get("summary") == {1: 4, 2: 3}


def test_pipeline_from_path_with_exports(tmp_path: Path) -> None:
    """A Path input is read from disk; CSV and figure are written."""
    src = tmp_path / "drawing.txt"
    src.write_text(DUMP, encoding="utf-8")

    result = run_pipeline(
        src,
        csv_path=tmp_path / "out" / "drawing.csv",
        figure_path=tmp_path / "out" / "drawing.png",
        style="polygons",
    )

    assert result["csv_path"] is not None and result["figure_path"] is not None
    assert read_csv(result["csv_path"]) == result["table"]
    assert Path(result["figure_path"]).stat().st_size > 0
    assert result["recorder"].get("source") == {"label": str(src), "chars": len(DUMP)}


def test_pipeline_records_failure_and_reraises() -> None:
    """Typed errors propagate unchanged after a failure snapshot."""
    recorder = StageRecorder()
    with pytest.raises(ParseError):
        run_pipeline("# Shape 01(1,2) , (3,)", recorder=recorder)

    last = recorder.snapshots()[-1]
    assert last.note == "failed at numeric-parse"
    assert last.data["error"]["type"] == "ParseError"
    assert recorder.get("table") is None


def test_pipeline_empty_input() -> None:
    """No headers means EmptyInputError, recorded at the split stage."""
    recorder = StageRecorder()
    with pytest.raises(EmptyInputError):
        run_pipeline("nothing to see", recorder=recorder)
    assert recorder.snapshots()[-1].note == "failed at split"


def test_pipeline_uses_injected_parser() -> None:
    """A custom parser configuration flows through the pipeline."""
    parser = TidyCoordinateParser(marker="Poly", pair_delimiter=" ; ", max_workers=2)
    result = run_pipeline("~Poly01(1,1) ; (2,2)~Poly02(3,3)", parser=parser)
    assert result["table"].shape_ids() == [1, 2]


def test_pipeline_records_failure_for_undecodable_source(tmp_path: Path) -> None:
    """A source that is not UTF-8 fails inside the run and leaves a snapshot."""
    src = tmp_path / "latin1.txt"
    src.write_bytes("Zeichnung \xe4\n# Shape 01(1,2)".encode("latin-1"))
    recorder = StageRecorder()

    with pytest.raises(FormatError):
        run_pipeline(src, recorder=recorder)

    last = recorder.snapshots()[-1]
    assert last.note == "failed at split"
    assert last.data["error"]["type"] == "FormatError"
    assert recorder.get("source") is None


def test_pipeline_records_failure_for_unreadable_source(tmp_path: Path) -> None:
    """I/O errors propagate unchanged after a load failure snapshot."""
    recorder = StageRecorder()

    with pytest.raises(OSError):
        run_pipeline(tmp_path, recorder=recorder)

    assert recorder.snapshots()[-1].note == "failed at load"
