# src/tidyshapes/cli.py
"""
tidyshapes Command Line Interface (CLI).

A thin `typer` + `rich` shell around :func:`run_pipeline`. The parser itself is
a library function; this module only handles arguments, presentation and exit
codes.

Commands
--------
- ``convert``: parse a shape dump, preview the table, optionally write CSV.
- ``plot``:    parse a shape dump and save a figure (points, paths or polygons).
- ``inspect``: print per-shape point counts and the coordinate bounds.

Exit codes: ``0`` on success, ``1`` for malformed or unreadable input (typed
pipeline errors and I/O failures), ``2`` for usage errors (Typer default).

Usage
-----
    $ tidyshapes convert samples/drawing.txt -o drawing.csv
    $ tidyshapes plot samples/drawing.txt -o drawing.png --style paths
    $ tidyshapes inspect samples/drawing.txt
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tidyshapes.core.contracts.shapes import TidyTable
from tidyshapes.core.errors import EmptyInputError, TidyShapesError
from tidyshapes.core.settings import load_settings
from tidyshapes.core.trace.recorder import StageRecorder
from tidyshapes.core.trace.writer import SnapshotWriter
from tidyshapes.parsing.parser import TidyCoordinateParser
from tidyshapes.pipelines.tidy_pipeline import PipelineResult, run_pipeline
from tidyshapes.render.plotting import PlotStyle

# Settings such as TIDYSHAPES_MARKER may live in .env
load_dotenv()

app = typer.Typer(
    help="tidyshapes: turn shape-delimited coordinate dumps into tidy shape,x,y tables.",
    rich_markup_mode="markdown",
)
console = Console()

SourceArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to the text dump containing '# Shape NN' headers.",
    ),
]
MarkerOpt = Annotated[
    str | None,
    typer.Option("--marker", help="Header marker word (default: TIDYSHAPES_MARKER or 'Shape')."),
]
WorkersOpt = Annotated[
    int | None,
    typer.Option("--workers", "-w", min=1, help="Threads used to normalize shape blocks."),
]
TraceOpt = Annotated[
    bool,
    typer.Option("--trace/--no-trace", help="Write stage snapshots to TIDYSHAPES_TRACE_DIR."),
]
VerboseOpt = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _render_table(table: TidyTable, limit: int) -> None:
    """Print the first ``limit`` rows as a rich table."""
    view = Table(title=f"{len(table)} records", show_lines=False)
    view.add_column("shape", justify="right", style="cyan")
    view.add_column("x", justify="right")
    view.add_column("y", justify="right")
    for shape, x, y in table.to_rows()[:limit]:
        view.add_row(str(shape), f"{x:g}", f"{y:g}")
    console.print(view)
    if len(table) > limit:
        console.print(f"[dim]... {len(table) - limit} more rows[/dim]")


def _write_trace(recorder: StageRecorder) -> None:
    """Persist the run's snapshots if tracing was requested."""
    trace_dir = load_settings().trace_dir
    writer = SnapshotWriter(Path(trace_dir) if trace_dir else None)
    paths = writer.write_all(recorder.snapshots())
    console.print(f"[dim]Wrote {len(paths)} snapshots to {writer.base_dir}[/dim]")


def _run(
    source: Path,
    *,
    marker: str | None,
    workers: int | None,
    trace: bool,
    verbose: bool,
    csv_path: Path | None = None,
    figure_path: Path | None = None,
    style: PlotStyle = "polygons",
) -> PipelineResult:
    """Run the pipeline and convert typed failures into exit code 1."""
    recorder = StageRecorder()
    parser = TidyCoordinateParser(marker=marker, max_workers=workers)
    try:
        return run_pipeline(
            source,
            csv_path=csv_path,
            figure_path=figure_path,
            style=style,
            parser=parser,
            recorder=recorder,
        )
    except EmptyInputError as e:
        console.print(f"[bold yellow]Nothing to parse:[/bold yellow] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    except TidyShapesError as e:
        console.print(f"[bold red]Malformed input:[/bold red] {escape(str(e))}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e
    except OSError as e:
        console.print(f"[bold red]Cannot read source:[/bold red] {escape(str(e))}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e
    finally:
        if trace:
            _write_trace(recorder)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def convert(
    source: SourceArg,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the table as shape,x,y CSV."),
    ] = None,
    preview: Annotated[
        int,
        typer.Option("--preview", "-n", min=0, help="Number of rows to print."),
    ] = 10,
    marker: MarkerOpt = None,
    workers: WorkersOpt = None,
    trace: TraceOpt = False,
    verbose: VerboseOpt = False,
) -> None:
    """Parse a shape dump into a tidy shape,x,y table."""
    result = _run(
        source, marker=marker, workers=workers, trace=trace, verbose=verbose, csv_path=output
    )
    table = result["table"]
    if preview:
        _render_table(table, preview)
    if result["csv_path"]:
        console.print(
            Panel(f"Saved to: {result['csv_path']}", title="CSV", border_style="green")
        )


@app.command()  # type: ignore[misc]
def plot(
    source: SourceArg,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Image file to write (format from extension)."),
    ],
    style: Annotated[
        str,
        typer.Option("--style", "-s", help="One of: points, paths, polygons."),
    ] = "polygons",
    marker: MarkerOpt = None,
    workers: WorkersOpt = None,
    trace: TraceOpt = False,
    verbose: VerboseOpt = False,
) -> None:
    """Parse a shape dump and draw it."""
    if style not in ("points", "paths", "polygons"):
        raise typer.BadParameter(f"unknown style {style!r}", param_hint="--style")
    result = _run(
        source,
        marker=marker,
        workers=workers,
        trace=trace,
        verbose=verbose,
        figure_path=output,
        style=style,  # type: ignore[arg-type]
    )
    console.print(
        Panel(
            f"{len(result['table'].shape_ids())} shapes drawn as {style}\n"
            f"Saved to: {result['figure_path']}",
            title="Figure",
            border_style="green",
        )
    )


@app.command()  # type: ignore[misc]
def inspect(
    source: SourceArg,
    marker: MarkerOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show how many points each shape has and the overall bounds."""
    result = _run(source, marker=marker, workers=None, trace=False, verbose=verbose)
    table = result["table"]

    view = Table(title=source.name)
    view.add_column("shape", justify="right", style="cyan")
    view.add_column("points", justify="right")
    for sid, count in table.summary().items():
        view.add_row(str(sid), str(count))
    console.print(view)

    bounds = table.bounds()
    if bounds is not None:
        xmin, ymin, xmax, ymax = bounds
        console.print(f"x: [{xmin:g}, {xmax:g}]  y: [{ymin:g}, {ymax:g}]")


if __name__ == "__main__":
    app()
