"""
Rendering collaborator for tidy shape tables.

The parser produces data; drawing is delegated to a charting library behind a
small capability interface, :class:`ShapeRenderer`:

1. ``plot_points``   - unconnected scatter of every point.
2. ``plot_paths``    - one connected path per shape, in table row order.
3. ``plot_polygons`` - one filled closed region per shape with its own fill
   color, the connecting path drawn on top, and no legend.

:class:`MatplotlibRenderer` implements it on ``matplotlib.figure.Figure``
objects directly (no ``pyplot`` state machine), so it works headless and in
threads. Every method returns the ``Axes`` it drew on; pass ``ax=`` to layer
several calls on the same axes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Literal, Protocol

import matplotlib
from matplotlib.axes import Axes
from matplotlib.colors import ListedColormap
from matplotlib.figure import Figure
from matplotlib.patches import Polygon

from tidyshapes.core.contracts.shapes import TidyTable
from tidyshapes.core.settings import get_logger

PlotStyle = Literal["points", "paths", "polygons"]
ColorSpec = Any

# Lookup-table size of matplotlib's continuous colormaps
_CONTINUOUS_LUT_SIZE = 256

logger = get_logger(__name__)


def _unzip(pts: Sequence[tuple[float, float]]) -> tuple[list[float], list[float]]:
    return [p[0] for p in pts], [p[1] for p in pts]


class ShapeRenderer(Protocol):
    """Capability interface of a rendering engine for tidy tables."""

    def plot_points(self, table: TidyTable, ax: Axes | None = None) -> Axes: ...

    def plot_paths(self, table: TidyTable, ax: Axes | None = None) -> Axes: ...

    def plot_polygons(
        self,
        table: TidyTable,
        ax: Axes | None = None,
        colors: Mapping[int, ColorSpec] | Sequence[ColorSpec] | None = None,
    ) -> Axes: ...


class MatplotlibRenderer:
    """matplotlib-backed :class:`ShapeRenderer`.

    Parameters
    ----------
    figsize : tuple[float, float]
        Size of figures created when no ``ax`` is passed.
    cmap : str
        Colormap used for per-shape fill colors.
    line_color : ColorSpec
        Color of points and connecting paths.
    """

    def __init__(
        self,
        *,
        figsize: tuple[float, float] = (6.0, 6.0),
        cmap: str = "tab10",
        line_color: ColorSpec = "black",
        line_width: float = 1.0,
    ) -> None:
        self.figsize = figsize
        self.cmap = cmap
        self.line_color = line_color
        self.line_width = line_width

    # ----- Axes helpers ------------------------------------------------------
    def new_axes(self) -> Axes:
        """Create a fresh figure with a single equal-aspect axes."""
        fig = Figure(figsize=self.figsize)
        ax = fig.add_subplot()
        ax.set_aspect("equal", adjustable="datalim")
        return ax

    def _axes(self, ax: Axes | None) -> Axes:
        return ax if ax is not None else self.new_axes()

    def shape_colors(self, shape_ids: Sequence[int]) -> dict[int, ColorSpec]:
        """Assign one colormap color per shape id.

        Qualitative maps (``tab10``, ``Set2``, ...) are stepped entry by entry.
        Continuous maps, including 256-entry listed ones such as ``viridis``,
        are sampled evenly across their full range.
        """
        cmap = matplotlib.colormaps[self.cmap]
        n = len(shape_ids)
        out: dict[int, ColorSpec] = {}
        for i, sid in enumerate(shape_ids):
            if isinstance(cmap, ListedColormap) and cmap.N < _CONTINUOUS_LUT_SIZE:
                out[sid] = cmap(i % cmap.N)
            else:
                out[sid] = cmap(i / max(n - 1, 1))
        return out

    # ----- Capabilities ------------------------------------------------------
    def plot_points(self, table: TidyTable, ax: Axes | None = None) -> Axes:
        """Scatter all points without connecting them."""
        ax = self._axes(ax)
        _, xs, ys = table.columns()
        ax.scatter(xs, ys, s=8, color=self.line_color)
        return ax

    def plot_paths(self, table: TidyTable, ax: Axes | None = None) -> Axes:
        """Draw one open path per shape following row order."""
        ax = self._axes(ax)
        for pts in table.groups().values():
            xs, ys = _unzip(pts)
            ax.plot(xs, ys, color=self.line_color, linewidth=self.line_width)
        return ax

    def plot_polygons(
        self,
        table: TidyTable,
        ax: Axes | None = None,
        colors: Mapping[int, ColorSpec] | Sequence[ColorSpec] | None = None,
    ) -> Axes:
        """Fill each shape as a closed polygon and overlay its path.

        ``colors`` may map shape id → color, or list colors in shape order.
        Missing entries fall back to the renderer's colormap.
        """
        ax = self._axes(ax)
        groups = table.groups()
        fills = self.shape_colors(list(groups))
        if isinstance(colors, Mapping):
            fills.update(colors)
        elif colors is not None:
            fills.update(zip(groups, colors, strict=False))

        for sid, pts in groups.items():
            ax.add_patch(Polygon(pts, closed=True, facecolor=fills[sid], edgecolor="none"))
            xs, ys = _unzip(pts)
            ax.plot(xs, ys, color=self.line_color, linewidth=self.line_width)
        ax.autoscale_view()
        legend = ax.get_legend()
        if legend is not None:
            legend.remove()
        return ax

    def render(self, table: TidyTable, style: PlotStyle = "polygons") -> Axes:
        """Dispatch to one of the three capabilities by name."""
        if style == "points":
            return self.plot_points(table)
        if style == "paths":
            return self.plot_paths(table)
        if style == "polygons":
            return self.plot_polygons(table)
        raise ValueError(f"unknown plot style {style!r}")

    # ----- Output ------------------------------------------------------------
    def save(self, ax: Axes, path: str | Path, *, dpi: int = 150) -> Path:
        """Save the figure owning ``ax`` and return the written path."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        ax.figure.savefig(out, dpi=dpi, bbox_inches="tight")
        logger.info("Saved figure to %s", out)
        return out


__all__ = ["PlotStyle", "ShapeRenderer", "MatplotlibRenderer"]
