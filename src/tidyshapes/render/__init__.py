"""Rendering collaborators that draw tidy shape tables."""

from __future__ import annotations

from .plotting import MatplotlibRenderer, PlotStyle, ShapeRenderer

__all__ = ["PlotStyle", "ShapeRenderer", "MatplotlibRenderer"]
