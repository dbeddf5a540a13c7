"""Pipeline entry points for tidyshapes.

Currently exposed:

- :func:`run_pipeline` — shape dump → tidy table, with optional CSV and
  figure export, implemented in ``tidy_pipeline.py``.
"""

from __future__ import annotations

from .tidy_pipeline import PipelineResult, run_pipeline

__all__ = ["run_pipeline", "PipelineResult"]
