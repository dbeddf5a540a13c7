"""Core package for tidyshapes: settings, contracts, errors and stage tracing.

Typical imports:
    from tidyshapes.core.settings import settings, load_settings, Settings, get_logger
    from tidyshapes.core.errors import FormatError, ParseError, EmptyInputError
"""

from __future__ import annotations

__all__ = ["__doc__"]
