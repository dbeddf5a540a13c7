"""tidyshapes: turn shape-delimited coordinate dumps into tidy ``shape,x,y`` tables.

The public entry points are re-exported here for convenience:

- :class:`TidyCoordinateParser` and :func:`parse_text` for the core transform,
- :class:`TidyTable` / :class:`TidyRecord` for the result type,
- the typed error hierarchy rooted at :class:`TidyShapesError`.
"""

from __future__ import annotations

from tidyshapes.core.contracts.shapes import TidyRecord, TidyTable
from tidyshapes.core.errors import EmptyInputError, FormatError, ParseError, TidyShapesError
from tidyshapes.parsing.parser import TidyCoordinateParser, parse_text

__all__ = [
    "__version__",
    "TidyCoordinateParser",
    "parse_text",
    "TidyRecord",
    "TidyTable",
    "TidyShapesError",
    "FormatError",
    "ParseError",
    "EmptyInputError",
]
__version__ = "0.1.0"
