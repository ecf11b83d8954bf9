# src/kilo/core/__init__.py
"""Public facade for kilo.core: re-export main classes from CamelCase modules.

Keeps one-class-per-file module names (LineStore.py, Highlighter.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .CoordinateMapper import CoordinateMapper  # noqa: F401
from .Highlighter import Classification, Highlighter  # noqa: F401
from .Keys import Key  # noqa: F401
from .Kilo import DocumentStatus, Kilo  # noqa: F401
from .LanguageProfile import LanguageProfile, ProfileRegistry  # noqa: F401
from .LineStore import Line, LineStore  # noqa: F401
from .RenderEngine import RenderEngine  # noqa: F401
from .SearchController import SearchController, SearchMatch, SearchState  # noqa: F401


__all__ = [
    "Classification",
    "CoordinateMapper",
    "DocumentStatus",
    "Highlighter",
    "Key",
    "Kilo",
    "LanguageProfile",
    "Line",
    "LineStore",
    "ProfileRegistry",
    "RenderEngine",
    "SearchController",
    "SearchMatch",
    "SearchState",
]
