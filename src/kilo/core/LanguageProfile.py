# kilo/core/LanguageProfile.py
"""LanguageProfile.py
==================
Per-file-type highlighting profiles and the registry that selects them.

A profile is immutable once built. The registry is constructed a single time
from the ``[syntax]`` section of the configuration and is never mutated
afterwards; selecting a profile for a filename is a pure lookup.

Keywords ending in ``"|"`` are secondary (tier-2) keywords, conventionally
type names, and are highlighted with a different colour.
"""

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


## ================= LanguageProfile ==============================
@dataclass(frozen=True)
class LanguageProfile:
    """Highlighting rules for one file type.

    Attributes:
        name: Filetype label shown in the status bar.
        filematch: Patterns matched against the filename. A pattern starting
            with ``"."`` is compared with the extension; a pattern containing
            glob characters is matched with :mod:`fnmatch`; anything else is a
            substring match on the base name.
        keywords: Declared keywords in order; a trailing ``"|"`` marks tier 2.
        singleline_comment: Marker starting a comment that runs to end of line.
        multiline_comment_start: Opening block-comment marker.
        multiline_comment_end: Closing block-comment marker.
        highlight_numbers: Whether numeric literals are classified.
        highlight_strings: Whether quoted strings are classified.
    """

    name: str
    filematch: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    singleline_comment: Optional[str] = None
    multiline_comment_start: Optional[str] = None
    multiline_comment_end: Optional[str] = None
    highlight_numbers: bool = True
    highlight_strings: bool = True
    parsed_keywords: tuple[tuple[str, bool], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parsed = []
        for kw in self.keywords:
            secondary = kw.endswith("|")
            text = kw[:-1] if secondary else kw
            if text:
                parsed.append((text, secondary))
        object.__setattr__(self, "parsed_keywords", tuple(parsed))

    @property
    def has_block_comments(self) -> bool:
        return bool(self.multiline_comment_start) and bool(self.multiline_comment_end)

    def matches(self, filename: Optional[str]) -> bool:
        """Returns True if *filename* belongs to this file type."""
        if not filename:
            return False
        base = os.path.basename(filename)
        _, ext = os.path.splitext(base)
        for pattern in self.filematch:
            if pattern.startswith("."):
                if ext == pattern:
                    return True
            elif any(c in pattern for c in "*?["):
                if fnmatch.fnmatch(base, pattern):
                    return True
            elif pattern in base:
                return True
        return False

    @classmethod
    def from_config(cls, name: str, table: Mapping[str, Any]) -> "LanguageProfile":
        """Builds a profile from a ``[syntax.<name>]`` configuration table.

        Raises:
            ValueError: If the table has the wrong shape.
        """
        if not isinstance(table, Mapping):
            raise ValueError(f"syntax.{name} must be a table, got {type(table).__name__}")

        filematch = table.get("filematch", [])
        keywords = table.get("keywords", [])
        if isinstance(filematch, str):
            filematch = [filematch]
        if not all(isinstance(p, str) for p in filematch):
            raise ValueError(f"syntax.{name}.filematch must be a list of strings")
        if not all(isinstance(k, str) for k in keywords):
            raise ValueError(f"syntax.{name}.keywords must be a list of strings")

        ml_start = ml_end = None
        multiline = table.get("multiline_comment")
        if multiline:
            if not isinstance(multiline, (list, tuple)) or len(multiline) != 2:
                raise ValueError(f"syntax.{name}.multiline_comment must be a [start, end] pair")
            ml_start, ml_end = str(multiline[0]), str(multiline[1])

        return cls(
            name=table.get("name", name),
            filematch=tuple(filematch),
            keywords=tuple(keywords),
            singleline_comment=table.get("singleline_comment") or None,
            multiline_comment_start=ml_start or None,
            multiline_comment_end=ml_end or None,
            highlight_numbers=bool(table.get("highlight_numbers", True)),
            highlight_strings=bool(table.get("highlight_strings", True)),
        )


## ================= ProfileRegistry ==============================
class ProfileRegistry:
    """Immutable, ordered collection of language profiles.

    Selection walks the profiles in declaration order and returns the first
    one whose patterns match the filename.
    """

    def __init__(self, profiles: Optional[list[LanguageProfile]] = None) -> None:
        self._profiles: tuple[LanguageProfile, ...] = tuple(profiles or ())
        self._by_name: Mapping[str, LanguageProfile] = MappingProxyType(
            {p.name: p for p in self._profiles}
        )

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self):
        return iter(self._profiles)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._by_name)

    def get(self, name: str) -> Optional[LanguageProfile]:
        return self._by_name.get(name)

    def select(self, filename: Optional[str]) -> Optional[LanguageProfile]:
        """Returns the profile for *filename*, or None for plain text."""
        for profile in self._profiles:
            if profile.matches(filename):
                logging.debug(f"Selected syntax profile '{profile.name}' for '{filename}'")
                return profile
        return None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ProfileRegistry":
        """Builds the registry from ``config["syntax"]``.

        Malformed tables are skipped with a warning so that one bad user entry
        does not disable highlighting for every other file type.
        """
        profiles = []
        for name, table in (config.get("syntax") or {}).items():
            try:
                profiles.append(LanguageProfile.from_config(name, table))
            except ValueError as e:
                logging.warning(f"Ignoring syntax profile '{name}': {e}")
        logging.debug(f"Profile registry built with {len(profiles)} profile(s)")
        return cls(profiles)
