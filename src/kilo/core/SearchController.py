# kilo/core/SearchController.py
"""SearchController.py
==================
Description:
-----------------------
Incremental substring search over the display text of the document.

The controller moves through three states::

    IDLE --start()--> PROMPTING --hit--> ACTIVE --confirm()/cancel()--> IDLE

While the prompt is open, every key event is fed to :meth:`handle_key`
together with the current query:

- Enter confirms and Escape cancels the session.
- Arrow Right/Down search forward from the current match, Arrow Left/Up
  search backward.
- Any other key re-runs the search whenever the query text differs from
  the one passed with the previous key, including after an empty query or
  a miss. A changed query always starts a fresh scan.

Resuming with an unchanged query first looks strictly after (forward) or
strictly before (backward) the current match within the same line, then
scans whole lines in the search direction, wrapping past either end of the
document. A new query is scanned starting at the cursor line.

Offsets found on display text are translated to raw columns with the
CoordinateMapper so the cursor lands on the right character in lines
containing tabs. A hit is shown by overlaying MATCH on the matched display
range; the overlay is cleared before the next search and when the session
ends.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kilo.core.CoordinateMapper import CoordinateMapper
from kilo.core.Keys import Key, KeyEvent
from kilo.core.LineStore import LineStore


class SearchState(Enum):
    IDLE = "idle"
    PROMPTING = "prompting"
    ACTIVE = "active"


@dataclass
class SearchSession:
    query: str = ""
    match_line: int = -1
    match_offset: int = -1
    direction: int = 1


@dataclass(frozen=True)
class SearchMatch:
    """A located occurrence: line index, raw column, display offset and length."""

    line: int
    column: int
    offset: int
    length: int


FORWARD_KEYS = frozenset({Key.ARROW_RIGHT, Key.ARROW_DOWN})
BACKWARD_KEYS = frozenset({Key.ARROW_LEFT, Key.ARROW_UP})


## ================= SearchController ==============================
class SearchController:
    def __init__(self, store: LineStore, mapper: Optional[CoordinateMapper] = None) -> None:
        self.store = store
        self.mapper = mapper or CoordinateMapper(store.renderer.tab_stop)
        self.state = SearchState.IDLE
        self.session: Optional[SearchSession] = None
        self._overlay_line: Optional[int] = None
        self._last_query = ""

    @property
    def active(self) -> bool:
        return self.state is not SearchState.IDLE

    # --- Session lifecycle ---
    def start(self) -> SearchSession:
        self._clear_overlay()
        self.session = SearchSession()
        self._last_query = ""
        self.state = SearchState.PROMPTING
        logging.debug("Search session started")
        return self.session

    def cancel(self) -> None:
        logging.debug("Search session cancelled")
        self._finish()

    def confirm(self) -> Optional[SearchMatch]:
        """Ends the session and returns the last match, if any."""
        result = self.current_match()
        logging.debug(f"Search session confirmed at {result}")
        self._finish()
        return result

    def _finish(self) -> None:
        self._clear_overlay()
        self.session = None
        self.state = SearchState.IDLE
        self._last_query = ""

    def current_match(self) -> Optional[SearchMatch]:
        s = self.session
        if s is None or s.match_line < 0:
            return None
        line = self.store.get(s.match_line)
        if line is None:
            return None
        column = self.mapper.display_to_raw(line.raw, s.match_offset)
        return SearchMatch(s.match_line, column, s.match_offset, len(s.query))

    # --- Key-driven entry point ---
    def handle_key(self, query: str, key: KeyEvent, cursor_line: int) -> Optional[SearchMatch]:
        """Reacts to one key pressed while the search prompt is open.

        Returns:
            The match the cursor should move to, or None when nothing moved.
        """
        if self.session is None:
            self.start()

        if key == Key.ESCAPE:
            self.cancel()
            return None
        if key == Key.ENTER:
            return self.confirm()

        changed = query != self._last_query
        self._last_query = query

        if key in FORWARD_KEYS:
            return self.search(query, 1, cursor_line)
        if key in BACKWARD_KEYS:
            return self.search(query, -1, cursor_line)

        if not changed:
            return None
        # An edited query never resumes from the previous match.
        self.session.match_line = -1
        self.session.match_offset = -1
        return self.search(query, 1, cursor_line)

    # --- Searching ---
    def search(self, query: str, direction: int, cursor_line: int) -> Optional[SearchMatch]:
        """Finds the next occurrence of *query* and records it in the session.

        An empty query or a miss leaves the session untouched.
        """
        if self.session is None:
            self.start()
        self._clear_overlay()

        if not query or not len(self.store):
            return None

        session = self.session
        direction = 1 if direction >= 0 else -1
        resuming = query == session.query and session.match_line >= 0

        hit = None
        if resuming:
            hit = self._search_within_match_line(query, direction)
            if hit is None:
                start = session.match_line + direction
                hit = self._scan_lines(query, start, direction)
        else:
            hit = self._scan_lines(query, cursor_line, direction)

        if hit is None:
            logging.debug(f"No match for {query!r}")
            return None

        line_index, offset = hit
        session.query = query
        session.match_line = line_index
        session.match_offset = offset
        session.direction = direction
        self.state = SearchState.ACTIVE

        self.store.highlight_match(line_index, offset, len(query))
        self._overlay_line = line_index
        return self.current_match()

    def _search_within_match_line(self, query: str, direction: int) -> Optional[tuple[int, int]]:
        s = self.session
        line = self.store.get(s.match_line)
        if line is None:
            return None
        if direction > 0:
            pos = line.display.find(query, s.match_offset + 1)
        else:
            pos = line.display.rfind(query, 0, s.match_offset + len(query) - 1) if s.match_offset > 0 else -1
        return (s.match_line, pos) if pos != -1 else None

    def _scan_lines(self, query: str, start: int, direction: int) -> Optional[tuple[int, int]]:
        n = len(self.store)
        index = start % n
        for _ in range(n):
            display = self.store[index].display
            pos = display.find(query) if direction > 0 else display.rfind(query)
            if pos != -1:
                return index, pos
            index = (index + direction) % n
        return None

    # --- Overlay bookkeeping ---
    def _clear_overlay(self) -> None:
        if self._overlay_line is not None:
            self.store.refresh_highlight(self._overlay_line)
            self._overlay_line = None

