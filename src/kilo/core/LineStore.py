# kilo/core/LineStore.py
"""LineStore.py
==================
Description:
-----------------------
The ordered list of lines making up the open document, together with the
caches derived from each line's raw text.

Every :class:`Line` carries three views that must never drift apart:

- ``raw``: the text as stored in the file,
- ``display``: the tab-expanded text shown on screen,
- ``classes``: one :class:`Classification` per display position.

Raw text is only ever replaced through :meth:`LineStore._set_raw`, which
re-renders the line and re-runs highlighting (including the block-comment
cascade) before returning. Callers therefore always observe
``len(line.display) == len(line.classes)``.

Indices passed to the public operations are clamped to the nearest valid
value instead of raising; an out-of-range request on an empty store is a
no-op.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from kilo.core.Highlighter import Classification, Highlighter
from kilo.core.RenderEngine import RenderEngine


@dataclass(slots=True)
class Line:
    """One line of the document and its derived caches."""

    idx: int
    raw: str = ""
    display: str = ""
    classes: list[Classification] = field(default_factory=list)
    # True if the line ends inside an unterminated block comment.
    open_comment: bool = False
    # Block-comment state the line was last classified with; None until classified.
    comment_in: Optional[bool] = None

    def __len__(self) -> int:
        return len(self.raw)


## ================= LineStore ==============================
class LineStore:
    """Ordered, contiguously indexed collection of :class:`Line` objects."""

    def __init__(self, renderer: Optional[RenderEngine] = None, highlighter: Optional[Highlighter] = None) -> None:
        self.renderer = renderer or RenderEngine()
        self.highlighter = highlighter or Highlighter()
        self._lines: list[Line] = []
        self.modified: bool = False
        self.modification_count: int = 0

    # --- Container protocol ---
    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def __getitem__(self, index: int) -> Line:
        return self._lines[index]

    @property
    def lines(self) -> list[Line]:
        return self._lines

    def get(self, index: int) -> Optional[Line]:
        """Returns the line at *index*, or None if it does not exist."""
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return None

    # --- Internal helpers ---
    def _touch(self) -> None:
        self.modified = True
        self.modification_count += 1

    def _renumber(self, start: int) -> None:
        for i in range(start, len(self._lines)):
            self._lines[i].idx = i

    def _set_raw(self, line: Line, raw: str) -> None:
        """Sole writer of ``Line.raw``; refreshes the display and highlight caches."""
        line.raw = raw
        line.display = self.renderer.render(raw)
        self.highlighter.update(self._lines, line.idx)

    def _clamp_line(self, index: int) -> int:
        return max(0, min(index, len(self._lines) - 1))

    # --- Whole-document operations ---
    def load(self, lines: Iterable[str]) -> None:
        """Replaces the document with *lines* (newline-stripped) and marks it clean."""
        self._lines = []
        for i, text in enumerate(lines):
            self._lines.append(Line(idx=i, raw=text, display=self.renderer.render(text)))
        self.rehighlight_all()
        self.mark_clean()
        logging.debug(f"LineStore loaded {len(self._lines)} lines")

    def rehighlight_all(self) -> None:
        """Classifies every line from the top, e.g. after the profile changed."""
        state = False
        for line in self._lines:
            line.classes, line.open_comment = self.highlighter.classify(line.display, state)
            line.comment_in = state
            state = line.open_comment

    def serialize(self) -> str:
        """Joins all raw lines, each terminated by a newline."""
        return "".join(line.raw + "\n" for line in self._lines)

    def mark_clean(self) -> None:
        self.modified = False
        self.modification_count = 0

    # --- Line-level operations ---
    def insert_line(self, index: int, text: str = "") -> Line:
        """Inserts a new line holding *text* at *index* (clamped to ``[0, N]``)."""
        index = max(0, min(index, len(self._lines)))
        line = Line(idx=index)
        self._lines.insert(index, line)
        self._renumber(index + 1)
        self._set_raw(line, text)
        self._touch()
        return line

    def delete_line(self, index: int) -> None:
        """Removes the line at *index* (clamped); no-op on an empty store."""
        if not self._lines:
            return
        index = self._clamp_line(index)
        del self._lines[index]
        self._renumber(index)
        # The successor's incoming comment state came from the removed line.
        if index < len(self._lines):
            self.highlighter.update(self._lines, index)
        self._touch()

    # --- Character-level operations ---
    def insert_char(self, line_index: int, column: int, ch: str) -> None:
        """Inserts *ch* into a line; column is clamped to ``[0, len]``."""
        if not self._lines:
            self.insert_line(0, "")
        line = self._lines[self._clamp_line(line_index)]
        column = max(0, min(column, len(line.raw)))
        self._set_raw(line, line.raw[:column] + ch + line.raw[column:])
        self._touch()

    def delete_char(self, line_index: int, column: int) -> None:
        """Removes the character at *column*; no-op on an empty line."""
        if not self._lines:
            return
        line = self._lines[self._clamp_line(line_index)]
        if not line.raw:
            return
        column = max(0, min(column, len(line.raw) - 1))
        self._set_raw(line, line.raw[:column] + line.raw[column + 1:])
        self._touch()

    def split_line(self, line_index: int, column: int) -> None:
        """Breaks a line at *column*; the tail moves to a new following line."""
        if not self._lines:
            self.insert_line(0, "")
            return
        line_index = self._clamp_line(line_index)
        line = self._lines[line_index]
        column = max(0, min(column, len(line.raw)))
        head, tail = line.raw[:column], line.raw[column:]
        self._set_raw(line, head)
        self.insert_line(line_index + 1, tail)

    def merge_line_up(self, line_index: int) -> int:
        """Appends a line onto its predecessor and removes it.

        Returns:
            The predecessor's length before the merge (the new cursor column),
            or 0 when there is no predecessor.
        """
        if not self._lines:
            return 0
        line_index = self._clamp_line(line_index)
        if line_index == 0:
            return 0
        prev = self._lines[line_index - 1]
        join_col = len(prev.raw)
        tail = self._lines[line_index].raw
        self._set_raw(prev, prev.raw + tail)
        self.delete_line(line_index)
        return join_col

    # --- Match overlay ---
    def highlight_match(self, line_index: int, start: int, length: int) -> None:
        line = self.get(line_index)
        if line is not None:
            self.highlighter.apply_match(line, start, length)

    def refresh_highlight(self, line_index: int) -> None:
        """Re-classifies one line in place, dropping any match overlay."""
        line = self.get(line_index)
        if line is None:
            return
        starts = self._lines[line_index - 1].open_comment if line_index > 0 else False
        line.classes, _ = self.highlighter.classify(line.display, starts)
