# kilo/core/Highlighter.py
"""Highlighter.py
==================
Description:
-----------------------
Per-line syntax classification driven by the active LanguageProfile.

Each display position of a line receives a :class:`Classification`. A line is
scanned left to right exactly once, carrying four pieces of state:

- ``prev_sep``: whether the previous position was a separator (starts True),
- ``in_string``: the quote character of the open string, or None,
- ``in_comment``: whether a block comment is open (seeded from the previous
  line's ``open_comment`` flag),
- the classification of the previous position.

At each position the first matching rule wins:

1. Single-line comment marker (outside strings and block comments): the rest
   of the line is COMMENT.
2. Block comments: inside one every position is MLCOMMENT until the end
   marker; outside one, the start marker opens it (not inside a string).
3. Strings: a ``"`` or ``'`` opens a string that runs to the same quote.
4. Numbers: a digit after a separator or another number, or a ``.`` after a
   number.
5. Keywords: only after a separator, and only when the character following
   the keyword is itself a separator.
6. Otherwise the position stays NORMAL.

Cross-line propagation:
-----------------------
Whether a line ends inside an open block comment changes how the following
line must be classified. :meth:`Highlighter.update` therefore re-classifies
forward, one line at a time, for as long as the state a line was last
classified with differs from what its predecessor now hands it. The loop is
iterative so that a single edit near the top of a long file cannot exhaust
the call stack.
"""

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Optional, Sequence

from kilo.core.LanguageProfile import LanguageProfile

if TYPE_CHECKING:
    from kilo.core.LineStore import Line


class Classification(IntEnum):
    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7


SEPARATORS = frozenset(",.()+-/*=~%<>[];")


def is_separator(ch: str) -> bool:
    """Whitespace, end of line (empty string or NUL) or punctuation separator."""
    return ch == "" or ch == "\0" or ch.isspace() or ch in SEPARATORS


def _char_at(text: str, i: int) -> str:
    return text[i] if i < len(text) else ""


## ================= Highlighter ==============================
class Highlighter:
    """Stateless per-line classifier plus the forward cascade over a line list."""

    def __init__(self, profile: Optional[LanguageProfile] = None) -> None:
        self.profile = profile

    def set_profile(self, profile: Optional[LanguageProfile]) -> None:
        self.profile = profile
        logging.debug(
            f"Highlighter profile set to {profile.name if profile else 'plain text'}"
        )

    # --- Single-line scan ---
    def classify(self, display: str, starts_in_comment: bool = False) -> tuple[list[Classification], bool]:
        """Classifies *display* and reports whether it ends inside a block comment.

        Args:
            display: Tab-expanded text of the line.
            starts_in_comment: Whether the previous line ended inside an open
                block comment.

        Returns:
            A ``(classes, ends_in_comment)`` pair; ``len(classes) == len(display)``.
        """
        n = len(display)
        classes = [Classification.NORMAL] * n
        profile = self.profile
        if profile is None:
            return classes, False

        scs = profile.singleline_comment or ""
        mcs = profile.multiline_comment_start or ""
        mce = profile.multiline_comment_end or ""
        block_enabled = profile.has_block_comments

        prev_sep = True
        in_string: Optional[str] = None
        in_comment = starts_in_comment if block_enabled else False

        i = 0
        while i < n:
            ch = display[i]
            prev_cls = classes[i - 1] if i > 0 else Classification.NORMAL

            if scs and in_string is None and not in_comment:
                if display.startswith(scs, i):
                    for j in range(i, n):
                        classes[j] = Classification.COMMENT
                    break

            if block_enabled and in_string is None:
                if in_comment:
                    classes[i] = Classification.MLCOMMENT
                    if display.startswith(mce, i):
                        end = min(i + len(mce), n)
                        for j in range(i, end):
                            classes[j] = Classification.MLCOMMENT
                        i = end
                        in_comment = False
                        prev_sep = True
                    else:
                        i += 1
                    continue
                if display.startswith(mcs, i):
                    end = min(i + len(mcs), n)
                    for j in range(i, end):
                        classes[j] = Classification.MLCOMMENT
                    i = end
                    in_comment = True
                    continue

            if profile.highlight_strings:
                if in_string is not None:
                    classes[i] = Classification.STRING
                    if ch == in_string:
                        in_string = None
                    i += 1
                    prev_sep = True
                    continue
                if ch in ('"', "'"):
                    in_string = ch
                    classes[i] = Classification.STRING
                    i += 1
                    continue

            if profile.highlight_numbers:
                if ("0" <= ch <= "9" and (prev_sep or prev_cls == Classification.NUMBER)) or (
                    ch == "." and prev_cls == Classification.NUMBER
                ):
                    classes[i] = Classification.NUMBER
                    i += 1
                    prev_sep = False
                    continue

            if prev_sep:
                matched = self._match_keyword(display, i)
                if matched is not None:
                    length, secondary = matched
                    kind = Classification.KEYWORD2 if secondary else Classification.KEYWORD1
                    for j in range(i, i + length):
                        classes[j] = kind
                    i += length
                    prev_sep = False
                    continue

            prev_sep = is_separator(ch)
            i += 1

        return classes, in_comment

    def _match_keyword(self, display: str, i: int) -> Optional[tuple[int, bool]]:
        for text, secondary in self.profile.parsed_keywords:
            if display.startswith(text, i) and is_separator(_char_at(display, i + len(text))):
                return len(text), secondary
        return None

    # --- Cascade over the store ---
    def update(self, lines: Sequence["Line"], index: int) -> int:
        """Re-classifies ``lines[index]`` and every following line whose
        incoming block-comment state is now stale.

        Returns:
            The number of lines that were classified.
        """
        if not 0 <= index < len(lines):
            return 0

        count = 0
        i = index
        while True:
            line = lines[i]
            starts = lines[i - 1].open_comment if i > 0 else False
            line.classes, line.open_comment = self.classify(line.display, starts)
            line.comment_in = starts
            count += 1

            nxt = i + 1
            if nxt >= len(lines) or lines[nxt].comment_in == line.open_comment:
                break
            i = nxt

        if count > 1:
            logging.debug(f"Highlight cascade from line {index} touched {count} lines")
        return count

    def apply_match(self, line: "Line", start: int, length: int) -> None:
        """Overlays MATCH on ``[start, start + length)`` of a line's classes.

        The overlay is not part of the cached classification; re-classifying
        the line removes it.
        """
        end = min(start + length, len(line.classes))
        for j in range(max(0, start), end):
            line.classes[j] = Classification.MATCH
