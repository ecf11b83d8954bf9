# kilo/core/RenderEngine.py
"""RenderEngine.py
==================
Derives the on-screen (display) form of a raw line by expanding tabs.

Every non-tab character is copied unchanged. A tab emits at least one space
and then pads with spaces until the display column is a multiple of the tab
stop, so ``"a\\tb"`` with the default stop of 8 renders as ``"a"`` followed by
seven spaces and ``"b"``.
"""

import logging

DEFAULT_TAB_STOP = 8


class RenderEngine:
    """Tab expansion with a fixed tab stop."""

    def __init__(self, tab_stop: int = DEFAULT_TAB_STOP) -> None:
        if not isinstance(tab_stop, int) or isinstance(tab_stop, bool) or tab_stop < 1:
            logging.warning(
                f"Invalid tab_stop {tab_stop!r}; falling back to {DEFAULT_TAB_STOP}"
            )
            tab_stop = DEFAULT_TAB_STOP
        self.tab_stop = tab_stop

    def render(self, raw: str) -> str:
        """Returns the display text for *raw*."""
        if "\t" not in raw:
            return raw

        out: list[str] = []
        col = 0
        for ch in raw:
            if ch == "\t":
                out.append(" ")
                col += 1
                while col % self.tab_stop:
                    out.append(" ")
                    col += 1
            else:
                out.append(ch)
                col += 1
        return "".join(out)
