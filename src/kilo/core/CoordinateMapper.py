# kilo/core/CoordinateMapper.py
"""CoordinateMapper.py
==================
Conversion between raw columns (indices into the stored line) and display
columns (indices into the tab-expanded line).

Both directions walk the raw text with the same rule the RenderEngine uses:
an ordinary character advances the display column by one and a tab advances
it to the next multiple of the tab stop.
"""

from kilo.core.RenderEngine import DEFAULT_TAB_STOP


class CoordinateMapper:
    def __init__(self, tab_stop: int = DEFAULT_TAB_STOP) -> None:
        self.tab_stop = tab_stop

    def _advance(self, col: int, ch: str) -> int:
        if ch == "\t":
            return col + (self.tab_stop - col % self.tab_stop)
        return col + 1

    def raw_to_display(self, raw: str, raw_col: int) -> int:
        """Display column of the character at *raw_col* (clamped to the line)."""
        raw_col = max(0, min(raw_col, len(raw)))
        col = 0
        for ch in raw[:raw_col]:
            col = self._advance(col, ch)
        return col

    def display_to_raw(self, raw: str, display_col: int) -> int:
        """Raw index of the character whose display span covers *display_col*.

        Columns past the end of the line map to ``len(raw)``.
        """
        col = 0
        for idx, ch in enumerate(raw):
            col = self._advance(col, ch)
            if col > display_col:
                return idx
        return len(raw)
