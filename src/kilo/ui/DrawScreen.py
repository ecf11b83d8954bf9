# kilo/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders a :class:`kilo.core.Kilo` session with curses.

It is responsible for:
- initialising one colour pair per highlight classification,
- drawing the visible text rows with their classifications,
- drawing ``~`` filler rows and the welcome banner on an empty document,
- rendering the inverted status bar and the timed message bar,
- positioning the terminal cursor.

The screen layout is ``screen_rows`` text rows followed by the status bar and
the message bar. All layout decisions (scrolling, which slice of each line is
visible) are made by the editor core; this class only paints.
"""

import curses
import logging
import os
from typing import TYPE_CHECKING, Any

from kilo.core.Highlighter import Classification
from kilo.utils.utils import KILO_VERSION, hex_to_xterm

if TYPE_CHECKING:
    from kilo.core.Kilo import Kilo


# Default foreground per classification: (config name, 8-colour fallback, attribute)
COLOR_DEFINITIONS: dict[Classification, tuple[str, str, str]] = {
    Classification.NORMAL: ("normal", "COLOR_WHITE", "A_NORMAL"),
    Classification.COMMENT: ("comment", "COLOR_CYAN", "A_NORMAL"),
    Classification.MLCOMMENT: ("mlcomment", "COLOR_CYAN", "A_NORMAL"),
    Classification.KEYWORD1: ("keyword1", "COLOR_YELLOW", "A_NORMAL"),
    Classification.KEYWORD2: ("keyword2", "COLOR_GREEN", "A_NORMAL"),
    Classification.STRING: ("string", "COLOR_MAGENTA", "A_NORMAL"),
    Classification.NUMBER: ("number", "COLOR_RED", "A_NORMAL"),
    Classification.MATCH: ("match", "COLOR_BLUE", "A_NORMAL"),
}

MONOCHROME_ATTRS: dict[Classification, str] = {
    Classification.NORMAL: "A_NORMAL",
    Classification.COMMENT: "A_DIM",
    Classification.MLCOMMENT: "A_DIM",
    Classification.KEYWORD1: "A_BOLD",
    Classification.KEYWORD2: "A_BOLD",
    Classification.STRING: "A_NORMAL",
    Classification.NUMBER: "A_NORMAL",
    Classification.MATCH: "A_REVERSE",
}


## ================= class DrawScreen ==============================
class DrawScreen:
    """Paints the editor session onto a curses window.

    Attributes:
        stdscr (curses.window): The main curses window object.
        config (dict): Editor configuration dictionary.
        colors (dict): Classification mapped to a curses attribute.
    """

    def __init__(self, stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config = config
        self.colors: dict[Classification, int] = {}
        self.status_attr = 0
        self.init_colors()

    def init_colors(self) -> None:
        """Initializes curses color pairs with graceful degradation."""
        self.colors = {}
        self.status_attr = curses.A_REVERSE

        if not curses.has_colors() or curses.COLORS < 8:
            logging.warning(
                "Terminal has no or limited color support (< 8). Using monochrome attributes."
            )
            self.colors = {cls: getattr(curses, attr) for cls, attr in MONOCHROME_ATTRS.items()}
            return

        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error as exc:
            logging.warning(f"Could not start colour mode ({exc}); using monochrome attributes.")
            self.colors = {cls: getattr(curses, attr) for cls, attr in MONOCHROME_ATTRS.items()}
            return

        user_colors = self.config.get("colors", {})
        can_use_256_colors = curses.COLORS >= 256

        for pair_id, (cls, (name, color_8, attr_name)) in enumerate(COLOR_DEFINITIONS.items(), start=1):
            attr = getattr(curses, attr_name)
            if pair_id >= curses.COLOR_PAIRS:
                logging.warning(f"Ran out of color pairs. Cannot initialize '{name}'.")
                self.colors[cls] = attr
                continue

            fg = getattr(curses, color_8)
            if can_use_256_colors and name in user_colors:
                fg = hex_to_xterm(str(user_colors[name]))

            try:
                curses.init_pair(pair_id, fg, -1)
                self.colors[cls] = curses.color_pair(pair_id) | attr
            except curses.error as exc:
                logging.warning(f"init_pair failed for '{name}' ({exc}); using attribute only")
                self.colors[cls] = attr

    # --- Drawing ---
    def draw(self, editor: "Kilo") -> None:
        """The main screen drawing method."""
        try:
            height, width = self.stdscr.getmaxyx()
            editor.set_window_size(height, width)
            editor.scroll()

            self.stdscr.erase()
            self._draw_rows(editor)
            self._draw_status_bar(editor)
            self._draw_message_bar(editor)
            self._position_cursor(editor)
            self.stdscr.refresh()

        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)

    def _draw_rows(self, editor: "Kilo") -> None:
        for y, row in enumerate(editor.visible_rows()):
            if row.index is None:
                self._draw_filler(editor, y)
                continue

            normal = self.colors.get(Classification.NORMAL, 0)
            x = 0
            # Paint runs of equal classification in one call.
            while x < len(row.text):
                cls = row.classes[x]
                end = x + 1
                while end < len(row.text) and row.classes[end] == cls:
                    end += 1
                self._addstr(y, x, row.text[x:end], self.colors.get(cls, normal))
                x = end

    def _draw_filler(self, editor: "Kilo", y: int) -> None:
        if len(editor.store) == 0 and y == editor.screen_rows // 3:
            welcome = f"Kilo editor -- version {KILO_VERSION}"[: editor.screen_cols]
            padding = (editor.screen_cols - len(welcome)) // 2
            line = ("~" + " " * (padding - 1) if padding else "") + welcome
            self._addstr(y, 0, line, 0)
        else:
            self._addstr(y, 0, "~", 0)

    def _draw_status_bar(self, editor: "Kilo") -> None:
        """Inverted status bar: file name, line count and modified flag on the
        left; file type and cursor line on the right."""
        width = editor.screen_cols
        status = editor.status_summary()
        name = os.path.basename(status.filename) if status.filename else "[No Name]"
        left = f"{name[:20]} - {status.line_count} lines{' (modified)' if status.modified else ''}"
        right = f"{status.filetype or 'no ft'} | {status.cursor_line}/{status.line_count}"

        left = left[:width]
        if len(left) + len(right) <= width:
            bar = left + " " * (width - len(left) - len(right)) + right
        else:
            bar = left.ljust(width)
        self._addstr(editor.screen_rows, 0, bar, self.status_attr)

    def _draw_message_bar(self, editor: "Kilo") -> None:
        msg = editor.visible_status_message()
        if msg:
            self._addstr(editor.screen_rows + 1, 0, msg[: editor.screen_cols], 0)

    def _position_cursor(self, editor: "Kilo") -> None:
        y, x = editor.cursor_screen_position()
        try:
            self.stdscr.move(max(0, y), max(0, x))
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")

    def _addstr(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # Writing the bottom-right cell raises after the text is drawn.
            pass
