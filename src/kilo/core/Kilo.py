# kilo/core/Kilo.py
"""Kilo.py
==================
Description:
-----------------------
The editor session: one open document plus everything needed to edit it.

A single :class:`Kilo` instance owns the LineStore (with its RenderEngine and
Highlighter), the CoordinateMapper, the ProfileRegistry, the
SearchController, the cursor, the viewport and the status message. It is
passed explicitly to the terminal front-end; nothing is kept in module
globals.

The class never touches curses. Input arrives as logical key events through
``read_key`` and the screen is redrawn through ``refresh``, both supplied by
the caller (``main.py`` wires them to ``KeyBinder.get_key`` and
``DrawScreen.draw``). Without them the session can still be driven directly
with :meth:`process_key`, which is how the tests exercise it.

Coordinates:
    - ``cx``: raw column of the cursor in line ``cy``.
    - ``cy``: line index; ``cy == len(store)`` is the virtual line after the end.
    - ``rx``: display column of the cursor, recomputed by :meth:`scroll`.
    - ``row_offset``/``col_offset``: first visible line / display column.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import chardet

from kilo.core.CoordinateMapper import CoordinateMapper
from kilo.core.Highlighter import Classification, Highlighter
from kilo.core.Keys import ARROW_KEYS, Key, KeyEvent, is_printable, parse_key_spec
from kilo.core.LanguageProfile import LanguageProfile, ProfileRegistry
from kilo.core.LineStore import LineStore
from kilo.core.RenderEngine import RenderEngine
from kilo.core.SearchController import SearchController
from kilo.utils.utils import DEFAULT_CONFIG, deep_merge

logger = logging.getLogger("kilo")

STATUS_ROWS = 2  # status bar + message bar


@dataclass(frozen=True)
class DocumentStatus:
    """Snapshot of document state for the status bar."""

    filename: Optional[str]
    line_count: int
    modified: bool
    modification_count: int
    filetype: Optional[str]
    cursor_line: int


@dataclass(frozen=True)
class VisibleRow:
    """One screen row of text; ``index`` is None past the end of the document."""

    index: Optional[int]
    text: str = ""
    classes: tuple[Classification, ...] = ()


## ================= Kilo ==============================
class Kilo:
    """Editor session tying the core components to cursor, viewport and files."""

    ACTIONS = ("quit", "save_file", "find", "refresh")

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        read_key: Optional[Callable[[], KeyEvent]] = None,
        refresh: Optional[Callable[["Kilo"], None]] = None,
    ) -> None:
        self.config: dict[str, Any] = deep_merge(DEFAULT_CONFIG, config or {})
        editor_cfg = self.config.get("editor", {})

        self.renderer = RenderEngine(editor_cfg.get("tab_stop", 8))
        self.mapper = CoordinateMapper(self.renderer.tab_stop)
        self.highlighter = Highlighter()
        self.store = LineStore(self.renderer, self.highlighter)
        self.registry = ProfileRegistry.from_config(self.config)
        self.search = SearchController(self.store, self.mapper)

        self.read_key = read_key
        self.refresh = refresh

        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.row_offset = 0
        self.col_offset = 0
        self.screen_rows = 22
        self.screen_cols = 80

        self.filename: Optional[str] = None
        self.encoding = "utf-8"
        self.status_message = ""
        self.status_time = 0.0
        self.status_timeout = float(editor_cfg.get("status_timeout", 5))

        self.quit_times_default = int(editor_cfg.get("quit_times", 3))
        self.quit_times = self.quit_times_default
        self.running = False

        self.keybindings = self._load_keybindings()
        self.action_map: dict[str, Callable[[], None]] = {
            "quit": self.quit,
            "save_file": self.save_file,
            "find": self.find,
            "refresh": lambda: None,
        }
        logger.debug("Kilo session initialized (tab_stop=%d)", self.renderer.tab_stop)

    # --- Configuration helpers ---
    def _load_keybindings(self) -> dict[KeyEvent, str]:
        """Maps logical keys to action names from ``config["keybindings"]``."""
        bindings: dict[KeyEvent, str] = {}
        for action, specs in self.config.get("keybindings", {}).items():
            if action not in self.ACTIONS:
                logging.warning(f"Unknown keybinding action '{action}' ignored")
                continue
            for spec in specs if isinstance(specs, list) else [specs]:
                try:
                    bindings[parse_key_spec(spec)] = action
                except ValueError as e:
                    logging.warning(f"Invalid key '{spec}' for action '{action}': {e}")
        return bindings

    def key_label(self, action: str) -> str:
        """Human-readable label of the first key bound to *action* (``Ctrl-Q``)."""
        for key, bound in self.keybindings.items():
            if bound == action:
                name = key.value if isinstance(key, Key) else key
                if name.startswith("ctrl+"):
                    return f"Ctrl-{name[5:].upper()}"
                return name.capitalize()
        return action

    @property
    def profile(self) -> Optional[LanguageProfile]:
        return self.highlighter.profile

    def select_profile(self) -> None:
        """Picks the profile for the current filename and re-highlights."""
        profile = self.registry.select(self.filename)
        if profile is not self.highlighter.profile:
            self.highlighter.set_profile(profile)
            self.store.rehighlight_all()

    # --- Status message ---
    def set_status_message(self, message: str) -> None:
        self.status_message = str(message)
        self.status_time = time.time()
        if message:
            logging.debug(f"Status message: {self.status_message!r}")

    def visible_status_message(self, now: Optional[float] = None) -> str:
        """The status message while it is younger than the timeout, else ''."""
        now = time.time() if now is None else now
        if self.status_message and now - self.status_time < self.status_timeout:
            return self.status_message
        return ""

    def status_summary(self) -> DocumentStatus:
        return DocumentStatus(
            filename=self.filename,
            line_count=len(self.store),
            modified=self.store.modified,
            modification_count=self.store.modification_count,
            filetype=self.profile.name if self.profile else None,
            cursor_line=self.cy + 1,
        )

    # --- File I/O ---
    def _read_lines(self, path: str) -> list[str]:
        """Reads *path*, guessing the encoding with chardet, and splits it into lines."""
        with open(path, "rb") as f:
            data = f.read()
        if not data:
            return []

        guess = chardet.detect(data[: 1024 * 20])
        encoding_guess = guess.get("encoding")
        confidence = guess.get("confidence") or 0.0
        logging.debug(
            f"Chardet detected encoding '{encoding_guess}' with confidence {confidence:.2f} for '{path}'."
        )

        attempts: list[tuple[str, str]] = []
        if encoding_guess and confidence >= 0.75:
            attempts.append((encoding_guess, "strict"))
        for pair in (("utf-8", "strict"), ("latin-1", "strict"), ("utf-8", "replace")):
            if pair not in attempts:
                attempts.append(pair)

        text = None
        for encoding, errors in attempts:
            try:
                text = data.decode(encoding, errors=errors)
                self.encoding = encoding
                break
            except (UnicodeDecodeError, LookupError) as e:
                logging.warning(f"Failed to decode '{path}' as {encoding} ({errors}): {e}")
        if text is None:
            text = data.decode("utf-8", errors="replace")

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    def open_file(self, path: str) -> bool:
        """Loads *path* into the store; a missing file opens an empty named buffer.

        Returns:
            True if the buffer now refers to *path*.
        """
        self.filename = path
        self.encoding = "utf-8"
        self.highlighter.set_profile(self.registry.select(path))
        try:
            lines = self._read_lines(path)
            logger.info(f"Opened '{path}' ({len(lines)} lines, {self.encoding})")
        except FileNotFoundError:
            lines = []
            logger.info(f"'{path}' does not exist; starting an empty buffer")
            self.set_status_message(f"New file: {os.path.basename(path)}")
        except OSError as e:
            logging.error(f"Could not open '{path}': {e}", exc_info=True)
            self.set_status_message(f"Can't open {os.path.basename(path)}: {e.strerror or e}")
            self.filename = None
            self.highlighter.set_profile(None)
            lines = []

        self.store.load(lines)
        self.cx = self.cy = self.rx = 0
        self.row_offset = self.col_offset = 0
        return self.filename is not None

    def save_file(self) -> bool:
        """Writes the buffer to disk, prompting for a name when it has none."""
        if not self.filename:
            name = self.prompt("Save as: {} (ESC to cancel)")
            if name is None:
                self.set_status_message("Save aborted")
                return False
            self.filename = name
            self.select_profile()

        data = self.store.serialize()
        try:
            with open(self.filename, "w", encoding=self.encoding, errors="replace", newline="") as f:
                f.write(data)
        except OSError as e:
            logging.error(f"Failed to save '{self.filename}': {e}", exc_info=True)
            self.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            return False

        written = len(data.encode(self.encoding, errors="replace"))
        self.store.mark_clean()
        logger.info(f"Saved '{self.filename}' ({written} bytes)")
        self.set_status_message(f"{written} bytes written to disk")
        return True

    # --- Input ---
    def _refresh(self) -> None:
        if self.refresh is not None:
            self.refresh(self)

    def _read_key(self) -> Optional[KeyEvent]:
        if self.read_key is None:
            return None
        return self.read_key()

    def prompt(
        self,
        template: str,
        callback: Optional[Callable[[str, KeyEvent], None]] = None,
    ) -> Optional[str]:
        """Collects a line of input in the message bar.

        *template* holds a single ``{}`` placeholder for the text typed so far.
        The callback, if any, runs after every key with the current buffer.

        Returns:
            The entered text, or None if the prompt was cancelled.
        """
        buf = ""
        while True:
            self.set_status_message(template.format(buf))
            self._refresh()
            key = self._read_key()
            if key is None:
                logging.warning("Prompt has no input source; cancelling")
                self.set_status_message("")
                return None

            if key in (Key.BACKSPACE, Key.DELETE):
                buf = buf[:-1]
            elif key == Key.ESCAPE:
                self.set_status_message("")
                if callback:
                    callback(buf, key)
                return None
            elif key == Key.ENTER:
                if not buf:
                    continue
                self.set_status_message("")
                if callback:
                    callback(buf, key)
                return buf
            elif is_printable(key) and key != "\t":
                buf += key

            if callback:
                callback(buf, key)

    def find(self) -> None:
        """Interactive incremental search driven from the prompt."""
        self.search.start()
        self.prompt("Search: {} (Use ESC/Arrows/Enter)", self._find_callback)
        if self.search.active:
            self.search.cancel()

    def _find_callback(self, query: str, key: KeyEvent) -> None:
        match = self.search.handle_key(query, key, self.cy)
        if match is None:
            return
        self.cy = match.line
        self.cx = match.column
        # Forces scroll() to bring the match line to the top of the screen.
        self.row_offset = len(self.store)

    # --- Editing operations ---
    def insert_char(self, ch: str) -> None:
        if self.cy == len(self.store):
            self.store.insert_line(len(self.store), "")
        self.store.insert_char(self.cy, self.cx, ch)
        self.cx += 1

    def insert_newline(self) -> None:
        if self.cx == 0:
            self.store.insert_line(self.cy, "")
        else:
            self.store.split_line(self.cy, self.cx)
        self.cy += 1
        self.cx = 0

    def delete_char(self) -> None:
        """Backspace: removes the character left of the cursor or joins lines."""
        if self.cy == len(self.store):
            return
        if self.cx == 0 and self.cy == 0:
            return
        if self.cx > 0:
            self.store.delete_char(self.cy, self.cx - 1)
            self.cx -= 1
        else:
            self.cx = self.store.merge_line_up(self.cy)
            self.cy -= 1

    # --- Cursor movement ---
    def move_cursor(self, key: KeyEvent) -> None:
        line = self.store.get(self.cy)
        if key == Key.ARROW_LEFT:
            if self.cx != 0:
                self.cx -= 1
            elif self.cy > 0:
                self.cy -= 1
                self.cx = len(self.store[self.cy].raw)
        elif key == Key.ARROW_RIGHT:
            if line is not None and self.cx < len(line.raw):
                self.cx += 1
            elif line is not None and self.cx == len(line.raw):
                self.cy += 1
                self.cx = 0
        elif key == Key.ARROW_UP:
            if self.cy != 0:
                self.cy -= 1
        elif key == Key.ARROW_DOWN:
            if self.cy < len(self.store):
                self.cy += 1

        line = self.store.get(self.cy)
        row_len = len(line.raw) if line is not None else 0
        if self.cx > row_len:
            self.cx = row_len

    def page(self, key: KeyEvent) -> None:
        if key == Key.PAGE_UP:
            self.cy = self.row_offset
        else:
            self.cy = min(self.row_offset + self.screen_rows - 1, len(self.store))
        direction = Key.ARROW_UP if key == Key.PAGE_UP else Key.ARROW_DOWN
        for _ in range(self.screen_rows):
            self.move_cursor(direction)

    def quit(self) -> None:
        if self.store.modified and self.quit_times > 0:
            self.set_status_message(
                f"WARNING!!! File has unsaved changes. "
                f"Press {self.key_label('quit')} {self.quit_times} more times to quit."
            )
            self.quit_times -= 1
            return
        logger.info("Quit requested; leaving main loop")
        self.running = False

    def process_key(self, key: Optional[KeyEvent]) -> None:
        """Handles one logical key event."""
        if key is None:
            return

        action = self.keybindings.get(key)
        if action == "quit":
            self.quit()
            return
        if action is not None:
            self.action_map[action]()
        elif key == Key.ENTER:
            self.insert_newline()
        elif key == Key.HOME:
            self.cx = 0
        elif key == Key.END:
            line = self.store.get(self.cy)
            if line is not None:
                self.cx = len(line.raw)
        elif key in (Key.BACKSPACE, Key.DELETE):
            if key == Key.DELETE:
                self.move_cursor(Key.ARROW_RIGHT)
            self.delete_char()
        elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
            self.page(key)
        elif key in ARROW_KEYS:
            self.move_cursor(key)
        elif key in (Key.ESCAPE, Key.RESIZE):
            pass
        elif is_printable(key):
            self.insert_char(key)
        else:
            logging.debug(f"Ignoring unbound key {key!r}")

        self.quit_times = self.quit_times_default

    # --- Viewport ---
    def set_window_size(self, rows: int, cols: int) -> None:
        """Sets the terminal size; two rows are reserved for the bars."""
        self.screen_rows = max(1, rows - STATUS_ROWS)
        self.screen_cols = max(1, cols)

    def scroll(self) -> None:
        self.rx = 0
        line = self.store.get(self.cy)
        if line is not None:
            self.rx = self.mapper.raw_to_display(line.raw, self.cx)

        if self.cy < self.row_offset:
            self.row_offset = self.cy
        if self.cy >= self.row_offset + self.screen_rows:
            self.row_offset = self.cy - self.screen_rows + 1
        if self.rx < self.col_offset:
            self.col_offset = self.rx
        if self.rx >= self.col_offset + self.screen_cols:
            self.col_offset = self.rx - self.screen_cols + 1

    def visible_rows(self) -> list[VisibleRow]:
        """Display text and classifications for every text row of the screen."""
        rows = []
        end = self.col_offset + self.screen_cols
        for y in range(self.screen_rows):
            line = self.store.get(y + self.row_offset)
            if line is None:
                rows.append(VisibleRow(index=None))
                continue
            rows.append(
                VisibleRow(
                    index=line.idx,
                    text=line.display[self.col_offset:end],
                    classes=tuple(line.classes[self.col_offset:end]),
                )
            )
        return rows

    def cursor_screen_position(self) -> tuple[int, int]:
        return self.cy - self.row_offset, self.rx - self.col_offset

    # --- Main loop ---
    def die(self, message: str) -> None:
        logger.critical(f"Fatal: {message}")
        raise SystemExit(1)

    def run(self) -> None:
        """Reads and processes keys until quit."""
        logger.info("Editor main loop started.")
        self.running = True
        while self.running:
            try:
                self._refresh()
                key = self._read_key()
                if key is None:
                    logger.warning("No input source attached; stopping main loop")
                    break
                self.process_key(key)
            except MemoryError:
                self.die("out of memory")
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.running = False
        logger.info("Editor main loop finished.")
