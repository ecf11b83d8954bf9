# kilo/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
Translates raw curses input into the logical key events understood by the
editor core (see ``kilo.core.Keys``).

Key Features:
- Maps curses key codes (arrows, Home/End, PageUp/PageDown, Delete,
  Backspace, Enter, resize) to :class:`Key` members.
- Parses raw VT100/xterm escape sequences (CSI and SS3 forms) that reach the
  application when the terminal does not translate them itself.
- Reports control chords as ``"ctrl+<letter>"`` and printable ASCII as the
  character itself.
- Degrades every unknown or truncated escape sequence to ``Key.ESCAPE``.
- Traces every decoded key to the ``kilo.keyevents`` logger.

Intended Usage:
---------------
Instantiate KeyBinder with the curses window and pass ``binder.get_key`` to
``Kilo`` as its ``read_key`` callable.
"""

import curses
import logging
import re
from typing import Optional

from kilo.core.Keys import Key, KeyEvent, ctrl_key
from kilo.utils.logging_config import KEY_LOGGER


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Decodes terminal input into logical key events.

    Attributes:
        stdscr: The curses window keys are read from.
        key_code_map (dict): curses key codes mapped to logical keys.
    """
    # Normalized escape sequences map. Keys do NOT include the leading ESC (0x1B),
    # because get_key() already consumed it.
    ESCAPE_SEQUENCE_MAP: dict[str, Key] = {
        # Arrows (CSI and SS3)
        "[A": Key.ARROW_UP, "[B": Key.ARROW_DOWN, "[C": Key.ARROW_RIGHT, "[D": Key.ARROW_LEFT,
        "OA": Key.ARROW_UP, "OB": Key.ARROW_DOWN, "OC": Key.ARROW_RIGHT, "OD": Key.ARROW_LEFT,

        # Home/End (CSI/SS3 and tilde variants)
        "[H": Key.HOME, "[F": Key.END, "OH": Key.HOME, "OF": Key.END,
        "[1~": Key.HOME, "[7~": Key.HOME, "[4~": Key.END, "[8~": Key.END,

        # Delete/PageUp/PageDown (~ style)
        "[3~": Key.DELETE, "[5~": Key.PAGE_UP, "[6~": Key.PAGE_DOWN,
    }

    ESC = 27

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self.key_code_map = self._build_key_code_map()
        logging.debug("KeyBinder initialized with %d curses key codes", len(self.key_code_map))

    def _build_key_code_map(self) -> dict[int, Key]:
        """Builds the table of curses key codes and plain control bytes."""
        key_map: dict[int, Key] = {
            10: Key.ENTER,
            13: Key.ENTER,
            127: Key.BACKSPACE,
            8: Key.BACKSPACE,
        }
        named = {
            "KEY_ENTER": Key.ENTER,
            "KEY_BACKSPACE": Key.BACKSPACE,
            "KEY_DC": Key.DELETE,
            "KEY_UP": Key.ARROW_UP,
            "KEY_DOWN": Key.ARROW_DOWN,
            "KEY_LEFT": Key.ARROW_LEFT,
            "KEY_RIGHT": Key.ARROW_RIGHT,
            "KEY_HOME": Key.HOME,
            "KEY_END": Key.END,
            "KEY_PPAGE": Key.PAGE_UP,
            "KEY_NPAGE": Key.PAGE_DOWN,
            "KEY_RESIZE": Key.RESIZE,
        }
        for attr, key in named.items():
            code = getattr(curses, attr, None)
            if isinstance(code, int):
                key_map[code] = key
        return key_map

    def decode(self, code: int) -> Optional[KeyEvent]:
        """Decodes a single curses code (not ESC) into a logical key.

        Returns None for codes the editor has no use for.
        """
        if code in self.key_code_map:
            return self.key_code_map[code]
        if code == 9:
            return "\t"
        if 1 <= code <= 26:
            return ctrl_key(chr(ord("a") + code - 1))
        if 32 <= code < 127:
            return chr(code)
        return None

    def decode_escape_sequence(self, seq: str) -> Key:
        """Maps the bytes that followed ESC to a key; unknown input is ESCAPE."""
        if not seq:
            return Key.ESCAPE
        # Some terminals deliver a doubled ESC prefix.
        if seq[0] == "\x1b":
            seq = seq[1:]

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if mapped is None:
            # Tolerant cleanup: keep only tokens relevant to term sequences.
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
            if mapped is not None:
                logging.debug("decode_escape_sequence: cleaned %r -> %r -> %r", seq, cleaned, mapped)

        if mapped is None:
            logging.debug("decode_escape_sequence: unknown escape sequence: ESC + %r", seq)
            return Key.ESCAPE
        return mapped

    def get_key(self, window: Optional["curses.window"] = None) -> Optional[KeyEvent]:
        """Blocks until a decodable key arrives and returns it.

        Handles a lone ESC and CSI/SS3 escape sequences by reading the bytes
        that follow ESC without blocking.
        """
        target = window or self.stdscr
        while True:
            try:
                ch = target.getch()
            except curses.error:
                continue
            if ch == curses.ERR:
                continue

            if ch == self.ESC:
                key: Optional[KeyEvent] = self.decode_escape_sequence(self._read_pending(target))
            else:
                key = self.decode(ch)

            if key is None:
                KEY_LOGGER.debug("code=%r ignored", ch)
                continue
            KEY_LOGGER.debug("code=%r key=%r", ch, key)
            return key

    def _read_pending(self, target: "curses.window") -> str:
        """Reads whatever is already buffered after an ESC byte."""
        seq = ""
        target.nodelay(True)
        try:
            while True:
                nx = target.getch()
                if nx == curses.ERR:
                    break
                if 0 <= nx <= 255:
                    seq += chr(nx)
                else:
                    # Rare extended code; keep as a marker, stripped by the cleanup regex.
                    seq += f"<{nx}>"
        finally:
            target.nodelay(False)
        return seq
