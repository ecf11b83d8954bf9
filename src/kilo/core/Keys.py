# kilo/core/Keys.py
"""Keys.py
==================
Logical key events consumed by the editor core.

The terminal front-end (``kilo.ui.KeyBinder``) decodes raw curses input into
one of three shapes, and everything inside ``kilo.core`` speaks only these:

- a :class:`Key` member for navigation and editing keys,
- a ``"ctrl+<letter>"`` string for control chords,
- a single printable character (including ``"\\t"``) to be inserted.
"""

from enum import Enum
from typing import Union


class Key(str, Enum):
    """Named, non-printable keys. Values match the KeyBinder spec strings."""

    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    DELETE = "delete"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "esc"
    RESIZE = "resize"


KeyEvent = Union[Key, str]

ARROW_KEYS = frozenset({Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT})


def ctrl_key(letter: str) -> str:
    """Returns the logical chord name for Ctrl+*letter*, e.g. ``"ctrl+q"``."""
    return f"ctrl+{letter.lower()}"


def parse_key_spec(spec: str) -> KeyEvent:
    """Normalizes a configured key specification into a logical key.

    Accepts ``"ctrl+x"``/``"ctrl-x"``/``"^X"`` chords and the names of
    :class:`Key` members' values (``"esc"``, ``"pageup"`` ...).

    Raises:
        ValueError: If the specification cannot be understood.
    """
    if not isinstance(spec, str) or not spec.strip():
        raise ValueError(f"Invalid key specification: {spec!r}")

    s = spec.strip().lower()
    if s.startswith("^") and len(s) == 2:
        s = f"ctrl+{s[1]}"
    s = s.replace("ctrl-", "ctrl+")

    if s.startswith("ctrl+"):
        letter = s[len("ctrl+"):]
        if len(letter) == 1 and "a" <= letter <= "z":
            return ctrl_key(letter)
        raise ValueError(f"Unsupported control chord: {spec!r}")

    try:
        return Key(s)
    except ValueError:
        raise ValueError(f"Unknown key name: {spec!r}") from None


def is_printable(key: KeyEvent) -> bool:
    """True for a single character the editor inserts verbatim (ASCII or tab)."""
    if isinstance(key, Key) or not isinstance(key, str) or len(key) != 1:
        return False
    return key == "\t" or 32 <= ord(key) < 127
