# tests/ui/test_draw_screen.py
"""Unit tests for the `DrawScreen` UI renderer.
=================================================================

This module validates:

- Colour initialisation in 256-colour, 8-colour and monochrome terminals.
- Text rows painted in runs of equal classification.
- Filler rows and the welcome banner on an empty document.
- Status bar composition and the timed message bar.
- Cursor positioning relative to the scrolled viewport.

`curses` is patched inside `kilo.ui.DrawScreen`, so the tests are hermetic
and do not require a real terminal.
"""

from typing import Generator
from unittest.mock import MagicMock, call, patch

import pytest

from kilo.core.Highlighter import Classification as C
from kilo.core.Kilo import Kilo
from kilo.utils.utils import KILO_VERSION, hex_to_xterm


# --- Global `curses` mock -----------------------------------------------------
@pytest.fixture
def curses_mock() -> Generator[MagicMock, None, None]:
    """Provide a mock of `curses` for DrawScreen.

    `color_pair()` returns the pair index shifted into the attribute bits,
    which is enough to tell classifications apart in assertions.
    """
    mock = MagicMock()

    class CursesError(Exception):
        """Minimal replacement for `curses.error` used in tests."""

    mock.error = CursesError
    constants = {
        "A_NORMAL": 0,
        "A_REVERSE": 1 << 18,
        "A_BOLD": 1 << 21,
        "A_DIM": 1 << 20,
        "COLOR_BLACK": 0,
        "COLOR_RED": 1,
        "COLOR_GREEN": 2,
        "COLOR_YELLOW": 3,
        "COLOR_BLUE": 4,
        "COLOR_MAGENTA": 5,
        "COLOR_CYAN": 6,
        "COLOR_WHITE": 7,
        "COLORS": 256,
        "COLOR_PAIRS": 256,
    }
    for name, val in constants.items():
        setattr(mock, name, val)
    mock.has_colors.return_value = True
    mock.color_pair.side_effect = lambda n: n << 8
    with patch("kilo.ui.DrawScreen.curses", mock):
        yield mock


@pytest.fixture
def stdscr() -> MagicMock:
    win = MagicMock()
    win.getmaxyx.return_value = (24, 80)
    return win


@pytest.fixture
def screen(curses_mock, stdscr, mock_config):
    from kilo.ui.DrawScreen import DrawScreen

    return DrawScreen(stdscr, Kilo(mock_config).config)


def rows_written(stdscr):
    """Map of row -> list of (x, text, attr) from addstr calls."""
    out = {}
    for c in stdscr.addstr.call_args_list:
        y, x, text, attr = c.args
        out.setdefault(y, []).append((x, text, attr))
    return out


def test_init_colors_256(curses_mock, screen):
    assert set(screen.colors) == set(C)
    expected_fg = hex_to_xterm(screen.config["colors"]["keyword1"])
    assert call(4, expected_fg, -1) in curses_mock.init_pair.call_args_list
    assert screen.colors[C.KEYWORD1] == 4 << 8


def test_init_colors_8_color_uses_ansi_palette(curses_mock, stdscr, mock_config):
    from kilo.ui.DrawScreen import DrawScreen

    curses_mock.COLORS = 8
    DrawScreen(stdscr, Kilo(mock_config).config)
    assert call(2, curses_mock.COLOR_CYAN, -1) in curses_mock.init_pair.call_args_list
    assert call(7, curses_mock.COLOR_RED, -1) in curses_mock.init_pair.call_args_list


def test_init_colors_monochrome(curses_mock, stdscr):
    from kilo.ui.DrawScreen import DrawScreen

    curses_mock.has_colors.return_value = False
    ds = DrawScreen(stdscr, {})
    assert ds.colors[C.KEYWORD1] == curses_mock.A_BOLD
    assert ds.colors[C.MATCH] == curses_mock.A_REVERSE
    curses_mock.init_pair.assert_not_called()


def test_draw_empty_document_shows_welcome(screen, stdscr, mock_config):
    ed = Kilo(mock_config)
    screen.draw(ed)
    rows = rows_written(stdscr)
    welcome_row = ed.screen_rows // 3
    banner = rows[welcome_row][0][1]
    assert banner.startswith("~")
    assert banner.endswith(f"Kilo editor -- version {KILO_VERSION}")
    assert rows[0] == [(0, "~", 0)]
    status = rows[ed.screen_rows][0]
    assert status[1].startswith("[No Name] - 0 lines")
    assert status[1].endswith("no ft | 1/0")
    assert len(status[1]) == 80
    stdscr.move.assert_called_with(0, 0)


def test_draw_paints_classification_runs(screen, stdscr, mock_config, tmp_path):
    ed = Kilo(mock_config)
    ed.open_file(str(tmp_path / "x.c"))
    ed.store.load(["int x;"])
    screen.draw(ed)
    row0 = rows_written(stdscr)[0]
    assert row0[0] == (0, "int", screen.colors[C.KEYWORD2])
    assert row0[1] == (3, " x;", screen.colors[C.NORMAL])


def test_status_bar_shows_modified_and_filetype(screen, stdscr, mock_config, tmp_path):
    ed = Kilo(mock_config)
    ed.open_file(str(tmp_path / "prog.c"))
    ed.process_key("a")
    screen.draw(ed)
    status = rows_written(stdscr)[ed.screen_rows][0][1]
    assert status.startswith("prog.c - 1 lines (modified)")
    assert status.rstrip().endswith("c | 1/1")


def test_message_bar_hidden_after_timeout(screen, stdscr, mock_config):
    ed = Kilo(mock_config)
    ed.set_status_message("hello")
    screen.draw(ed)
    assert (0, "hello", 0) in rows_written(stdscr)[ed.screen_rows + 1]

    stdscr.reset_mock()
    ed.status_time -= 10
    screen.draw(ed)
    assert ed.screen_rows + 1 not in rows_written(stdscr)


def test_cursor_follows_scroll(screen, stdscr, mock_config):
    ed = Kilo(mock_config)
    ed.store.load([f"line {i}" for i in range(50)])
    ed.cy, ed.cx = 30, 4
    screen.draw(ed)
    assert ed.row_offset == 30 - ed.screen_rows + 1
    stdscr.move.assert_called_with(ed.screen_rows - 1, 4)


def test_draw_swallows_addstr_errors(curses_mock, screen, stdscr, mock_config):
    stdscr.addstr.side_effect = curses_mock.error("out of bounds")
    screen.draw(Kilo(mock_config))
    stdscr.refresh.assert_called_once()
