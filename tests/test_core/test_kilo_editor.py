# tests/test_core/test_kilo_editor.py
"""Kilo Editor Session Tests
============================

Integration tests for the Kilo session driven with logical key events.

Covers typing and line editing, cursor movement across line ends, paging,
quit confirmation, prompt-driven saving and searching, file loading with
line-ending normalisation, and the viewport helpers used by the renderer.
No terminal is involved: keys are fed through ``process_key`` or through a
scripted ``read_key`` callable.
"""

from unittest.mock import MagicMock

import pytest

from kilo.core.Highlighter import Classification as C
from kilo.core.Keys import Key
from kilo.core.Kilo import Kilo
from tests.stubs import buffer_lines, type_text


# --- Editing ---
def test_typing_into_empty_buffer(editor):
    type_text(editor, "ab\ncd")
    assert buffer_lines(editor) == ["ab", "cd"]
    assert (editor.cy, editor.cx) == (1, 2)
    assert editor.store.modified is True


def test_enter_at_column_zero_inserts_line_above(editor):
    editor.store.load(["x"])
    editor.process_key(Key.ENTER)
    assert buffer_lines(editor) == ["", "x"]
    assert (editor.cy, editor.cx) == (1, 0)


def test_backspace_joins_lines(editor):
    editor.store.load(["ab", "cd"])
    editor.cy, editor.cx = 1, 0
    editor.process_key(Key.BACKSPACE)
    assert buffer_lines(editor) == ["abcd"]
    assert (editor.cy, editor.cx) == (0, 2)


def test_backspace_at_origin_is_noop(editor):
    editor.store.load(["ab"])
    editor.process_key(Key.BACKSPACE)
    assert buffer_lines(editor) == ["ab"]
    assert editor.store.modified is False


def test_delete_key_removes_char_under_cursor(editor):
    editor.store.load(["abc"])
    editor.cx = 1
    editor.process_key(Key.DELETE)
    assert buffer_lines(editor) == ["ac"]
    assert editor.cx == 1


def test_tab_is_inserted_and_rendered(editor):
    type_text(editor, "\tx")
    line = editor.store[0]
    assert line.raw == "\tx"
    assert line.display == " " * 8 + "x"
    editor.scroll()
    assert editor.rx == 9


def test_unbound_control_chord_is_ignored(editor):
    editor.store.load(["a"])
    editor.process_key("ctrl+w")
    assert buffer_lines(editor) == ["a"]


# --- Movement ---
def test_arrow_right_wraps_to_next_line(editor):
    editor.store.load(["ab", "c"])
    editor.cx = 2
    editor.process_key(Key.ARROW_RIGHT)
    assert (editor.cy, editor.cx) == (1, 0)


def test_arrow_left_wraps_to_previous_line_end(editor):
    editor.store.load(["ab", "c"])
    editor.cy = 1
    editor.process_key(Key.ARROW_LEFT)
    assert (editor.cy, editor.cx) == (0, 2)


def test_vertical_move_snaps_column(editor):
    editor.store.load(["long line", "x"])
    editor.cx = 8
    editor.process_key(Key.ARROW_DOWN)
    assert (editor.cy, editor.cx) == (1, 1)
    editor.process_key(Key.ARROW_DOWN)
    assert (editor.cy, editor.cx) == (2, 0)  # virtual line after the end
    editor.process_key(Key.ARROW_DOWN)
    assert editor.cy == 2


def test_home_and_end(editor):
    editor.store.load(["hello"])
    editor.process_key(Key.END)
    assert editor.cx == 5
    editor.process_key(Key.HOME)
    assert editor.cx == 0


def test_page_down_and_up(editor):
    editor.store.load([str(i) for i in range(100)])
    editor.set_window_size(12, 80)  # 10 text rows
    editor.process_key(Key.PAGE_DOWN)
    assert editor.cy == 19
    editor.scroll()
    editor.process_key(Key.PAGE_UP)
    assert editor.cy == 0


# --- Quit confirmation ---
def test_quit_immediately_when_clean(editor):
    editor.running = True
    editor.process_key("ctrl+q")
    assert editor.running is False


def test_quit_requires_confirmation_when_modified(editor):
    editor.running = True
    type_text(editor, "x")
    for remaining in (3, 2, 1):
        editor.process_key("ctrl+q")
        assert editor.running is True
        assert f"Press Ctrl-Q {remaining} more times" in editor.status_message
    editor.process_key("ctrl+q")
    assert editor.running is False


def test_other_key_resets_quit_counter(editor):
    editor.running = True
    type_text(editor, "x")
    editor.process_key("ctrl+q")
    editor.process_key(Key.ARROW_LEFT)
    assert editor.quit_times == 3


# --- Files ---
def test_open_file_normalises_line_endings(tmp_path, editor):
    path = tmp_path / "prog.c"
    path.write_bytes(b"int x;\r\n/* c */\r\nreturn 0;\n")
    assert editor.open_file(str(path)) is True
    assert buffer_lines(editor) == ["int x;", "/* c */", "return 0;"]
    assert editor.profile.name == "c"
    assert editor.store[0].classes[:3] == [C.KEYWORD2] * 3
    assert editor.store.modified is False


def test_open_missing_file_starts_named_empty_buffer(tmp_path, editor):
    path = tmp_path / "new.py"
    assert editor.open_file(str(path)) is True
    assert len(editor.store) == 0
    assert editor.filename == str(path)
    assert editor.profile.name == "python"


def test_save_round_trip(tmp_path, editor):
    path = tmp_path / "out.txt"
    editor.open_file(str(path))
    type_text(editor, "one\n\ttwo")
    assert editor.save_file() is True
    assert path.read_text() == "one\n\ttwo\n"
    assert editor.status_message == "9 bytes written to disk"
    assert editor.store.modified is False


def test_save_reports_io_error(tmp_path, editor):
    editor.filename = str(tmp_path / "missing_dir" / "f.txt")
    type_text(editor, "x")
    assert editor.save_file() is False
    assert editor.status_message.startswith("Can't save! I/O error")
    assert editor.store.modified is True


def test_save_unnamed_buffer_prompts_for_name(tmp_path, mock_config, scripted_keys):
    target = tmp_path / "named.c"
    keys = scripted_keys([*str(target), Key.ENTER])
    ed = Kilo(mock_config, read_key=keys)
    type_text(ed, "int y;")
    assert ed.save_file() is True
    assert ed.filename == str(target)
    assert target.read_text() == "int y;\n"
    assert ed.profile.name == "c"


def test_save_prompt_escape_aborts(mock_config, scripted_keys):
    ed = Kilo(mock_config, read_key=scripted_keys(["a", Key.ESCAPE]))
    type_text(ed, "x")
    assert ed.save_file() is False
    assert ed.status_message == "Save aborted"


# --- Prompt and search ---
def test_prompt_ignores_enter_on_empty_input(mock_config, scripted_keys):
    refresh = MagicMock()
    ed = Kilo(mock_config, read_key=scripted_keys([Key.ENTER, "h", "i", Key.BACKSPACE, "o", Key.ENTER]), refresh=refresh)
    assert ed.prompt("Name: {}") == "ho"
    assert refresh.call_count == 6


def test_find_moves_cursor_to_match(mock_config, scripted_keys):
    ed = Kilo(mock_config, read_key=scripted_keys(["b", "a", "r", Key.ENTER]))
    ed.set_window_size(24, 80)
    ed.store.load(["foo", "\tbar", "baz"])
    ed.process_key("ctrl+f")
    assert (ed.cy, ed.cx) == (1, 1)
    assert not ed.search.active
    ed.scroll()
    assert ed.row_offset == 1  # match line scrolled to the top


def test_find_with_arrows_and_escape_keeps_last_match(mock_config, scripted_keys):
    keys = scripted_keys(["x", Key.ARROW_DOWN, Key.ESCAPE])
    ed = Kilo(mock_config, read_key=keys)
    ed.store.load(["x1", "x2", "x3"])
    ed.process_key("ctrl+f")
    assert ed.cy == 1
    assert C.MATCH not in ed.store[1].classes


# --- Viewport ---
def test_visible_rows_and_cursor_position(editor):
    editor.store.load(["a" * 100, "b"])
    editor.set_window_size(5, 10)  # 3 text rows, 10 columns
    editor.cx = 50
    editor.scroll()
    rows = editor.visible_rows()
    assert len(rows) == 3
    assert rows[0].text == "a" * 10
    assert len(rows[0].classes) == len(rows[0].text)
    assert rows[1].text == ""
    assert rows[2].index is None
    assert editor.cursor_screen_position() == (0, 9)


def test_status_summary_and_timeout(editor):
    type_text(editor, "x")
    summary = editor.status_summary()
    assert summary.line_count == 1
    assert summary.modified is True
    assert summary.modification_count == 2  # new line + inserted character
    assert summary.filetype is None
    editor.set_status_message("hello")
    assert editor.visible_status_message() == "hello"
    assert editor.visible_status_message(now=editor.status_time + 6) == ""


def test_invalid_keybinding_is_skipped(caplog):
    ed = Kilo({"keybindings": {"quit": "hyper+q", "bogus": "ctrl+b"}})
    assert "ctrl+q" not in ed.keybindings
    assert "Invalid key 'hyper+q'" in caplog.text
    assert "Unknown keybinding action 'bogus'" in caplog.text


def test_run_processes_keys_until_quit(mock_config, scripted_keys):
    refresh = MagicMock()
    ed = Kilo(mock_config, read_key=scripted_keys(["a"] + ["ctrl+q"] * 4), refresh=refresh)
    ed.run()
    assert buffer_lines(ed) == ["a"]
    assert ed.running is False
    assert refresh.call_count == 5


def test_run_exits_on_memory_error(mock_config):
    ed = Kilo(mock_config, read_key=MagicMock(side_effect=MemoryError))
    with pytest.raises(SystemExit) as exc:
        ed.run()
    assert exc.value.code == 1
