# tests/test_core/test_render_engine.py
"""RenderEngine Tests
========================

Unit tests for tab expansion and the raw/display coordinate mapping.

This test module verifies that:

1. Tabs expand to the next multiple of the tab stop, always emitting at least
   one space.
2. Text without tabs renders unchanged.
3. Raw and display columns convert consistently in both directions.
"""

import pytest

from kilo.core.CoordinateMapper import CoordinateMapper
from kilo.core.RenderEngine import DEFAULT_TAB_STOP, RenderEngine


def test_tab_between_characters_pads_to_stop():
    """Test: ``a\\tb`` renders as ``a`` + 7 spaces + ``b`` with tab stop 8."""
    assert RenderEngine(8).render("a\tb") == "a" + " " * 7 + "b"


def test_tab_at_stop_emits_full_width():
    """Test: a tab already on a tab stop still advances a full stop."""
    assert RenderEngine(8).render("\t") == " " * 8
    assert RenderEngine(8).render("12345678\tx") == "12345678" + " " * 8 + "x"


def test_tab_just_before_stop_emits_one_space():
    assert RenderEngine(8).render("1234567\tx") == "1234567 x"


def test_plain_text_is_unchanged():
    assert RenderEngine().render("int main(void) {") == "int main(void) {"
    assert RenderEngine().render("") == ""


def test_custom_tab_stop():
    assert RenderEngine(4).render("ab\tc") == "ab  c"


@pytest.mark.parametrize("bad", [0, -3, "8", None])
def test_invalid_tab_stop_falls_back_to_default(bad):
    """Test: non-positive or non-integer tab stops are replaced by the default."""
    assert RenderEngine(bad).tab_stop == DEFAULT_TAB_STOP


def test_raw_to_display_counts_tab_width():
    mapper = CoordinateMapper(8)
    raw = "a\tb\tc"
    assert mapper.raw_to_display(raw, 0) == 0
    assert mapper.raw_to_display(raw, 1) == 1
    assert mapper.raw_to_display(raw, 2) == 8
    assert mapper.raw_to_display(raw, 3) == 9
    assert mapper.raw_to_display(raw, 4) == 16


def test_raw_to_display_clamps_column():
    mapper = CoordinateMapper(8)
    assert mapper.raw_to_display("ab", 10) == 2
    assert mapper.raw_to_display("ab", -1) == 0


def test_display_to_raw_inside_tab_span_maps_to_tab():
    """Test: every display column covered by a tab maps back to the tab itself."""
    mapper = CoordinateMapper(8)
    raw = "a\tb"
    for col in range(1, 8):
        assert mapper.display_to_raw(raw, col) == 1
    assert mapper.display_to_raw(raw, 8) == 2


def test_display_to_raw_past_end_returns_length():
    assert CoordinateMapper(8).display_to_raw("a\tb", 42) == 3


def test_round_trip_for_every_raw_column():
    """Test: display_to_raw(raw_to_display(c)) == c for all valid c."""
    mapper = CoordinateMapper(8)
    for raw in ["", "plain", "\t\tx", "a\tb\tc", "x\t", "1234567\t8"]:
        for c in range(len(raw) + 1):
            assert mapper.display_to_raw(raw, mapper.raw_to_display(raw, c)) == c
