"""Pytest configuration with shared fixtures for the kilo editor tests.

The core components are plain Python objects, so most fixtures simply build
them with a deterministic C-like language profile. UI tests patch ``curses``
inside the module under test and never need a real terminal.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable
from unittest.mock import MagicMock

import pytest

from kilo.core.Highlighter import Highlighter
from kilo.core.Keys import KeyEvent
from kilo.core.Kilo import Kilo
from kilo.core.LanguageProfile import LanguageProfile
from kilo.core.LineStore import LineStore
from kilo.core.RenderEngine import RenderEngine


@pytest.fixture
def c_profile() -> LanguageProfile:
    """A small C profile with both comment styles and two keyword tiers."""
    return LanguageProfile(
        name="c",
        filematch=(".c", ".h"),
        keywords=("if", "while", "return", "int|", "char|"),
        singleline_comment="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
    )


@pytest.fixture
def make_store(c_profile: LanguageProfile) -> Callable[..., LineStore]:
    """Factory building a LineStore pre-loaded with *lines*."""

    def _make(lines: Iterable[str] = (), profile: LanguageProfile | None = c_profile) -> LineStore:
        store = LineStore(RenderEngine(8), Highlighter(profile))
        store.load(list(lines))
        return store

    return _make


@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Baseline configuration overrides for Kilo tests."""
    return {
        "editor": {"tab_stop": 8, "quit_times": 3, "status_timeout": 5},
        "keybindings": {"quit": "ctrl+q", "save_file": "ctrl+s", "find": "ctrl+f"},
    }


@pytest.fixture
def scripted_keys() -> Callable[[Iterable[KeyEvent]], MagicMock]:
    """Builds a ``read_key`` callable that replays *keys* and then returns None."""

    def _make(keys: Iterable[KeyEvent]) -> MagicMock:
        return MagicMock(side_effect=[*keys, None])

    return _make


@pytest.fixture
def editor(mock_config: dict[str, dict[str, Any]]) -> Kilo:
    """A Kilo session with no input source and an 80x24 window."""
    ed = Kilo(mock_config)
    ed.set_window_size(24, 80)
    return ed

