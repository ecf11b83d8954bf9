# tests/test_core/test_language_profile.py
"""LanguageProfile Tests
========================

Unit tests for profile construction and filename-based selection.
"""

import dataclasses

import pytest

from kilo.core.LanguageProfile import LanguageProfile, ProfileRegistry
from kilo.utils.utils import DEFAULT_CONFIG


def test_keywords_are_split_into_tiers(c_profile):
    assert ("if", False) in c_profile.parsed_keywords
    assert ("int", True) in c_profile.parsed_keywords
    assert c_profile.has_block_comments is True


def test_profile_is_immutable(c_profile):
    with pytest.raises(dataclasses.FrozenInstanceError):
        c_profile.name = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "pattern, filename, expected",
    [
        (".c", "main.c", True),
        (".c", "main.cpp", False),
        (".c", "/tmp/dir.c/readme", False),
        ("Makefile", "src/Makefile", True),
        ("*.mk", "rules.mk", True),
        ("*.mk", "rules.mkx", False),
    ],
)
def test_matches(pattern, filename, expected):
    assert LanguageProfile(name="t", filematch=(pattern,)).matches(filename) is expected


def test_matches_without_filename():
    assert LanguageProfile(name="t", filematch=(".c",)).matches(None) is False


def test_from_config_table():
    profile = LanguageProfile.from_config(
        "lua",
        {
            "filematch": ".lua",
            "keywords": ["local", "nil|"],
            "singleline_comment": "--",
            "multiline_comment": ["--[[", "]]"],
            "highlight_numbers": False,
        },
    )
    assert profile.filematch == (".lua",)
    assert profile.multiline_comment_start == "--[["
    assert profile.multiline_comment_end == "]]"
    assert profile.highlight_numbers is False
    assert profile.highlight_strings is True


@pytest.mark.parametrize(
    "table",
    [
        "not a table",
        {"filematch": [1, 2]},
        {"keywords": ["ok", 3]},
        {"multiline_comment": ["/*"]},
    ],
)
def test_from_config_rejects_bad_tables(table):
    with pytest.raises(ValueError):
        LanguageProfile.from_config("bad", table)


def test_registry_from_default_config_selects_by_extension():
    registry = ProfileRegistry.from_config(DEFAULT_CONFIG)
    assert registry.select("kilo.c").name == "c"
    assert registry.select("kilo.h").name == "c"
    assert registry.select("script.py").name == "python"
    assert registry.select("notes.txt") is None
    assert registry.select(None) is None


def test_registry_skips_malformed_profiles(caplog):
    registry = ProfileRegistry.from_config(
        {"syntax": {"good": {"filematch": [".g"]}, "bad": {"multiline_comment": "oops"}}}
    )
    assert registry.names == ("good",)
    assert "Ignoring syntax profile 'bad'" in caplog.text


def test_registry_get_and_order():
    first = LanguageProfile(name="a", filematch=(".x",))
    second = LanguageProfile(name="b", filematch=(".x",))
    registry = ProfileRegistry([first, second])
    assert registry.select("f.x") is first
    assert registry.get("b") is second
    assert len(registry) == 2
