# kilo/utils/utils.py
"""
kilo.utils.utils.py
===================

Core utility functions for the kilo editor.

Key functionalities include:
- Automatic User Configuration: creates `~/.config/kilo/config.toml` from the
  project template on first run.
- Robust Configuration Loading: starts from the hardcoded defaults below and
  recursively merges user-defined settings on top of them.
- Helper Utilities: deep-merging dictionaries and hex to xterm-256 colour
  conversion.

The application is always runnable, even if the user configuration file is
missing or corrupted, because the embedded defaults are the final fallback.
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger("kilo")

# --- Constants ---
WHITE_FG_IDX = 255

APP_NAME = "kilo"
KILO_VERSION = "0.1.0"

# This dictionary mirrors the `config.toml` template shipped with the project.
# It serves as the ultimate fallback, ensuring the editor can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {"tab_stop": 8, "quit_times": 3, "status_timeout": 5},
    "logging": {
        "file_level": "DEBUG", "console_level": "WARNING", "log_to_console": False,
        "separate_error_log": False, "log_file": "editor.log",
    },
    # Hex colours for 256-colour terminals; 8-colour terminals use kilo's ANSI palette.
    "colors": {
        "normal": "#C9D1D9", "comment": "#00AFAF", "mlcomment": "#00AFAF",
        "keyword1": "#D7D700", "keyword2": "#5FD700", "string": "#D75FD7",
        "number": "#FF5F5F", "match": "#5F87FF",
    },
    "keybindings": {
        "quit": "ctrl+q", "save_file": "ctrl+s", "find": "ctrl+f", "refresh": "ctrl+l",
    },
    "syntax": {
        "c": {
            "filematch": [".c", ".h", ".cpp"],
            "keywords": [
                "switch", "if", "while", "for", "break", "continue", "return", "else",
                "struct", "union", "typedef", "static", "enum", "class", "case",
                "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
                "void|",
            ],
            "singleline_comment": "//",
            "multiline_comment": ["/*", "*/"],
            "highlight_numbers": True, "highlight_strings": True,
        },
        "python": {
            "filematch": [".py", ".pyw"],
            "keywords": [
                "def", "class", "if", "elif", "else", "for", "while", "return", "import",
                "from", "as", "with", "try", "except", "finally", "raise", "yield",
                "lambda", "pass", "break", "continue", "in", "is", "not", "and", "or",
                "global", "nonlocal", "assert", "del", "async", "await",
                "None|", "True|", "False|", "self|", "int|", "str|", "float|", "list|",
                "dict|", "tuple|", "set|", "bool|",
            ],
            "singleline_comment": "#",
            "highlight_numbers": True, "highlight_strings": True,
        },
        "javascript": {
            "filematch": [".js", ".mjs", ".cjs", ".jsx"],
            "keywords": [
                "function", "return", "if", "else", "for", "while", "do", "switch",
                "case", "break", "continue", "new", "delete", "typeof", "instanceof",
                "try", "catch", "finally", "throw", "class", "extends", "import",
                "export", "default", "async", "await", "yield",
                "var|", "let|", "const|", "this|", "null|", "undefined|", "true|",
                "false|",
            ],
            "singleline_comment": "//",
            "multiline_comment": ["/*", "*/"],
            "highlight_numbers": True, "highlight_strings": True,
        },
        "go": {
            "filematch": [".go"],
            "keywords": [
                "func", "package", "import", "return", "if", "else", "for", "range",
                "switch", "case", "default", "break", "continue", "go", "defer",
                "select", "struct", "interface", "type", "map", "chan", "var", "const",
                "int|", "string|", "bool|", "byte|", "rune|", "error|", "float64|",
                "nil|", "true|", "false|",
            ],
            "singleline_comment": "//",
            "multiline_comment": ["/*", "*/"],
            "highlight_numbers": True, "highlight_strings": True,
        },
        "rust": {
            "filematch": [".rs"],
            "keywords": [
                "fn", "let", "mut", "if", "else", "match", "loop", "while", "for", "in",
                "return", "struct", "enum", "impl", "trait", "pub", "use", "mod",
                "crate", "where", "move", "ref", "unsafe",
                "i32|", "i64|", "u8|", "u32|", "u64|", "usize|", "f64|", "bool|",
                "str|", "String|", "Self|", "self|", "true|", "false|",
            ],
            "singleline_comment": "//",
            "multiline_comment": ["/*", "*/"],
            "highlight_numbers": True, "highlight_strings": True,
        },
        "shell": {
            "filematch": [".sh", ".bash", ".zsh"],
            "keywords": [
                "if", "then", "else", "elif", "fi", "for", "while", "do", "done",
                "case", "esac", "in", "function", "return", "local",
                "export|", "echo|", "exit|",
            ],
            "singleline_comment": "#",
            "highlight_numbers": True, "highlight_strings": True,
        },
    },
}


# --- Helper Functions ---

def get_project_root() -> Path:
    """Determines the project's root directory for finding template files."""
    if getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS'):
        return Path(sys._MEIPASS)
    return Path(__file__).resolve().parents[3]


def get_user_config_path() -> Path:
    """Returns the location of the per-user `config.toml`."""
    return Path.home() / ".config" / APP_NAME / "config.toml"


def ensure_user_config_exists() -> None:
    """Checks for the user config file in `~/.config/kilo` and creates it if missing."""
    try:
        user_config_path = get_user_config_path()
        user_config_path.parent.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            source_config_path = get_project_root() / "config.toml"
            if source_config_path.exists():
                shutil.copy(source_config_path, user_config_path)
                logger.info(f"Created user config template at: {user_config_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists()

    user_config_path = get_user_config_path()
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hexadecimal color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        return WHITE_FG_IDX
    try:
        r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return WHITE_FG_IDX

    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    return int(
        16
        + (36 * round(r / 255 * 5))
        + (6 * round(g / 255 * 5))
        + round(b / 255 * 5)
    )
