#!/usr/bin/env python3
# /kilo/main.py
"""
Kilo Main Entry Point
=====================

This script is the primary entry point for launching the kilo editor. It performs:
1) Path Setup: ensures the kilo package is importable from a source checkout.
2) Configuration & Logging: loads config and initializes logging ASAP.
3) Core Import: imports the editor after logging is ready.
4) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
5) Application Run: wires KeyBinder and DrawScreen to a Kilo session and runs it.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import sys
from typing import Any, Optional

# --- Step 1: Set up the Python Path ---
project_root = os.path.dirname(os.path.abspath(__file__))
src_dir = os.path.join(project_root, "src")
if os.path.isdir(src_dir) and src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# --- Step 2: Immediate Logging and Configuration Setup ---
try:
    from kilo.utils.logging_config import setup_logging
    from kilo.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("kilo")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 3: Import the Core Application ---
try:
    from kilo.core.Kilo import Kilo
    from kilo.ui.DrawScreen import DrawScreen
    from kilo.ui.KeyBinder import KeyBinder
except ImportError as e:
    logger.critical("Failed to import a critical application component: %s", e, exc_info=True)
    sys.exit(1)


# --- Step 4: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """
    Target for `curses.wrapper`. Builds the editor session and runs it.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        file_to_open: Optional CLI path (may or may not exist on disk).
    """
    # Keep a lone ESC responsive; escape sequences arrive within this window.
    try:
        curses.set_escdelay(25)
    except Exception:
        os.environ.setdefault("ESCDELAY", "25")

    curses.raw()
    stdscr.keypad(True)

    binder = KeyBinder(stdscr)
    screen = DrawScreen(stdscr, config)
    editor = Kilo(config, read_key=binder.get_key, refresh=screen.draw)

    if file_to_open:
        editor.open_file(os.path.expanduser(file_to_open))

    editor.set_status_message(
        f"HELP: {editor.key_label('save_file')} = save | "
        f"{editor.key_label('quit')} = quit | {editor.key_label('find')} = find"
    )
    editor.run()


def start() -> None:
    """Initializes locale and runs the curses application via wrapper."""
    logger.info("Kilo editor starting up...")

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        curses.wrapper(main_app_runner, config, file_to_open)
        logger.info("Kilo editor shut down gracefully.")
    except SystemExit:
        raise
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
