"""
Design (utils.py)
- Purpose: Reusable helpers: icon path detection (PyInstaller), flag glyphs from country
           codes, and formatting of one Logs-panel line.
- Inputs: Various helper parameters (filename, country code, lookup event fields).
- Outputs: Helper results (strings, paths).
- Side effects: None.
- Thread-safety: Stateless; safe to call from any thread.
"""

import os
import sys
from datetime import datetime

# 'A' (0x41) + 127397 == U+1F1E6 REGIONAL INDICATOR SYMBOL LETTER A
REGIONAL_INDICATOR_OFFSET = 127397


def get_icon_path(filename: str) -> str:
    """
    Purpose: Resolve icon path for both dev (script) and PyInstaller (frozen) runs.
    Inputs: filename (e.g., "logo.ico")
    Outputs: Absolute/relative path usable with Tk.iconbitmap.
    """
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return os.path.join(sys._MEIPASS, filename)  # type: ignore[attr-defined]
    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(here, "icons", filename)


def country_code_to_flag(code: str | None) -> str:
    """
    Purpose: Convert a two-letter country code to its flag emoji (regional indicator pair).
    Inputs: code, case-insensitive (e.g. "us", "GB").
    Outputs: The flag string; '' for anything that is not exactly two ASCII letters.
    """
    if not code or len(code) != 2 or not (code.isascii() and code.isalpha()):
        return ""
    return "".join(chr(REGIONAL_INDICATOR_OFFSET + ord(c)) for c in code.upper())


def format_lookup_log(row_index: int, ip: str, status: str, detail: str | None,
                      when: datetime | None = None) -> str:
    """
    Purpose: One Logs-panel line for a lookup event.
    Example: "[2024-05-01 12:00:00] #1 lookup 8.8.8.8 -> SUCCESS (United States)"
    """
    stamp = (when or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    line = f"[{stamp}] #{row_index} lookup {ip} -> {status.upper()}"
    if detail:
        line += f" ({detail})"
    return line + "\n"
