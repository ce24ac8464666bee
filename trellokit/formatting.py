"""Cosmetic text helpers shared by the record renderers."""

from __future__ import annotations

import unicodedata


def display_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies.

    Wide and fullwidth East Asian characters take two columns, combining
    marks take none.
    """
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def header(text: str, delimiter: str) -> str:
    """Underline ``text`` with ``delimiter`` repeated to the width of its last line"""
    last_line = text.split("\n")[-1]
    return f"{text}\n{delimiter * display_width(last_line)}"


def title(text: str) -> str:
    """Boxed banner used for board titles

    >>> print(title("Roadmap"))
    +---------+
    | Roadmap |
    +---------+
    """
    border = "+" + "-" * (display_width(text) + 2) + "+"
    return "\n".join([border, f"| {text} |", border])
