"""Plain-text round-trip for card names and descriptions.

A card renders as its name, a line of '=' characters, then the description::

    Buy groceries
    =============
    Milk, eggs and bread

Parsing is deliberately loose so that a user editing the buffer does not have
to keep the delimiter line the same length as the name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from trellokit.exceptions import CardParseError
from trellokit.formatting import header

logger = logging.getLogger(__name__)

NAME_DELIMITER = "="


@dataclass(frozen=True)
class CardContents:
    """Name and description recovered from an edited card buffer"""

    name: str
    desc: str = ""


def render_card_text(name: str, desc: str) -> str:
    """Render a card as editable text (name, delimiter line, description)"""
    return f"{header(name, NAME_DELIMITER)}\n{desc}"


def is_delimiter_line(line: str) -> bool:
    """True when ``line`` consists only of '=' characters.

    An empty line qualifies as well. '\\r' is not stripped, so a CRLF
    delimiter line such as '===\\r' does not.
    """
    return line.strip(NAME_DELIMITER) == ""


def parse_card_text(buffer: str, log: logging.Logger | None = None) -> CardContents:
    """Parse a rendered (and possibly user-edited) card buffer.

    The first line is always part of the name. Following lines are added to
    the name until a line made entirely of '=' is found; that line is dropped
    and everything after it is the description.

    Args:
        buffer: Text previously produced by :func:`render_card_text`, possibly edited
        log: Logger receiving DEBUG traces of the parse (defaults to this module's)

    Returns:
        CardContents with the name and description, verbatim

    Raises:
        CardParseError: If no delimiter line follows the name

    Example:
        >>> parse_card_text("Hello World\\n===\\nThis is my card")
        CardContents(name='Hello World', desc='This is my card')
    """
    log = log or logger

    lines = buffer.split("\n")
    log.debug("Parsing card buffer: %r", lines)

    name_lines = [lines[0]]
    remaining = iter(lines[1:])

    for line in remaining:
        if is_delimiter_line(line):
            log.debug("Delimiter line: %r", line)
            break
        log.debug("Name line: %r", line)
        name_lines.append(line)
    else:
        raise CardParseError(f"Unable to find name delimiter '{NAME_DELIMITER * 4}'")

    desc_lines = list(remaining)
    log.debug("Description lines: %r", desc_lines)

    return CardContents(name="\n".join(name_lines), desc="\n".join(desc_lines))
