"""Label-based filtering of lists and boards.

Filters never mutate their input; they return copies with only the matching
cards kept.
"""

from __future__ import annotations

import re
from dataclasses import replace

from trellokit.models import Board, Card, TrelloList


def compile_label_filter(pattern: str | re.Pattern[str], ignore_case: bool = True) -> re.Pattern[str]:
    """Compile a label filter, adding IGNORECASE when requested

    Raises:
        ValueError: If ``pattern`` is not a valid regular expression
    """
    flags = re.IGNORECASE if ignore_case else 0
    try:
        if isinstance(pattern, re.Pattern):
            return re.compile(pattern.pattern, pattern.flags | flags)
        return re.compile(pattern, flags)
    except re.error as e:
        raise ValueError(f"Invalid regex for label filter: {pattern!r} ({e})") from e


def card_matches(card: Card, label_filter: re.Pattern[str]) -> bool:
    """True if any of the card's labels has a name matching ``label_filter``"""
    return any(label_filter.search(label.name) for label in card.labels or [])


def filter_list(
    trello_list: TrelloList, pattern: str | re.Pattern[str], ignore_case: bool = True
) -> TrelloList:
    """Return a copy of ``trello_list`` keeping only cards with a matching label.

    Args:
        trello_list: List to filter. Unfetched cards (``None``) stay ``None``.
        pattern: Regular expression searched in each label name
        ignore_case: Match case-insensitively (default)

    Example:
        >>> fruit = Card("1", "Orange", labels=[Label("", "fruit")])
        >>> todo = TrelloList("123", "TODO", cards=[fruit, Card("2", "Green")])
        >>> filter_list(todo, "FRUIT").cards == [fruit]
        True
    """
    label_filter = compile_label_filter(pattern, ignore_case)
    if trello_list.cards is None:
        return replace(trello_list)
    return replace(
        trello_list, cards=[card for card in trello_list.cards if card_matches(card, label_filter)]
    )


def filter_board(board: Board, pattern: str | re.Pattern[str], ignore_case: bool = True) -> Board:
    """Apply :func:`filter_list` to every list of ``board``"""
    label_filter = compile_label_filter(pattern, ignore_case)
    if board.lists is None:
        return replace(board)
    return replace(
        board,
        lists=[filter_list(trello_list, label_filter, ignore_case) for trello_list in board.lists],
    )
