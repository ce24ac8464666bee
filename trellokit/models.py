"""Typed records for Trello boards, lists, cards, labels, and attachments.

Records are decoded from the camelCase JSON returned by the Trello API.
Nested collections (a board's lists, a list's cards, a card's labels) are
``None`` when they were not requested and a list otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from trellokit.card_text import render_card_text
from trellokit.exceptions import TrelloDecodeError
from trellokit.formatting import header, title


class TrelloObject:
    """Common behaviour of every Trello record"""

    TYPE_NAME: ClassVar[str]
    FIELDS: ClassVar[tuple[str, ...]]

    @classmethod
    def fields_param(cls) -> str:
        """Comma-joined field list for the ``fields`` query parameter"""
        return ",".join(cls.FIELDS)

    @classmethod
    def from_json(cls, data: Any) -> Any:
        raise NotImplementedError

    @classmethod
    def from_json_list(cls, data: Any) -> list:
        if not isinstance(data, list):
            raise TrelloDecodeError(
                f"Expected a JSON array of {cls.TYPE_NAME} objects, got {type(data).__name__}",
                response_text=str(data)[:200],
            )
        return [cls.from_json(item) for item in data]

    @classmethod
    def _decode(cls, data: Any, build) -> Any:
        if not isinstance(data, dict):
            raise TrelloDecodeError(
                f"Expected a JSON object for {cls.TYPE_NAME}, got {type(data).__name__}",
                response_text=str(data)[:200],
            )
        try:
            return build(data)
        except KeyError as e:
            raise TrelloDecodeError(
                f"{cls.TYPE_NAME} is missing required field {e}",
                response_text=str(data)[:200],
            ) from e

    def render(self) -> str:
        raise NotImplementedError


def _nested(record_type: type[TrelloObject], data: Any) -> list | None:
    if data is None:
        return None
    return record_type.from_json_list(data)


@dataclass(frozen=True)
class Label(TrelloObject):
    """https://developer.atlassian.com/cloud/trello/rest/api-group-labels/"""

    TYPE_NAME: ClassVar[str] = "Label"
    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "color")

    id: str
    name: str
    color: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> Label:
        return cls._decode(
            data, lambda d: cls(id=d["id"], name=d["name"], color=d.get("color"))
        )

    def render(self) -> str:
        # Trello allows color-only labels
        return f"[{self.name or self.color or ''}]"


@dataclass(frozen=True)
class Attachment(TrelloObject):
    TYPE_NAME: ClassVar[str] = "Attachment"
    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "url")

    id: str
    name: str
    url: str

    @classmethod
    def from_json(cls, data: Any) -> Attachment:
        return cls._decode(data, lambda d: cls(id=d["id"], name=d["name"], url=d["url"]))

    def render(self) -> str:
        return f"{header(self.name, '-')}\n{self.url}"


@dataclass(frozen=True)
class Card(TrelloObject):
    """https://developer.atlassian.com/cloud/trello/rest/api-group-cards/"""

    TYPE_NAME: ClassVar[str] = "Card"
    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "desc", "labels", "closed", "url")

    id: str
    name: str
    desc: str = ""
    closed: bool = False
    url: str = ""
    labels: list[Label] | None = None

    @classmethod
    def from_json(cls, data: Any) -> Card:
        return cls._decode(
            data,
            lambda d: cls(
                id=d["id"],
                name=d["name"],
                desc=d["desc"],
                closed=d["closed"],
                url=d["url"],
                labels=_nested(Label, d.get("labels")),
            ),
        )

    def render(self) -> str:
        return render_card_text(self.name, self.desc)


@dataclass(frozen=True)
class TrelloList(TrelloObject):
    """A Trello list (column). Named to avoid shadowing the ``list`` builtin."""

    TYPE_NAME: ClassVar[str] = "List"
    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "closed")

    id: str
    name: str
    closed: bool = False
    cards: list[Card] | None = None

    @classmethod
    def from_json(cls, data: Any) -> TrelloList:
        return cls._decode(
            data,
            lambda d: cls(
                id=d["id"],
                name=d["name"],
                closed=d["closed"],
                cards=_nested(Card, d.get("cards")),
            ),
        )

    def render(self) -> str:
        lines = [header(self.name, "-")]
        for card in self.cards or []:
            markers = []
            if card.desc:
                markers.append("[...]")
            markers.extend(label.render() for label in card.labels or [])
            # rstrip in case there are no markers
            lines.append(f"* {card.name} {' '.join(markers)}".rstrip())
        return "\n".join(lines)


@dataclass(frozen=True)
class Board(TrelloObject):
    """https://developer.atlassian.com/cloud/trello/rest/api-group-boards/"""

    TYPE_NAME: ClassVar[str] = "Board"
    FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "closed", "url")

    id: str
    name: str
    closed: bool = False
    url: str = ""
    lists: list[TrelloList] | None = None

    @classmethod
    def from_json(cls, data: Any) -> Board:
        return cls._decode(
            data,
            lambda d: cls(
                id=d["id"],
                name=d["name"],
                closed=d["closed"],
                url=d["url"],
                lists=_nested(TrelloList, d.get("lists")),
            ),
        )

    def render(self) -> str:
        sections = [title(self.name)]
        for trello_list in self.lists or []:
            sections.append("")
            sections.append(trello_list.render())
        return "\n".join(sections)
