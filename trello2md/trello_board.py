"""Reshape a flat Trello board export into nested list records.

A Trello export keeps lists, cards, actions and checklists in separate
arrays linked by identifiers.  :func:`reshape` groups them into one
:class:`BoardList` per list, each carrying its cards, and each card its
comments and checklists.  The decoded export is never modified; all derived
collections live on fresh records.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

logger = logging.getLogger(__name__)

COMMENT_ACTION = "commentCard"
INCOMPLETE = "incomplete"


@dataclass
class CheckItem:
    name: str
    state: str

    @property
    def complete(self) -> bool:
        return self.state != INCOMPLETE


@dataclass
class Checklist:
    name: str
    items: list[CheckItem] = field(default_factory=list)


@dataclass
class Comment:
    text: str
    date: str


@dataclass
class Label:
    name: str


@dataclass
class Card:
    id: str
    name: str
    description: str = ""
    labels: list[Label] = field(default_factory=list)
    closed: bool = False
    comments: list[Comment] = field(default_factory=list)
    checklists: list[Checklist] = field(default_factory=list)


@dataclass
class BoardList:
    id: str
    name: str
    closed: bool = False
    cards: list[Card] = field(default_factory=list)


@dataclass
class Board:
    """The decoded export, with each collection defaulted to empty."""

    name: str
    short_url: str
    lists: list[dict[str, Any]]
    cards: list[dict[str, Any]]
    actions: list[dict[str, Any]]
    checklists: list[dict[str, Any]]

    @classmethod
    def from_export(cls, data: dict[str, Any]) -> "Board":
        return cls(
            name=data.get("name") or "",
            short_url=data.get("shortUrl") or data.get("url") or "",
            lists=list(data.get("lists") or []),
            cards=list(data.get("cards") or []),
            actions=list(data.get("actions") or []),
            checklists=list(data.get("checklists") or []),
        )


@dataclass
class ReshapeOptions:
    include_closed_lists: bool = False
    include_closed_cards: bool = False


def _action_card_id(action: dict[str, Any]) -> str | None:
    card = (action.get("data") or {}).get("card") or {}
    return card.get("id")


def _comments_for(card_id: str, actions: Iterable[dict[str, Any]]) -> list[Comment]:
    return [
        Comment(
            text=(action.get("data") or {}).get("text") or "",
            date=action.get("date") or "",
        )
        for action in actions
        if action.get("type") == COMMENT_ACTION and _action_card_id(action) == card_id
    ]


def _checklists_for(card_id: str, checklists: Iterable[dict[str, Any]]) -> list[Checklist]:
    return [
        Checklist(
            name=checklist.get("name") or "",
            items=[
                CheckItem(name=item.get("name") or "", state=item.get("state") or "")
                for item in checklist.get("checkItems") or []
            ],
        )
        for checklist in checklists
        if checklist.get("idCard") == card_id
    ]


def _build_card(raw: dict[str, Any], board: Board) -> Card:
    card_id = raw.get("id") or ""
    card = Card(
        id=card_id,
        name=raw.get("name") or "",
        description=raw.get("desc") or "",
        labels=[Label(name=label.get("name") or "") for label in raw.get("labels") or []],
        closed=bool(raw.get("closed", False)),
        comments=_comments_for(card_id, board.actions),
        checklists=_checklists_for(card_id, board.checklists),
    )
    logger.debug(
        "      Card %r (%s): %d comment(s), %d checklist(s)",
        card.name,
        card_id,
        len(card.comments),
        len(card.checklists),
    )
    return card


def reshape(board: Board, options: ReshapeOptions | None = None) -> dict[str, BoardList]:
    """Group the flat records of *board* by list.

    Returns a mapping of list id to :class:`BoardList`.  Closed lists and
    closed cards are left out unless *options* asks for them.  Cards,
    comments and checklists keep the relative order they have in the export;
    anything that references a missing list or card is dropped.
    """
    options = options or ReshapeOptions()
    shaped: dict[str, BoardList] = {}

    for raw_list in board.lists:
        list_id = raw_list.get("id")
        if list_id is None:
            continue
        closed = bool(raw_list.get("closed", False))
        if closed and not options.include_closed_lists:
            logger.debug("Skipping closed list %r (%s)", raw_list.get("name"), list_id)
            continue

        entry = BoardList(id=list_id, name=raw_list.get("name") or "", closed=closed)
        logger.debug("Processing list %r (%s)", entry.name, list_id)
        for raw_card in board.cards:
            if raw_card.get("idList") != list_id:
                continue
            if raw_card.get("closed", False) and not options.include_closed_cards:
                continue
            entry.cards.append(_build_card(raw_card, board))
        logger.debug("   %d card(s) found", len(entry.cards))
        shaped[list_id] = entry

    return shaped
