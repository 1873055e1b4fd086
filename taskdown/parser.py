"""Line-oriented parser for Jira-style board markdown.

Each trimmed line is classified by an ordered list of matchers (first match
wins) and the resulting :class:`LineMatch` is applied to an explicit scan
state. The parser never raises for malformed content: a line whose shape does
not fit its pattern loses its effect and everything else is kept.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping, Optional, Sequence

from taskdown.domain.board import Board, Card, ChecklistItem, Epic
from taskdown.logging_utils import get_logger

__all__ = [
    "LineKind",
    "LineMatch",
    "ParserOptions",
    "Section",
    "classify_line",
    "parse",
]

logger = get_logger(__name__)

_EPIC_PATTERN = re.compile(r"^## Epic: (?P<title>.+) \((?P<id>[^)]+)\)$")
_CARD_PATTERN = re.compile(r"^### (?P<id>[^:]+): (?P<title>.+)$")
_FIELD_PATTERN = re.compile(r"^\*\*(?P<name>[^*]+)\*\*:\s*(?P<value>.*)$")
_CHECKLIST_PATTERN = re.compile(r"^- \[(?P<marker>.)\] (?P<text>.+)$")
_INTEGER_PREFIX = re.compile(r"^[+-]?[0-9]+")
_WHITESPACE = re.compile(r"\s+")


class LineKind(str, Enum):
    BOARD_TITLE = "board_title"
    EPIC_HEADING = "epic_heading"
    CARD_HEADING = "card_heading"
    METADATA_FIELD = "metadata_field"
    CHECKLIST_ITEM = "checklist_item"
    HORIZONTAL_RULE = "horizontal_rule"
    PROSE = "prose"


class Section(str, Enum):
    NONE = "none"
    ACCEPTANCE_CRITERIA = "acceptanceCriteria"
    TECHNICAL_TASKS = "technicalTasks"


@dataclass(frozen=True)
class ParserOptions:
    """Parser switches kept for compatibility with existing callers.

    Neither flag changes the grammar: unknown fields are always ignored and
    malformed lines are always recovered from.
    """

    strict_mode: bool = False
    allow_unknown_fields: bool = True


@dataclass(frozen=True)
class LineMatch:
    """Classification of a single trimmed line.

    ``captures`` is ``None`` when the line carries its kind's prefix but not
    its full shape (for example an epic heading without an identifier).
    """

    kind: LineKind
    captures: Optional[Mapping[str, str]] = field(default_factory=dict)

    @property
    def is_malformed(self) -> bool:
        return self.captures is None


@dataclass(frozen=True)
class _LineContext:
    has_title: bool
    has_card: bool


def _match_board_title(line: str, context: _LineContext) -> Optional[LineMatch]:
    if context.has_title or not line.startswith("# "):
        return None
    return LineMatch(LineKind.BOARD_TITLE, {"title": line[2:].strip()})


def _match_epic_heading(line: str, context: _LineContext) -> Optional[LineMatch]:
    if not line.startswith("## Epic: "):
        return None
    found = _EPIC_PATTERN.match(line)
    if found is None:
        return LineMatch(LineKind.EPIC_HEADING, None)
    return LineMatch(
        LineKind.EPIC_HEADING, {"id": found.group("id"), "title": found.group("title")}
    )


def _match_card_heading(line: str, context: _LineContext) -> Optional[LineMatch]:
    if not line.startswith("### "):
        return None
    found = _CARD_PATTERN.match(line)
    if found is None:
        return LineMatch(LineKind.CARD_HEADING, None)
    return LineMatch(
        LineKind.CARD_HEADING, {"id": found.group("id"), "title": found.group("title")}
    )


def _match_metadata_field(line: str, context: _LineContext) -> Optional[LineMatch]:
    if not context.has_card or not line.startswith("**") or "**:" not in line:
        return None
    found = _FIELD_PATTERN.match(line)
    if found is None:
        return LineMatch(LineKind.METADATA_FIELD, None)
    name = _WHITESPACE.sub("", found.group("name").lower())
    return LineMatch(
        LineKind.METADATA_FIELD, {"name": name, "value": found.group("value").strip()}
    )


def _match_checklist_item(line: str, context: _LineContext) -> Optional[LineMatch]:
    if not line.startswith("- ["):
        return None
    found = _CHECKLIST_PATTERN.match(line)
    if found is None:
        return LineMatch(LineKind.CHECKLIST_ITEM, None)
    return LineMatch(
        LineKind.CHECKLIST_ITEM,
        {"marker": found.group("marker"), "text": found.group("text")},
    )


def _match_horizontal_rule(line: str, context: _LineContext) -> Optional[LineMatch]:
    if not line.startswith("---"):
        return None
    return LineMatch(LineKind.HORIZONTAL_RULE)


# Priority order matters: a line is never reconsidered by a later matcher.
_MATCHERS: Sequence[Callable[[str, _LineContext], Optional[LineMatch]]] = (
    _match_board_title,
    _match_epic_heading,
    _match_card_heading,
    _match_metadata_field,
    _match_checklist_item,
    _match_horizontal_rule,
)


def classify_line(line: str, *, has_title: bool = False, has_card: bool = False) -> LineMatch:
    """Return the first matching classification for an already-trimmed line."""

    context = _LineContext(has_title=has_title, has_card=has_card)
    for matcher in _MATCHERS:
        result = matcher(line, context)
        if result is not None:
            return result
    return LineMatch(LineKind.PROSE)


@dataclass
class _ScanState:
    board: Board = field(default_factory=Board)
    epic: Optional[Epic] = None
    card: Optional[Card] = None
    section: Section = Section.NONE
    epic_flushed: bool = False

    def flush_card(self) -> None:
        if self.card is not None and self.epic is not None:
            self.epic.cards.append(self.card)

    def flush_epic(self) -> None:
        # An epic kept alive past a malformed heading is already on the board.
        if self.epic is None or self.epic_flushed:
            return
        self.board.epics.append(self.epic)
        self.epic_flushed = True


def _parse_story_points(value: str) -> Optional[int]:
    found = _INTEGER_PREFIX.match(value)
    if found is None:
        return None
    return int(found.group(0), 10)


def _parse_references(value: str) -> list[str]:
    if value == "None":
        return []
    return [token.strip() for token in value.split(",")]


def _apply_board_title(state: _ScanState, captures: Mapping[str, str]) -> None:
    state.board.title = captures["title"]


def _apply_epic_heading(state: _ScanState, captures: Optional[Mapping[str, str]]) -> None:
    state.flush_card()
    state.flush_epic()
    if captures is None:
        logger.debug("Ignoring epic heading without a parenthesised identifier")
    else:
        state.epic = Epic(id=captures["id"], title=captures["title"])
        state.epic_flushed = False
    state.card = None
    state.section = Section.NONE


def _apply_card_heading(state: _ScanState, captures: Optional[Mapping[str, str]]) -> None:
    state.flush_card()
    if captures is None:
        logger.debug("Ignoring card heading without an '<id>: <title>' shape")
        state.card = None
    else:
        state.card = Card(id=captures["id"], title=captures["title"])
        if state.epic is None:
            logger.debug("Card %s appears before any epic and will be dropped", captures["id"])
    state.section = Section.NONE


def _apply_metadata_field(state: _ScanState, captures: Optional[Mapping[str, str]]) -> None:
    card = state.card
    if captures is None or card is None:
        return
    name = captures["name"]
    value = captures["value"]
    if name == "type":
        card.type = value
    elif name == "priority":
        card.priority = value
    elif name == "storypoints":
        card.story_points = _parse_story_points(value)
        if card.story_points is None:
            logger.debug("Card %s has non-numeric story points %r", card.id, value)
    elif name == "sprint":
        card.sprint = value
    elif name == "description":
        card.description = value
    elif name == "dependencies":
        card.dependencies = _parse_references(value)
    elif name == "blocks":
        card.blocks = _parse_references(value)
    elif name == "acceptancecriteria":
        state.section = Section.ACCEPTANCE_CRITERIA
    elif name == "technicaltasks":
        state.section = Section.TECHNICAL_TASKS
    else:
        logger.debug("Ignoring unknown field %r on card %s", name, card.id)


def _apply_checklist_item(state: _ScanState, captures: Optional[Mapping[str, str]]) -> None:
    if captures is None or state.card is None or state.section is Section.NONE:
        return
    item = ChecklistItem(text=captures["text"], completed=captures["marker"] == "x")
    if state.section is Section.ACCEPTANCE_CRITERIA:
        state.card.acceptance_criteria.append(item)
    else:
        state.card.technical_tasks.append(item)


def _apply_horizontal_rule(state: _ScanState, captures: Optional[Mapping[str, str]]) -> None:
    state.section = Section.NONE


_HANDLERS: Mapping[LineKind, Callable[[_ScanState, Optional[Mapping[str, str]]], None]] = {
    LineKind.BOARD_TITLE: _apply_board_title,
    LineKind.EPIC_HEADING: _apply_epic_heading,
    LineKind.CARD_HEADING: _apply_card_heading,
    LineKind.METADATA_FIELD: _apply_metadata_field,
    LineKind.CHECKLIST_ITEM: _apply_checklist_item,
    LineKind.HORIZONTAL_RULE: _apply_horizontal_rule,
}


def parse(text: str, options: Optional[ParserOptions] = None) -> Board:
    """Parse board markdown into a :class:`Board`.

    Args:
        text: Raw markdown. Lines are split on ``\\n`` and trimmed.
        options: Accepted for compatibility; see :class:`ParserOptions`.

    Returns:
        The parsed board. Input without epics yields an empty ``epics`` list.
    """

    state = _ScanState()
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        match = classify_line(
            line,
            has_title=state.board.title is not None,
            has_card=state.card is not None,
        )
        handler = _HANDLERS.get(match.kind)
        if handler is not None:
            handler(state, match.captures)

    state.flush_card()
    state.flush_epic()
    return state.board
