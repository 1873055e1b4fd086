"""Board document models shared by the markdown parser and serializer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional, Sequence

__all__ = [
    "Board",
    "BoardSummary",
    "Card",
    "ChecklistItem",
    "Epic",
]


def _require_text(data: Mapping[str, Any], key: str, *, kind: str) -> str:
    value = data.get(key)
    if value is None:
        raise ValueError(f"{kind} requires a '{key}' field.")
    return str(value)


def _optional_text(value: object) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _require_list(data: Mapping[str, Any], key: str, *, kind: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValueError(f"{kind} field '{key}' must be a list.")
    return list(value)


def _optional_references(
    data: Mapping[str, Any], key: str, *, kind: str
) -> Optional[list[str]]:
    if data.get(key) is None:
        return None
    return [str(item) for item in _require_list(data, key, kind=kind)]


def _coerce_story_points(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class ChecklistItem:
    """A single ``- [ ]`` / ``- [x]`` line of a card checklist."""

    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "completed": self.completed}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ChecklistItem":
        if not isinstance(data, Mapping):
            raise ValueError("Checklist item must be an object.")
        text = _require_text(data, "text", kind="Checklist item")
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError("Checklist item field 'completed' must be true or false.")
        return cls(text=text, completed=completed)


@dataclass
class Card:
    """Leaf work item rendered as an H3 heading.

    ``dependencies`` and ``blocks`` stay ``None`` until the source specifies
    them; once set they are always lists, possibly empty.
    """

    id: str
    title: str
    type: Optional[str] = None
    priority: Optional[str] = None
    story_points: Optional[int] = None
    sprint: Optional[str] = None
    description: Optional[str] = None
    acceptance_criteria: list[ChecklistItem] = field(default_factory=list)
    technical_tasks: list[ChecklistItem] = field(default_factory=list)
    dependencies: Optional[list[str]] = None
    blocks: Optional[list[str]] = None

    def to_dict(self) -> MutableMapping[str, object]:
        payload: MutableMapping[str, object] = {"id": self.id, "title": self.title}
        if self.type is not None:
            payload["type"] = self.type
        if self.priority is not None:
            payload["priority"] = self.priority
        if self.story_points is not None:
            payload["storyPoints"] = self.story_points
        if self.sprint is not None:
            payload["sprint"] = self.sprint
        if self.description is not None:
            payload["description"] = self.description
        payload["acceptanceCriteria"] = [
            item.to_dict() for item in self.acceptance_criteria
        ]
        payload["technicalTasks"] = [item.to_dict() for item in self.technical_tasks]
        if self.dependencies is not None:
            payload["dependencies"] = list(self.dependencies)
        if self.blocks is not None:
            payload["blocks"] = list(self.blocks)
        return payload

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Card":
        if not isinstance(data, Mapping):
            raise ValueError("Card must be an object.")
        return cls(
            id=_require_text(data, "id", kind="Card"),
            title=_require_text(data, "title", kind="Card"),
            type=_optional_text(data.get("type")),
            priority=_optional_text(data.get("priority")),
            story_points=_coerce_story_points(data.get("storyPoints")),
            sprint=_optional_text(data.get("sprint")),
            description=_optional_text(data.get("description")),
            acceptance_criteria=[
                ChecklistItem.from_mapping(item)
                for item in _require_list(data, "acceptanceCriteria", kind="Card")
            ],
            technical_tasks=[
                ChecklistItem.from_mapping(item)
                for item in _require_list(data, "technicalTasks", kind="Card")
            ],
            dependencies=_optional_references(data, "dependencies", kind="Card"),
            blocks=_optional_references(data, "blocks", kind="Card"),
        )


@dataclass
class Epic:
    """Named grouping of cards rendered as an H2 heading."""

    id: str
    title: str
    cards: list[Card] = field(default_factory=list)

    def to_dict(self) -> MutableMapping[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "cards": [card.to_dict() for card in self.cards],
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Epic":
        if not isinstance(data, Mapping):
            raise ValueError("Epic must be an object.")
        return cls(
            id=_require_text(data, "id", kind="Epic"),
            title=_require_text(data, "title", kind="Epic"),
            cards=[
                Card.from_mapping(item)
                for item in _require_list(data, "cards", kind="Epic")
            ],
        )


@dataclass(frozen=True)
class BoardSummary:
    """Item counts reported after a parse."""

    epics: int = 0
    cards: int = 0
    acceptance_criteria: int = 0
    technical_tasks: int = 0
    completed_acceptance_criteria: int = 0
    completed_technical_tasks: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "epics": self.epics,
            "cards": self.cards,
            "acceptance_criteria": self.acceptance_criteria,
            "technical_tasks": self.technical_tasks,
            "completed_acceptance_criteria": self.completed_acceptance_criteria,
            "completed_technical_tasks": self.completed_technical_tasks,
        }


@dataclass
class Board:
    """Complete board document: an optional title and its epics."""

    title: Optional[str] = None
    epics: list[Epic] = field(default_factory=list)

    def iter_cards(self):
        for epic in self.epics:
            yield from epic.cards

    def summary(self) -> BoardSummary:
        cards = list(self.iter_cards())
        criteria = [item for card in cards for item in card.acceptance_criteria]
        tasks = [item for card in cards for item in card.technical_tasks]
        return BoardSummary(
            epics=len(self.epics),
            cards=len(cards),
            acceptance_criteria=len(criteria),
            technical_tasks=len(tasks),
            completed_acceptance_criteria=sum(1 for item in criteria if item.completed),
            completed_technical_tasks=sum(1 for item in tasks if item.completed),
        )

    def to_dict(self) -> MutableMapping[str, object]:
        payload: MutableMapping[str, object] = {}
        if self.title is not None:
            payload["title"] = self.title
        payload["epics"] = [epic.to_dict() for epic in self.epics]
        return payload

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Board":
        if not isinstance(data, Mapping):
            raise ValueError("Board document must be a JSON object.")
        return cls(
            title=_optional_text(data.get("title")),
            epics=[
                Epic.from_mapping(item)
                for item in _require_list(data, "epics", kind="Board")
            ],
        )
