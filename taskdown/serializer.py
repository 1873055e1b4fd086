"""Deterministic markdown emitter for :class:`~taskdown.domain.board.Board`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from taskdown.domain.board import Board, Card, ChecklistItem

__all__ = ["SerializerOptions", "serialize"]

# Two trailing spaces force a markdown hard line break.
_HARD_BREAK = "  "


@dataclass(frozen=True)
class SerializerOptions:
    """Formatting switches for :func:`serialize`.

    ``indent_size`` is accepted but has no effect: the grammar has no nested
    list levels.
    """

    include_empty_fields: bool = False
    indent_size: int = 2
    separate_cards_with_hr: bool = True


def _metadata_lines(card: Card, options: SerializerOptions) -> list[str]:
    fields = (
        ("Type", card.type),
        ("Priority", card.priority),
        ("Story Points", card.story_points),
        ("Sprint", card.sprint),
    )
    lines: list[str] = []
    for label, value in fields:
        if value is None and not options.include_empty_fields:
            continue
        rendered = "" if value is None else str(value)
        lines.append(f"**{label}**: {rendered}{_HARD_BREAK}")
        lines.append("")
    return lines


def _checklist_lines(label: str, items: Sequence[ChecklistItem]) -> list[str]:
    if not items:
        return []
    lines = ["", f"**{label}**:", ""]
    for item in items:
        checkbox = "[x]" if item.completed else "[ ]"
        lines.append(f"- {checkbox} {item.text}")
        lines.append("")
    return lines


def _references(values: Optional[Sequence[str]]) -> str:
    if not values:
        return "None"
    return ", ".join(values)


def _card_lines(card: Card, options: SerializerOptions) -> list[str]:
    lines = ["", f"### {card.id}: {card.title}", ""]
    lines.extend(_metadata_lines(card, options))
    if card.description is not None:
        lines.extend(["", f"**Description**: {card.description}", ""])
    lines.extend(_checklist_lines("Acceptance Criteria", card.acceptance_criteria))
    lines.extend(_checklist_lines("Technical Tasks", card.technical_tasks))
    lines.extend(
        [
            "",
            f"**Dependencies**: {_references(card.dependencies)}{_HARD_BREAK}",
            f"**Blocks**: {_references(card.blocks)}",
            "",
        ]
    )
    return lines


def serialize(board: Board, options: Optional[SerializerOptions] = None) -> str:
    """Render ``board`` as Jira-style board markdown.

    The output is joined with ``\\n`` and carries no trailing newline.
    """

    options = options or SerializerOptions()
    lines: list[str] = []

    if board.title is not None:
        lines.extend([f"# {board.title}", ""])

    for epic_index, epic in enumerate(board.epics):
        if epic_index > 0:
            lines.extend(["", ""])
        lines.extend([f"## Epic: {epic.title} ({epic.id})", ""])

        for card_index, card in enumerate(epic.cards):
            if card_index > 0 and options.separate_cards_with_hr:
                lines.extend(["", "---"])
            lines.extend(_card_lines(card, options))

    return "\n".join(lines)
