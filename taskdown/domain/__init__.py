"""Domain models for Taskdown boards."""

from .board import Board, BoardSummary, Card, ChecklistItem, Epic

__all__ = [
    "Board",
    "BoardSummary",
    "Card",
    "ChecklistItem",
    "Epic",
]
