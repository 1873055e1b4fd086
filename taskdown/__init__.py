"""Top-level package for Taskdown."""

from __future__ import annotations

from importlib import metadata

from taskdown.domain.board import Board, BoardSummary, Card, ChecklistItem, Epic
from taskdown.parser import ParserOptions, parse
from taskdown.serializer import SerializerOptions, serialize

try:
    __version__: str = metadata.version("taskdown")
except metadata.PackageNotFoundError:  # pragma: no cover - runtime fallback during dev
    __version__ = "0.0.0.dev0"

__all__ = [
    "__version__",
    "Board",
    "BoardSummary",
    "Card",
    "ChecklistItem",
    "Epic",
    "ParserOptions",
    "SerializerOptions",
    "parse",
    "serialize",
]
