"""Lightweight event model used by GameSession to decouple game logic from presentation.

The session emits strongly-typed events that a front-end (console, GUI,
logger) can consume without parsing the free-text status line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class Category(Enum):
    """High-level event categories."""

    SETUP = auto()  # ship placement and game start
    TURN = auto()  # per-turn lifecycle (shot, end)
    SYSTEM = auto()  # rejected actions, strategy failures, resets


@dataclass(slots=True)
class Event:
    """Immutable event emitted by GameSession."""

    category: Category
    type: str  # finer-grained identifier, e.g. "shot", "rejected", "ai_error"
    payload: Dict[str, Any]
