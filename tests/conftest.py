import logging
import random
from typing import Iterable, Iterator, List, Sequence

import pytest

from broadside.board import Coordinate
from broadside.fleet import CATALOG, Orientation
from broadside.session import GameSession
from broadside.strategy import AttackDecision, PlacedShip

# Suppress INFO & DEBUG logs from the session during tests
logging.basicConfig(level=logging.WARNING)

# Catalog laid out on every other row from the left edge: (length, row)
LAYOUT = [(d.length, 2 * i) for i, d in enumerate(CATALOG)]


def layout_placements() -> List[PlacedShip]:
    return [PlacedShip(Coordinate(0, row), length, Orientation.HORIZONTAL) for length, row in LAYOUT]


def layout_cells() -> List[Coordinate]:
    """Every cell occupied by LAYOUT, ship by ship."""
    return [Coordinate(x, row) for length, row in LAYOUT for x in range(length)]


def open_water() -> List[Coordinate]:
    """Cells in the two rightmost columns, never covered by LAYOUT on a 10x10 board."""
    return [Coordinate(x, y) for x in (9, 8) for y in range(10)]


class ScriptedPlacement:
    """Placement strategy that replays canned replies (an Exception instance is raised)."""

    def __init__(self, *replies) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[int, list[int]]] = []

    def place_fleet(self, grid_size: int, ship_lengths: Sequence[int]) -> List[PlacedShip]:
        self.calls.append((grid_size, list(ship_lengths)))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return list(reply)


class ScriptedAttack:
    """Attack strategy that fires at a fixed sequence of coordinates."""

    def __init__(self, coords: Iterable[Coordinate]) -> None:
        self._coords: Iterator[Coordinate] = iter(coords)
        self.views: list[tuple] = []

    def choose_attack(self, grid_size, available, opponent_view, active_hits) -> AttackDecision:
        self.views.append((list(available), opponent_view, list(active_hits)))
        return AttackDecision(next(self._coords), "scripted")


class FailingAttack:
    def choose_attack(self, grid_size, available, opponent_view, active_hits) -> AttackDecision:
        raise ConnectionError("opponent unavailable")


def place_layout(session: GameSession) -> None:
    """Place the player's fleet using LAYOUT through the normal setup calls."""
    for _length, row in LAYOUT:
        assert session.place_player_ship(Coordinate(0, row)), session.status


@pytest.fixture
def session_factory():
    """Factory returning a GameSession with scripted collaborators."""

    def _factory(placement=None, attack=None, **kwargs) -> GameSession:
        return GameSession(
            placement or ScriptedPlacement(layout_placements()),
            attack or ScriptedAttack(open_water()),
            size=10,
            rng=random.Random(7),
            **kwargs,
        )

    return _factory


@pytest.fixture
def playing_session(session_factory):
    """Factory for a session already in the PLAYING phase with LAYOUT on both sides."""

    def _factory(**kwargs) -> GameSession:
        session = session_factory(**kwargs)
        place_layout(session)
        assert session.start_game(), session.status
        return session

    return _factory
