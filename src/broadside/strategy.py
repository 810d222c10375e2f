"""Opponent strategy boundary.

The session asks two pluggable collaborators for the AI's moves:

``PlacementStrategy.place_fleet(grid_size, ship_lengths)``
    returns one ``PlacedShip`` per requested length.

``AttackStrategy.choose_attack(grid_size, available, opponent_view, active_hits)``
    returns an ``AttackDecision`` whose coordinate should be one of *available*.

Both only ever see public information. Whatever backs them (a scripted
heuristic, a remote model, a human on another terminal) the session checks
their answers here before anything touches the game state.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Protocol, Sequence

from .board import BoardState, Coordinate
from .coord_utils import describe_coord, format_coord
from .fleet import CATALOG, Orientation, ShipDefinition
from .placement import place_ship, random_fleet

logger = logging.getLogger(__name__)


class StrategyContractError(Exception):
    """Raised when a strategy's answer breaks the placement contract."""


@dataclass(frozen=True, slots=True)
class PlacedShip:
    anchor: Coordinate
    length: int
    orientation: Orientation


@dataclass(frozen=True, slots=True)
class AttackDecision:
    coordinate: Coordinate
    rationale: str = ""


class PlacementStrategy(Protocol):
    def place_fleet(self, grid_size: int, ship_lengths: Sequence[int]) -> list[PlacedShip]: ...


class AttackStrategy(Protocol):
    def choose_attack(
        self,
        grid_size: int,
        available: Sequence[Coordinate],
        opponent_view: Sequence[Sequence[str]],
        active_hits: Sequence[Coordinate],
    ) -> AttackDecision: ...


# ---------------------------------------------------------------------------
# Contract enforcement
# ---------------------------------------------------------------------------

def fleet_from_placements(
    grid_size: int,
    placements: Sequence[PlacedShip],
    definitions: Sequence[ShipDefinition] = CATALOG,
    *,
    prefix: str = "ai_",
) -> BoardState:
    """Build a BoardState from a strategy's placements.

    Each placement consumes one unused definition of the same length. The
    reply must cover the catalog exactly and every ship must be in bounds and
    clear of the others; otherwise ``StrategyContractError`` is raised and
    nothing is built.
    """
    if len(placements) != len(definitions):
        raise StrategyContractError(f"expected {len(definitions)} ships, strategy returned {len(placements)}")

    unused = list(definitions)
    board = BoardState.empty(grid_size)
    for placed in placements:
        match = next((d for d in unused if d.length == placed.length), None)
        if match is None:
            raise StrategyContractError(f"no unplaced ship of length {placed.length} in the catalog")
        unused.remove(match)
        try:
            orientation = Orientation(placed.orientation)
        except ValueError:
            raise StrategyContractError(f"unknown orientation {placed.orientation!r}") from None
        result = place_ship(board, match, placed.anchor, orientation, ship_id=f"{prefix}{match.id}")
        if not result.placed:
            raise StrategyContractError(
                f"{match.name} at {describe_coord(placed.anchor)} {orientation.value} "
                "is out of bounds or overlaps another ship"
            )
        board = result.board
    return board


def substitute_if_unavailable(
    decision: AttackDecision,
    available: Sequence[Coordinate],
    rng: random.Random | None = None,
) -> AttackDecision:
    """Return *decision* if its coordinate is available, else a random available one.

    The substitute keeps the original rationale, prefixed with a note on what
    was replaced. Anything that is not one of the *available* Coordinates is
    replaced, including malformed values such as raw tuples or ``None`` from a
    loosely typed reply. *available* must not be empty.
    """
    assert available, "attack requested with no coordinates left to attack"
    bad = decision.coordinate
    if isinstance(bad, Coordinate) and bad in available:
        return decision
    chosen = (rng or random).choice(list(available))
    shown = describe_coord(bad)
    logger.warning("AI chose unavailable coordinate %s; substituting %s", shown, format_coord(chosen))
    return replace(
        decision,
        coordinate=chosen,
        rationale=(
            f"AI original choice was invalid ({shown}). Fallback to random available "
            f"coordinate. Original reasoning: {decision.rationale}"
        ),
    )


# ---------------------------------------------------------------------------
# Reference strategies
# ---------------------------------------------------------------------------

class RandomPlacementStrategy:
    """Places the requested lengths with the engine's own random search."""

    def __init__(self, *, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random(seed)

    def place_fleet(self, grid_size: int, ship_lengths: Sequence[int]) -> list[PlacedShip]:
        # Reuse catalog entries where the length matches; other lengths get an
        # ad-hoc definition whose kind is a placeholder the search never reads.
        spare = list(CATALOG)
        definitions = []
        for i, length in enumerate(ship_lengths):
            match = next((d for d in spare if d.length == length), None)
            if match is not None:
                spare.remove(match)
                definitions.append(match)
            else:
                definitions.append(ShipDefinition(CATALOG[0].kind, f"Ship {i + 1}", length, "?"))
        board = random_fleet(grid_size, definitions, rng=self._rng)
        if board is None:
            raise RuntimeError(f"could not fit ships {list(ship_lengths)} on a {grid_size}x{grid_size} grid")
        return [PlacedShip(s.coordinates[0], s.definition.length, s.orientation) for s in board.ships]


class RandomAttackStrategy:
    """Fires at a uniformly random available square."""

    def __init__(self, *, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random(seed)

    def choose_attack(self, grid_size, available, opponent_view, active_hits) -> AttackDecision:
        coord = self._rng.choice(list(available))
        return AttackDecision(coord, f"Random shot at {format_coord(coord)}.")
