"""Ship placement engine: geometry, validation and randomized search."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from . import config as _cfg
from .board import BoardState, CellState, Coordinate, Grid, is_within_bounds, with_cells
from .fleet import CATALOG, Orientation, Ship, ShipDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlacementResult:
    """Outcome of ``place_ship``; on failure *board* is the unchanged input."""

    board: BoardState
    placed: bool
    ship: Optional[Ship] = None


def occupied_cells(definition: ShipDefinition, anchor: Coordinate, orientation: Orientation) -> list[Coordinate]:
    """Cells covered by a ship anchored at *anchor*. No bounds clamping."""
    if orientation is Orientation.HORIZONTAL:
        return [Coordinate(anchor.x + i, anchor.y) for i in range(definition.length)]
    return [Coordinate(anchor.x, anchor.y + i) for i in range(definition.length)]


def validate_placement(
    grid: Grid,
    existing_ships: Iterable[Ship],
    definition: ShipDefinition,
    anchor: Coordinate,
    orientation: Orientation,
) -> bool:
    """Return True if the ship fits on *grid* without overlapping *existing_ships*.

    Ships may sit next to each other; only shared cells are rejected.
    """
    size = len(grid)
    taken = {c for ship in existing_ships for c in ship.coordinates}
    for coord in occupied_cells(definition, anchor, orientation):
        if not is_within_bounds(coord, size) or coord in taken:
            return False
    return True


def place_ship(
    board: BoardState,
    definition: ShipDefinition,
    anchor: Coordinate,
    orientation: Orientation,
    *,
    ship_id: str | None = None,
) -> PlacementResult:
    """Append a ship to *board*'s fleet and mark its cells ``SHIP``."""
    if not validate_placement(board.grid, board.ships, definition, anchor, orientation):
        logger.debug("invalid placement of %s at %s (%s)", definition.name, anchor, orientation.value)
        return PlacementResult(board, False)
    cells = tuple(occupied_cells(definition, anchor, orientation))
    ship = Ship(ship_id or definition.id, definition, cells, orientation)
    grid = with_cells(board.grid, {c: CellState.SHIP for c in cells})
    return PlacementResult(BoardState(board.size, grid, board.ships + (ship,)), True, ship)


def random_placement(
    definition: ShipDefinition,
    existing_ships: Sequence[Ship],
    grid: Grid,
    max_attempts: int = _cfg.MAX_PLACEMENT_ATTEMPTS,
    *,
    rng: random.Random | None = None,
) -> Optional[Tuple[Coordinate, Orientation]]:
    """Sample random (anchor, orientation) pairs until one is valid.

    Every sample counts against *max_attempts*, repeats included; repeats are
    not re-validated. Returns None when the budget (or the board) is exhausted.
    """
    rnd = rng or random
    size = len(grid)
    tried: set[Tuple[int, int, Orientation]] = set()
    total = size * size * len(Orientation)
    for _ in range(max_attempts):
        if len(tried) == total:
            break
        orientation = rnd.choice(list(Orientation))
        x = rnd.randint(0, size - 1)
        y = rnd.randint(0, size - 1)
        key = (x, y, orientation)
        if key in tried:
            continue
        tried.add(key)
        anchor = Coordinate(x, y)
        if validate_placement(grid, existing_ships, definition, anchor, orientation):
            return anchor, orientation
    logger.debug("no placement found for %s after %d distinct tries", definition.name, len(tried))
    return None


def random_fleet(
    size: int,
    definitions: Sequence[ShipDefinition] = CATALOG,
    *,
    prefix: str = "",
    max_attempts: int = _cfg.MAX_PLACEMENT_ATTEMPTS,
    rng: random.Random | None = None,
) -> Optional[BoardState]:
    """Place every definition at random on an empty board, or return None.

    Either the whole fleet is placed or nothing is; there is no partial result.
    """
    board = BoardState.empty(size)
    for definition in definitions:
        found = random_placement(definition, board.ships, board.grid, max_attempts, rng=rng)
        if found is None:
            return None
        anchor, orientation = found
        board = place_ship(board, definition, anchor, orientation, ship_id=f"{prefix}{definition.id}").board
    return board
