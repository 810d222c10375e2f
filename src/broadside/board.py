"""
board.py

Board model for Broadside: coordinates, cell states and the two per-side views
of the sea:
 - BoardState:   a side's *own* waters (ships visible, plus hits/misses/sunk)
 - AttackRecord: a side's record of shots at the opponent (outcomes only)

Every structure here is immutable. Operations that "change" a board return a
fresh instance and leave the caller's copy untouched, so a snapshot handed to a
renderer or to the opponent's strategy can never be torn by a later turn.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .fleet import Ship


class CellState(str, enum.Enum):
    """State of one grid cell."""

    EMPTY = "empty"
    SHIP = "ship"  # only ever present on the owner's BoardState
    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"

    @property
    def resolved(self) -> bool:
        """True once the cell has been attacked."""
        return self in (CellState.HIT, CellState.MISS, CellState.SUNK)


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Zero-based grid position; *x* is the column, *y* the row."""

    x: int
    y: int

    def neighbours(self) -> Iterator["Coordinate"]:
        """Yield the four orthogonal neighbours (may lie off the board)."""
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            yield Coordinate(self.x + dx, self.y + dy)


Grid = Tuple[Tuple[CellState, ...], ...]

# Glyphs used by grid_rows(); ship cells use the ship's own letter when revealed.
SYMBOLS = {
    CellState.EMPTY: ".",
    CellState.SHIP: "S",
    CellState.HIT: "X",
    CellState.MISS: "o",
    CellState.SUNK: "#",
}


def create_empty_grid(size: int) -> Grid:
    """Return a *size*×*size* grid with every cell ``EMPTY``."""
    if size < 1:
        raise ValueError(f"grid size must be positive, got {size}")
    return tuple(tuple(CellState.EMPTY for _ in range(size)) for _ in range(size))


def is_within_bounds(coord: Coordinate, size: int) -> bool:
    """Return True if *coord* lies on a *size*×*size* grid."""
    return 0 <= coord.x < size and 0 <= coord.y < size


def with_cells(grid: Grid, updates: Mapping[Coordinate, CellState]) -> Grid:
    """Copy *grid* with the cells in *updates* overwritten."""
    if not updates:
        return grid
    rows = [list(row) for row in grid]
    for coord, state in updates.items():
        rows[coord.y][coord.x] = state
    return tuple(tuple(row) for row in rows)


def all_coordinates(size: int) -> Iterator[Coordinate]:
    """Row-major iteration over every coordinate of the grid."""
    for y in range(size):
        for x in range(size):
            yield Coordinate(x, y)


@dataclass(frozen=True, slots=True)
class BoardState:
    """
    A side's own waters.

    *grid* mirrors *ships*: a cell is ``SHIP`` iff exactly one ship occupies it
    and that ship has not recorded a hit there; attacked cells read ``HIT``,
    ``MISS`` or ``SUNK``.
    """

    size: int
    grid: Grid
    ships: Tuple["Ship", ...] = ()

    @classmethod
    def empty(cls, size: int) -> "BoardState":
        return cls(size=size, grid=create_empty_grid(size), ships=())

    def cell(self, coord: Coordinate) -> CellState:
        return self.grid[coord.y][coord.x]

    def ship_at(self, coord: Coordinate) -> "Ship | None":
        for ship in self.ships:
            if ship.occupies(coord):
                return ship
        return None

    def occupied(self) -> set[Coordinate]:
        return {c for ship in self.ships for c in ship.coordinates}


@dataclass(frozen=True, slots=True)
class AttackRecord:
    """A side's record of its shots at the opponent: outcomes only, never ``SHIP``."""

    size: int
    grid: Grid
    hits: int = 0
    misses: int = 0

    @classmethod
    def empty(cls, size: int) -> "AttackRecord":
        return cls(size=size, grid=create_empty_grid(size))

    def cell(self, coord: Coordinate) -> CellState:
        return self.grid[coord.y][coord.x]

    def record(
        self, coord: Coordinate, result: CellState, sunk_cells: Iterable[Coordinate] = ()
    ) -> "AttackRecord":
        """Mirror an attack *result* at *coord*; ``SUNK`` counts as a hit.

        *sunk_cells* are the remaining cells of a ship that has just gone down;
        they flip from ``HIT`` to ``SUNK`` so they stop counting as live targets.
        """
        if not result.resolved:
            raise ValueError(f"cannot record {result.value!r} as an attack result")
        updates = {c: CellState.SUNK for c in sunk_cells}
        updates[coord] = result
        hits, misses = self.hits, self.misses
        if result is CellState.MISS:
            misses += 1
        else:
            hits += 1
        return AttackRecord(self.size, with_cells(self.grid, updates), hits, misses)

    def available(self) -> list[Coordinate]:
        """Coordinates not yet attacked, in row-major order."""
        return [c for c in all_coordinates(self.size) if self.cell(c) is CellState.EMPTY]

    def active_hits(self) -> list[Coordinate]:
        """Hits on ships that are still afloat."""
        return [c for c in all_coordinates(self.size) if self.cell(c) is CellState.HIT]

    def opponent_view(self) -> list[list[str]]:
        """Outcome grid as strings, with unattacked cells reading ``"?"``."""
        return [
            ["?" if cell is CellState.EMPTY else cell.value for cell in row]
            for row in self.grid
        ]


def grid_rows(view: BoardState | AttackRecord, *, reveal: bool = True) -> list[str]:
    """Render *view* as text rows ("A . . X o ..."-style, without labels).

    With *reveal* False, ship cells of a BoardState are drawn as open water.
    """
    letters: dict[Coordinate, str] = {}
    if isinstance(view, BoardState) and reveal:
        for ship in view.ships:
            for c in ship.coordinates:
                letters[c] = ship.definition.letter
    rows: list[str] = []
    for y, row in enumerate(view.grid):
        cells = []
        for x, state in enumerate(row):
            if state is CellState.SHIP:
                cells.append(letters.get(Coordinate(x, y), SYMBOLS[state]) if reveal else SYMBOLS[CellState.EMPTY])
            else:
                cells.append(SYMBOLS[state])
        rows.append(" ".join(cells))
    return rows
