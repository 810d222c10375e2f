"""Attack resolution against a side's own BoardState."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .board import BoardState, CellState, Coordinate, is_within_bounds, with_cells
from .fleet import ShipKind


@dataclass(frozen=True, slots=True)
class AttackOutcome:
    """Result of ``resolve_attack``.

    *kind* names the ship that was struck (None on a miss or a repeat shot);
    *sunk_cells* lists every cell of a ship sunk by this attack.
    """

    board: BoardState
    result: CellState
    kind: Optional[ShipKind] = None
    sunk_cells: Tuple[Coordinate, ...] = ()


def resolve_attack(board: BoardState, coord: Coordinate) -> AttackOutcome:
    """Fire at *coord* and return the new board plus a ``HIT``/``MISS``/``SUNK`` result.

    A cell that was already attacked is left alone and its state returned, so
    repeated shots never corrupt the board.
    """
    if not is_within_bounds(coord, board.size):
        raise ValueError(f"attack at ({coord.x}, {coord.y}) is outside the {board.size}x{board.size} grid")

    current = board.cell(coord)
    if current.resolved:
        return AttackOutcome(board, current)

    target = board.ship_at(coord)
    if target is None:
        grid = with_cells(board.grid, {coord: CellState.MISS})
        return AttackOutcome(BoardState(board.size, grid, board.ships), CellState.MISS)

    struck = target.with_hit(coord)
    ships = tuple(struck if s is target else s for s in board.ships)
    if struck.is_sunk:
        grid = with_cells(board.grid, {c: CellState.SUNK for c in struck.coordinates})
        return AttackOutcome(BoardState(board.size, grid, ships), CellState.SUNK, struck.kind, struck.coordinates)

    grid = with_cells(board.grid, {coord: CellState.HIT})
    return AttackOutcome(BoardState(board.size, grid, ships), CellState.HIT, struck.kind)
