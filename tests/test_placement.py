"""Unit tests for the ship placement engine."""

from __future__ import annotations

import random

import pytest

from broadside.board import BoardState, CellState, Coordinate
from broadside.fleet import CATALOG, DEFINITIONS, Orientation, ShipDefinition, ShipKind
from broadside.placement import (
    occupied_cells,
    place_ship,
    random_fleet,
    random_placement,
    validate_placement,
)

CARRIER = DEFINITIONS[ShipKind.CARRIER]
DESTROYER = DEFINITIONS[ShipKind.DESTROYER]


def _definition(length: int) -> ShipDefinition:
    return ShipDefinition(ShipKind.CRUISER, "Test", length, "T")


@pytest.mark.parametrize("size", [1, 4, 10])
@pytest.mark.parametrize("orientation", list(Orientation))
def test_occupied_cells_are_a_straight_run(size: int, orientation: Orientation) -> None:
    for length in range(1, size + 1):
        cells = occupied_cells(_definition(length), Coordinate(0, 0), orientation)
        assert len(cells) == length
        for a, b in zip(cells, cells[1:]):
            if orientation is Orientation.HORIZONTAL:
                assert (b.x - a.x, b.y - a.y) == (1, 0)
            else:
                assert (b.x - a.x, b.y - a.y) == (0, 1)


def test_occupied_cells_do_not_clamp() -> None:
    cells = occupied_cells(CARRIER, Coordinate(8, 0), Orientation.HORIZONTAL)
    assert cells[-1] == Coordinate(12, 0)


@pytest.mark.parametrize(
    "anchor, orientation",
    [
        (Coordinate(6, 0), Orientation.HORIZONTAL),
        (Coordinate(0, 6), Orientation.VERTICAL),
        (Coordinate(-1, 0), Orientation.HORIZONTAL),
        (Coordinate(0, -1), Orientation.VERTICAL),
        (Coordinate(10, 10), Orientation.VERTICAL),
    ],
)
def test_validate_rejects_out_of_bounds(anchor: Coordinate, orientation: Orientation) -> None:
    board = BoardState.empty(10)
    assert not validate_placement(board.grid, board.ships, CARRIER, anchor, orientation)


def test_validate_rejects_overlap_but_allows_touching() -> None:
    board = place_ship(BoardState.empty(10), CARRIER, Coordinate(2, 4), Orientation.HORIZONTAL).board
    # Crossing the carrier
    assert not validate_placement(board.grid, board.ships, DESTROYER, Coordinate(4, 3), Orientation.VERTICAL)
    # Directly above and right next to it
    assert validate_placement(board.grid, board.ships, DESTROYER, Coordinate(2, 3), Orientation.HORIZONTAL)
    assert validate_placement(board.grid, board.ships, DESTROYER, Coordinate(7, 4), Orientation.HORIZONTAL)


def test_validate_accepts_exact_fit() -> None:
    board = BoardState.empty(10)
    assert validate_placement(board.grid, board.ships, CARRIER, Coordinate(5, 9), Orientation.HORIZONTAL)
    assert validate_placement(board.grid, board.ships, CARRIER, Coordinate(9, 5), Orientation.VERTICAL)


def test_place_ship_returns_new_board() -> None:
    empty = BoardState.empty(10)
    result = place_ship(empty, DESTROYER, Coordinate(3, 3), Orientation.VERTICAL, ship_id="player_destroyer")
    assert result.placed
    assert result.ship is not None and result.ship.id == "player_destroyer"
    assert result.board.cell(Coordinate(3, 3)) is CellState.SHIP
    assert result.board.cell(Coordinate(3, 4)) is CellState.SHIP
    assert result.board.ship_at(Coordinate(3, 4)) == result.ship
    # Input untouched
    assert empty.ships == ()
    assert empty.cell(Coordinate(3, 3)) is CellState.EMPTY


def test_place_ship_reports_invalid_placement() -> None:
    board = place_ship(BoardState.empty(10), CARRIER, Coordinate(0, 0), Orientation.HORIZONTAL).board
    result = place_ship(board, DESTROYER, Coordinate(1, 0), Orientation.VERTICAL)
    assert not result.placed
    assert result.ship is None
    assert result.board is board


def test_random_placement_finds_valid_spot() -> None:
    board = BoardState.empty(10)
    found = random_placement(CARRIER, board.ships, board.grid, rng=random.Random(1))
    assert found is not None
    anchor, orientation = found
    assert validate_placement(board.grid, board.ships, CARRIER, anchor, orientation)


def test_random_placement_reports_full_board() -> None:
    board = BoardState.empty(2)
    board = place_ship(board, DESTROYER, Coordinate(0, 0), Orientation.HORIZONTAL).board
    board = place_ship(board, DESTROYER, Coordinate(0, 1), Orientation.HORIZONTAL, ship_id="second").board
    assert random_placement(DESTROYER, board.ships, board.grid, rng=random.Random(1)) is None


def test_random_placement_respects_attempt_limit() -> None:
    board = BoardState.empty(10)
    assert random_placement(CARRIER, board.ships, board.grid, max_attempts=0) is None


def test_random_fleet_places_whole_catalog() -> None:
    board = random_fleet(10, CATALOG, prefix="ai_", rng=random.Random(3))
    assert board is not None
    assert [s.kind for s in board.ships] == [d.kind for d in CATALOG]
    assert all(s.id.startswith("ai_") for s in board.ships)
    cells = [c for s in board.ships for c in s.coordinates]
    assert len(cells) == len(set(cells)) == 17
    assert sum(cell is CellState.SHIP for row in board.grid for cell in row) == 17


def test_random_fleet_fails_without_partial_result() -> None:
    # Three destroyers cannot share a 2x2 board
    assert random_fleet(2, [DESTROYER, DESTROYER, DESTROYER], rng=random.Random(0)) is None
