"""Ship catalog, ship instances and fleet-wide win detection."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Tuple

from . import config as _cfg
from .board import Coordinate


class ShipKind(str, enum.Enum):
    """Closed set of ship classes in the catalog."""

    CARRIER = "carrier"
    BATTLESHIP = "battleship"
    CRUISER = "cruiser"
    SUBMARINE = "submarine"
    DESTROYER = "destroyer"


class Orientation(str, enum.Enum):
    HORIZONTAL = "horizontal"  # extends +x
    VERTICAL = "vertical"  # extends +y

    def toggled(self) -> "Orientation":
        return Orientation.VERTICAL if self is Orientation.HORIZONTAL else Orientation.HORIZONTAL


@dataclass(frozen=True, slots=True)
class ShipDefinition:
    """Static catalog entry."""

    kind: ShipKind
    name: str
    length: int
    letter: str

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError(f"{self.name} must have a positive length, got {self.length}")

    @property
    def id(self) -> str:
        return self.kind.value


# Resolved once at import from the configured roster.
CATALOG: Tuple[ShipDefinition, ...] = tuple(
    ShipDefinition(ShipKind(name.lower()), name, size, _cfg.SHIP_LETTERS[name]) for name, size in _cfg.SHIPS
)
DEFINITIONS: dict[ShipKind, ShipDefinition] = {d.kind: d for d in CATALOG}


@dataclass(frozen=True, slots=True)
class Ship:
    """
    A placed ship.

    Ships are immutable; the attack engine replaces a ship with ``with_hit()``.
    ``is_sunk`` is derived from the hit list, so it can never disagree with it.
    """

    id: str
    definition: ShipDefinition
    coordinates: Tuple[Coordinate, ...]
    orientation: Orientation
    hits: Tuple[Coordinate, ...] = ()

    def __post_init__(self) -> None:
        if len(self.coordinates) != self.definition.length:
            raise ValueError(
                f"{self.definition.name} needs {self.definition.length} cells, got {len(self.coordinates)}"
            )
        stray = [c for c in self.hits if c not in self.coordinates]
        if stray:
            raise ValueError(f"hits {stray} are not part of {self.id}")
        if len(set(self.hits)) != len(self.hits):
            raise ValueError(f"duplicate hits recorded on {self.id}")

    @property
    def kind(self) -> ShipKind:
        return self.definition.kind

    @property
    def is_sunk(self) -> bool:
        return len(self.hits) == self.definition.length

    def occupies(self, coord: Coordinate) -> bool:
        return coord in self.coordinates

    def with_hit(self, coord: Coordinate) -> "Ship":
        """Return a copy with *coord* appended to the hit list."""
        if coord in self.hits:
            return self
        return Ship(self.id, self.definition, self.coordinates, self.orientation, self.hits + (coord,))


def is_fleet_destroyed(ships: Iterable[Ship]) -> bool:
    """True iff every ship is sunk. An empty fleet is never destroyed."""
    ships = tuple(ships)
    return bool(ships) and all(ship.is_sunk for ship in ships)
