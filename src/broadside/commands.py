from dataclasses import dataclass
from typing import Union

from .board import Coordinate
from .coord_utils import parse_coord
from .fleet import CATALOG, ShipKind


class CommandParseError(Exception):
    """Raised when a line cannot be parsed as a valid command."""


@dataclass(frozen=True)
class SelectCommand:
    kind: ShipKind


@dataclass(frozen=True)
class RotateCommand:
    pass


@dataclass(frozen=True)
class PlaceCommand:
    coord: Coordinate


@dataclass(frozen=True)
class RandomCommand:
    pass


@dataclass(frozen=True)
class StartCommand:
    pass


@dataclass(frozen=True)
class FireCommand:
    coord: Coordinate


@dataclass(frozen=True)
class ResetCommand:
    pass


@dataclass(frozen=True)
class QuitCommand:
    pass


Command = Union[
    SelectCommand,
    RotateCommand,
    PlaceCommand,
    RandomCommand,
    StartCommand,
    FireCommand,
    ResetCommand,
    QuitCommand,
]

# Verbs that take no argument
_BARE = {
    "ROTATE": RotateCommand,
    "RANDOM": RandomCommand,
    "START": StartCommand,
    "RESET": ResetCommand,
    "QUIT": QuitCommand,
}

# Ships can be named by kind ("submarine") or by catalog letter ("S")
_SHIP_NAMES = {d.kind.value.upper(): d.kind for d in CATALOG} | {d.letter: d.kind for d in CATALOG}


def _coord_arg(verb: str, parts: list[str], size: int) -> Coordinate:
    if len(parts) < 2 or not parts[1].strip():
        raise CommandParseError(f"{verb} requires a coordinate")
    try:
        return parse_coord(parts[1], size)
    except ValueError as e:
        raise CommandParseError(str(e)) from None


def parse_command(line: str, size: int) -> Command:
    if line is None:
        raise CommandParseError("No command to parse")
    raw = line.strip()
    if not raw:
        raise CommandParseError("Empty command")
    parts = raw.split(maxsplit=1)
    verb = parts[0].upper()
    if verb in _BARE and len(parts) == 1:
        return _BARE[verb]()
    elif verb == "SELECT":
        if len(parts) < 2:
            raise CommandParseError("SELECT requires a ship name")
        kind = _SHIP_NAMES.get(parts[1].strip().upper())
        if kind is None:
            raise CommandParseError(f"Unknown ship: {parts[1].strip()}")
        return SelectCommand(kind=kind)
    elif verb == "PLACE":
        return PlaceCommand(coord=_coord_arg(verb, parts, size))
    elif verb == "FIRE":
        return FireCommand(coord=_coord_arg(verb, parts, size))
    else:
        raise CommandParseError(f"Unknown command: {raw}")
