import re

from .board import Coordinate

# Row letter followed by a 1-based column number, e.g. A1, J10
COORD_RE = re.compile(r"^([A-Z])([1-9][0-9]?)$")


def parse_coord(coord: str, size: int) -> Coordinate:
    """
    Convert a coordinate like 'A1' or 'J10' to a zero-based Coordinate.
    The letter selects the row (y), the number the column (x).
    """
    text = coord.strip().upper()
    m = COORD_RE.match(text)
    if not m:
        raise ValueError(f"Invalid coordinate: {coord!r}")
    y = ord(m.group(1)) - ord("A")
    x = int(m.group(2)) - 1
    if not (0 <= x < size and 0 <= y < size):
        raise ValueError(f"{text} is off the {size}x{size} board")
    return Coordinate(x, y)


def format_coord(coord: Coordinate) -> str:
    """
    Convert a zero-based Coordinate to a string like 'A1'.
    """
    return f"{chr(ord('A') + coord.y)}{coord.x + 1}"


def describe_coord(value: object) -> str:
    """
    Label for a coordinate answer of unknown shape: 'A1' style when it can be
    written that way, its repr otherwise (e.g. a raw tuple or None).
    """
    if isinstance(value, Coordinate) and value.x >= 0 and 0 <= value.y < 26:
        return format_coord(value)
    return repr(value)
