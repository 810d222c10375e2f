"""Central configuration for runtime-tunable parameters.

All constants can be overridden via environment variables so that the
console game runs with the classic 10×10 rules by default, while the
automated test-suite or a curious player can shrink the board, slow the
opponent down or pin the random seed.
"""

from __future__ import annotations

import os

# ===========================================================================
# Game Constants
# ===========================================================================
# BROADSIDE_BOARD_SIZE: Defines the width and height of the game board.
#   Defaults to 10 (for a 10x10 grid). Rows are labelled with letters, so the
#   console front-end accepts at most 26.
#   Example: export BROADSIDE_BOARD_SIZE=8
BOARD_SIZE: int = int(os.getenv("BROADSIDE_BOARD_SIZE", "10"))

# Standard ship roster: list of (name, size) tuples. Not overridden by env vars.
SHIPS = [
    ("Carrier", 5),
    ("Battleship", 4),
    ("Cruiser", 3),
    ("Submarine", 3),
    ("Destroyer", 2),
]

# Unique single-letter representations for each ship on the board.
SHIP_LETTERS = {
    "Carrier": "A",  # "A" for Aircraft carrier to avoid clash with Cruiser's "C"
    "Battleship": "B",
    "Cruiser": "C",
    "Submarine": "S",
    "Destroyer": "D",
}


# ===========================================================================
# Placement Search
# ===========================================================================
# BROADSIDE_MAX_PLACEMENT_ATTEMPTS: Number of random (anchor, orientation)
#   samples tried for a single ship before the search reports failure.
#   Defaults to 1000.
MAX_PLACEMENT_ATTEMPTS: int = int(os.getenv("BROADSIDE_MAX_PLACEMENT_ATTEMPTS", "1000"))

# BROADSIDE_AI_PLACEMENT_ATTEMPTS: How many times the session asks the opponent's
#   placement strategy for a compliant fleet before giving up on starting the game.
#   Defaults to 3.
AI_PLACEMENT_ATTEMPTS: int = int(os.getenv("BROADSIDE_AI_PLACEMENT_ATTEMPTS", "3"))


# ===========================================================================
# Opponent Timing
# ===========================================================================
# BROADSIDE_AI_DELAY: Delay (in seconds) before a background AI turn asks its
#   attack strategy for a move. Purely cosmetic; 0 disables it.
#   Example: export BROADSIDE_AI_DELAY=1.5
AI_DELAY: float = float(os.getenv("BROADSIDE_AI_DELAY", "0"))


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# BROADSIDE_DEBUG: If "1", enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
DEBUG: bool = os.getenv("BROADSIDE_DEBUG", "0") == "1"

# BROADSIDE_SEED: Optional integer seed for the console game's random source.
#   Unset by default (non-deterministic games).
SEED: int | None = int(os.environ["BROADSIDE_SEED"]) if os.getenv("BROADSIDE_SEED") else None
