"""Console front-end: play Broadside against the scripted opponent."""

from __future__ import annotations

import argparse
import logging
import random
from typing import Callable, Optional

from . import config as _cfg
from .board import grid_rows
from .bot_logic import HuntTargetStrategy
from .commands import (
    CommandParseError,
    FireCommand,
    PlaceCommand,
    QuitCommand,
    RandomCommand,
    ResetCommand,
    RotateCommand,
    SelectCommand,
    StartCommand,
    parse_command,
)
from .session import GameSession, Phase, SessionSnapshot, Side
from .strategy import RandomAttackStrategy, RandomPlacementStrategy

logger = logging.getLogger(__name__)

HELP = (
    "Commands: SELECT <ship> | ROTATE | PLACE <coord> | RANDOM | START | "
    "FIRE <coord> | RESET | QUIT"
)


def _print_grid(title: str, rows: list[str], out: Callable[[str], None]) -> None:
    out(f"\n[{title}]")
    columns = len(rows[0].split())
    out("   " + " ".join(f"{i:>2}" for i in range(1, columns + 1)))
    for idx, row in enumerate(rows):
        label = chr(ord("A") + idx)
        formatted = " ".join(f"{c:>2}" for c in row.split())
        out(f"{label:2} {formatted}")


def render(snap: SessionSnapshot, out: Callable[[str], None] = print) -> None:
    """Print both boards, the stats line, the status and the AI's last reasoning."""
    _print_grid("Your fleet", grid_rows(snap.player_board, reveal=True), out)
    if snap.phase is Phase.GAME_OVER:
        _print_grid("Enemy fleet", grid_rows(snap.ai_board, reveal=True), out)
    else:
        _print_grid("Your shots", grid_rows(snap.player_attacks), out)
    if snap.phase is not Phase.SETUP:
        pa, aa = snap.player_attacks, snap.ai_attacks
        out(f"You: {pa.hits} hits / {pa.misses} misses   AI: {aa.hits} hits / {aa.misses} misses")
    elif snap.selected is not None:
        out(f"Placing {snap.selected.value} ({snap.orientation.value})")
    if snap.ai_rationale:
        out(f"AI: {snap.ai_rationale}")
    out(snap.status)


def run(session: GameSession, read_line: Callable[[], Optional[str]], out: Callable[[str], None] = print) -> None:
    """Drive *session* from text commands until QUIT or end of input."""
    out(HELP)
    render(session.snapshot(), out)
    while True:
        line = read_line()
        if line is None:
            return
        if not line.strip():
            continue
        try:
            cmd = parse_command(line, session.size)
        except CommandParseError as e:
            out(f"ERR {e}")
            continue

        if isinstance(cmd, QuitCommand):
            logger.info("Exiting per user request.")
            return
        if isinstance(cmd, SelectCommand):
            session.select_ship(cmd.kind)
        elif isinstance(cmd, RotateCommand):
            session.toggle_orientation()
        elif isinstance(cmd, PlaceCommand):
            session.place_player_ship(cmd.coord)
        elif isinstance(cmd, RandomCommand):
            session.randomize_player_ships()
        elif isinstance(cmd, StartCommand):
            session.start_game()
        elif isinstance(cmd, ResetCommand):
            session.reset()
        elif isinstance(cmd, FireCommand):
            if session.player_attack(cmd.coord) is not None and session.current is Side.AI:
                render(session.snapshot(), out)
                session.play_ai_turn()
        render(session.snapshot(), out)


def main() -> None:  # pragma: no cover – CLI entry
    """Interactive console game."""

    parser = argparse.ArgumentParser(description="Broadside console game")
    parser.add_argument("--seed", type=int, default=_cfg.SEED, help="Seed the random source.")
    parser.add_argument(
        "--simple",
        action="store_true",
        help="Opponent fires at random instead of hunting and targeting.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if (args.debug or _cfg.DEBUG) else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    rng = random.Random(args.seed)
    attack = RandomAttackStrategy(rng=rng) if args.simple else HuntTargetStrategy(rng=rng)
    session = GameSession(RandomPlacementStrategy(rng=rng), attack, rng=rng)

    def _read() -> Optional[str]:
        try:
            return input("> ")
        except EOFError:
            return None

    try:
        run(session, _read)
    except KeyboardInterrupt:
        logger.info("Exiting")


if __name__ == "__main__":  # pragma: no cover
    main()
