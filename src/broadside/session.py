"""Human-vs-AI game session for Broadside.

The class in this module owns a *single* match: both sides' boards and
attack records, the turn owner and the phase, and it is the only code that
ever replaces them. Phases run strictly forward:

SETUP       The human selects ships, toggles orientation and places them one
            at a time (or randomizes the whole catalog). ``start_game`` then
            asks the opponent's placement strategy for the AI fleet.
PLAYING     Turns alternate. The human fires through ``player_attack``; the
            AI turn is a separate step (``play_ai_turn``) because the attack
            strategy may be slow. While it is outstanding the human cannot act.
GAME_OVER   Terminal. Only ``reset`` starts a new match.

Every board operation is a pure function returning fresh state, so a
strategy call works from a snapshot taken under the lock and its answer is
applied under the lock afterwards. A ``reset`` in between bumps the
generation counter and the late answer is thrown away.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from . import config as _cfg
from .attack import AttackOutcome, resolve_attack
from .board import AttackRecord, BoardState, CellState, Coordinate, is_within_bounds
from .coord_utils import describe_coord, format_coord
from .events import Category, Event
from .fleet import CATALOG, Orientation, ShipDefinition, ShipKind, is_fleet_destroyed
from .placement import place_ship, random_fleet
from .strategy import (
    AttackStrategy,
    PlacementStrategy,
    StrategyContractError,
    fleet_from_placements,
    substitute_if_unavailable,
)

logger = logging.getLogger(__name__)


class Side(str, Enum):
    PLAYER = "player"
    AI = "ai"

    @property
    def other(self) -> "Side":
        return Side.AI if self is Side.PLAYER else Side.PLAYER


class Phase(str, Enum):
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "gameOver"


@dataclass(frozen=True, slots=True)
class OpponentView:
    """What the AI attack strategy is allowed to see."""

    available: List[Coordinate]
    opponent_view: List[List[str]]
    active_hits: List[Coordinate]


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only copy of the session for renderers."""

    phase: Phase
    current: Side
    winner: Optional[Side]
    player_board: BoardState
    player_attacks: AttackRecord
    ai_board: BoardState
    ai_attacks: AttackRecord
    selected: Optional[ShipKind]
    orientation: Orientation
    status: str
    ai_rationale: Optional[str]
    ai_thinking: bool
    setup_error: Optional[str]


class GameSession:
    """A single human-vs-AI match."""

    def __init__(
        self,
        placement_strategy: PlacementStrategy,
        attack_strategy: AttackStrategy,
        *,
        size: int = _cfg.BOARD_SIZE,
        catalog: Sequence[ShipDefinition] = CATALOG,
        rng: random.Random | None = None,
        ai_placement_attempts: int = _cfg.AI_PLACEMENT_ATTEMPTS,
        ai_delay: float = _cfg.AI_DELAY,
    ):
        """Create a session in the SETUP phase.

        Args:
            placement_strategy/attack_strategy: the opponent's collaborators.
            size: board edge length N.
            catalog: ship definitions each side must place exactly once.
            rng: random source for randomized placement and attack fallback.
            ai_placement_attempts: strategy calls allowed per ``start_game``.
            ai_delay: pause before a background AI turn (cosmetic).
        """
        if not catalog:
            raise ValueError("catalog must contain at least one ship")
        if len({d.kind for d in catalog}) != len(catalog):
            raise ValueError("catalog entries must have distinct kinds")
        longest = max(d.length for d in catalog)
        if size < longest:
            raise ValueError(f"a {size}x{size} board cannot hold a ship of length {longest}")

        self.placement_strategy = placement_strategy
        self.attack_strategy = attack_strategy
        self.size = size
        self.catalog: tuple[ShipDefinition, ...] = tuple(catalog)
        self._definitions = {d.kind: d for d in self.catalog}
        self._rng = rng or random.Random()
        self.ai_placement_attempts = max(1, ai_placement_attempts)
        self.ai_delay = ai_delay

        self._lock = threading.RLock()
        self._subs: List[Callable[[Event], None]] = []
        self._generation = 0
        self._ai_pending = False
        self.reset()

    # -------------------- lifecycle --------------------
    def reset(self) -> None:
        """Discard the current match and return to an empty SETUP phase."""
        with self._lock:
            self._generation += 1
            self._ai_pending = False
            self.boards = {side: BoardState.empty(self.size) for side in Side}
            self.attacks = {side: AttackRecord.empty(self.size) for side in Side}
            self.current = Side.PLAYER
            self.phase = Phase.SETUP
            self.winner: Optional[Side] = None
            self.selected: Optional[ShipKind] = self.catalog[0].kind
            self.orientation = Orientation.HORIZONTAL
            self.status = "Place your ships."
            self.ai_rationale: Optional[str] = None
            self.ai_thinking = False
            self.setup_error: Optional[str] = None
            self._emit(Event(Category.SYSTEM, "reset", {"generation": self._generation}))

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                phase=self.phase,
                current=self.current,
                winner=self.winner,
                player_board=self.boards[Side.PLAYER],
                player_attacks=self.attacks[Side.PLAYER],
                ai_board=self.boards[Side.AI],
                ai_attacks=self.attacks[Side.AI],
                selected=self.selected,
                orientation=self.orientation,
                status=self.status,
                ai_rationale=self.ai_rationale,
                ai_thinking=self.ai_thinking,
                setup_error=self.setup_error,
            )

    # -------------------- setup phase --------------------
    def placed_kinds(self) -> set[ShipKind]:
        return {ship.kind for ship in self.boards[Side.PLAYER].ships}

    @property
    def can_start(self) -> bool:
        return self.placed_kinds() == set(self._definitions)

    def _next_unplaced(self) -> Optional[ShipDefinition]:
        placed = self.placed_kinds()
        return next((d for d in self.catalog if d.kind not in placed), None)

    def select_ship(self, kind: ShipKind) -> bool:
        """Choose which catalog ship the next ``place_player_ship`` puts down."""
        with self._lock:
            if not self._setup_open():
                return False
            definition = self._definitions.get(kind)
            if definition is None:
                return self._reject(f"{kind} is not part of this fleet.")
            if kind in self.placed_kinds():
                return self._reject(f"{definition.name} is already placed.")
            self.selected = kind
            self.status = f"Place your {definition.name}."
            return True

    def toggle_orientation(self) -> Orientation:
        """Flip the placement orientation; outside setup it is left unchanged."""
        with self._lock:
            if not self._setup_open():
                return self.orientation
            self.orientation = self.orientation.toggled()
            return self.orientation

    def place_player_ship(self, anchor: Coordinate) -> bool:
        """Place the selected ship with its first cell at *anchor*."""
        with self._lock:
            if not self._setup_open():
                return False
            if self.selected is None:
                return self._reject("Select a ship to place first.")
            definition = self._definitions[self.selected]
            if definition.kind in self.placed_kinds():
                return self._reject("Ship already placed or not selected.")
            result = place_ship(
                self.boards[Side.PLAYER],
                definition,
                anchor,
                self.orientation,
                ship_id=f"{Side.PLAYER.value}_{definition.id}",
            )
            if not result.placed:
                return self._reject("Cannot place ship here. Check bounds or overlap.")

            self.boards[Side.PLAYER] = result.board
            nxt = self._next_unplaced()
            self.selected = nxt.kind if nxt else None
            self.status = f"Place your {nxt.name}." if nxt else "All ships placed. Ready to start!"
            self._emit(
                Event(
                    Category.SETUP,
                    "placed",
                    {"ship": definition.kind, "anchor": anchor, "orientation": self.orientation},
                )
            )
            return True

    def randomize_player_ships(self) -> bool:
        """Replace the player's fleet with a random full-catalog placement.

        On failure the board is cleared; nothing partial is kept.
        """
        with self._lock:
            if not self._setup_open():
                return False
            board = random_fleet(self.size, self.catalog, prefix=f"{Side.PLAYER.value}_", rng=self._rng)
            if board is None:
                self.boards[Side.PLAYER] = BoardState.empty(self.size)
                self.selected = self.catalog[0].kind
                self.status = "Could not place all ships randomly. Please try again or place manually."
                logger.info("random placement of the player fleet failed")
                self._emit(Event(Category.SETUP, "randomized", {"ok": False}))
                return False
            self.boards[Side.PLAYER] = board
            self.selected = None
            self.status = "Random placement complete. Ready to start!"
            self._emit(Event(Category.SETUP, "randomized", {"ok": True}))
            return True

    def start_game(self) -> bool:
        """Obtain the AI fleet and move to PLAYING.

        The placement strategy is asked up to ``ai_placement_attempts`` times;
        every reply must contain exactly one in-bounds, non-overlapping ship per
        catalog entry. If none does, the session stays in SETUP with
        ``setup_error`` set and the player may try again.
        """
        with self._lock:
            if not self._setup_open():
                return False
            if not self.can_start:
                return self._reject("Please place all your ships before starting.")
            self.ai_thinking = True
            self.status = "AI is placing its ships..."
            generation = self._generation
            lengths = [d.length for d in self.catalog]

        board: Optional[BoardState] = None
        error = ""
        for attempt in range(1, self.ai_placement_attempts + 1):
            try:
                placements = self.placement_strategy.place_fleet(self.size, list(lengths))
                board = fleet_from_placements(self.size, placements, self.catalog, prefix=f"{Side.AI.value}_")
                break
            except StrategyContractError as exc:
                error = str(exc)
                logger.warning("AI placement attempt %d/%d rejected: %s", attempt, self.ai_placement_attempts, exc)
            except Exception as exc:  # noqa: BLE001 – any strategy failure is a setup failure
                error = f"placement strategy failed: {exc}"
                logger.exception("AI placement attempt %d/%d failed", attempt, self.ai_placement_attempts)

        with self._lock:
            if generation != self._generation:
                logger.debug("discarding AI placement for a session that was reset")
                return False
            self.ai_thinking = False
            if board is None:
                self.setup_error = error
                self.status = "Error with AI setup. Please try starting again."
                logger.error("AI fleet rejected after %d attempts: %s", self.ai_placement_attempts, error)
                self._emit(Event(Category.SYSTEM, "setup_error", {"error": error}))
                return False
            self.boards[Side.AI] = board
            self.setup_error = None
            self.phase = Phase.PLAYING
            self.current = Side.PLAYER
            self.status = "Game started! Your turn to attack."
            logger.info("game started on a %dx%d board", self.size, self.size)
            self._emit(Event(Category.SETUP, "started", {"size": self.size}))
            return True

    # -------------------- playing phase --------------------
    def player_attack(self, coord: Coordinate) -> Optional[CellState]:
        """Fire the human's shot at *coord*; returns the result or None if rejected."""
        with self._lock:
            if self.phase is not Phase.PLAYING:
                self._reject("The game is not in progress.")
                return None
            if self.current is not Side.PLAYER or self.ai_thinking:
                self._reject("Not your turn – wait for the AI.")
                return None
            if not is_within_bounds(coord, self.size):
                self._reject(f"{describe_coord(coord)} is off the board.")
                return None
            if self.attacks[Side.PLAYER].cell(coord).resolved:
                self._reject(f"Already fired at {format_coord(coord)}.")
                return None
            return self._apply_attack(Side.PLAYER, coord)

    def ai_view(self) -> OpponentView:
        """Public information handed to the AI attack strategy."""
        with self._lock:
            record = self.attacks[Side.AI]
            return OpponentView(record.available(), record.opponent_view(), record.active_hits())

    def play_ai_turn(self) -> Optional[CellState]:
        """Run one AI turn to completion.

        Returns the attack result, or None when it is not the AI's turn, the
        strategy failed (the turn passes back to the player) or the session
        was reset while the strategy was thinking.
        """
        with self._lock:
            if self.phase is not Phase.PLAYING or self.current is not Side.AI or not self.ai_thinking:
                logger.debug("play_ai_turn() ignored – phase=%s current=%s", self.phase.value, self.current.value)
                return None
            if self._ai_pending:
                logger.debug("play_ai_turn() ignored – a request is already outstanding")
                return None
            self._ai_pending = True
            generation = self._generation
            view = self.ai_view()

        # Win detection runs after every shot, so a live game always has targets.
        assert view.available, "AI asked to attack with no coordinates left"

        try:
            decision = self.attack_strategy.choose_attack(
                self.size, view.available, view.opponent_view, view.active_hits
            )
            checked = substitute_if_unavailable(decision, view.available, self._rng)
        except Exception:  # noqa: BLE001 – a failing strategy forfeits the turn
            logger.exception("AI attack strategy failed")
            with self._lock:
                if generation != self._generation:
                    return None
                self._ai_pending = False
                self.ai_thinking = False
                self.current = Side.PLAYER
                self.status = "AI failed to make a move. Your turn again."
                self._emit(Event(Category.SYSTEM, "ai_error", {}))
            return None

        with self._lock:
            if generation != self._generation:
                logger.debug("discarding AI attack for a session that was reset")
                return None
            self._ai_pending = False
            if checked is not decision:
                self._emit(
                    Event(
                        Category.SYSTEM,
                        "fallback",
                        {"requested": decision.coordinate, "used": checked.coordinate},
                    )
                )
            self.ai_rationale = checked.rationale
            return self._apply_attack(Side.AI, checked.coordinate)

    def play_ai_turn_in_background(self, delay: float | None = None) -> threading.Thread:
        """Start ``play_ai_turn`` on a daemon thread and return the thread."""
        pause = self.ai_delay if delay is None else delay

        def _run() -> None:
            if pause > 0:
                time.sleep(pause)
            self.play_ai_turn()

        worker = threading.Thread(target=_run, name="broadside-ai-turn", daemon=True)
        worker.start()
        return worker

    # -------------------- internal utilities --------------------
    def _apply_attack(self, attacker: Side, coord: Coordinate) -> CellState:
        """Resolve, mirror, check for a win and pass the turn. Caller holds the lock."""
        defender = attacker.other
        outcome = resolve_attack(self.boards[defender], coord)
        self.boards[defender] = outcome.board
        self.attacks[attacker] = self.attacks[attacker].record(coord, outcome.result, outcome.sunk_cells)
        message = self._describe(attacker, outcome)
        self._emit(
            Event(
                Category.TURN,
                "shot",
                {"attacker": attacker, "coord": coord, "result": outcome.result, "ship": outcome.kind},
            )
        )

        if is_fleet_destroyed(self.boards[defender].ships):
            self.phase = Phase.GAME_OVER
            self.winner = attacker
            self.ai_thinking = False
            ending = "Congratulations! You won!" if attacker is Side.PLAYER else "Game Over. AI wins."
            self.status = f"{message} {ending}"
            logger.info("game over – %s wins", attacker.value)
            record = self.attacks[attacker]
            self._emit(
                Event(
                    Category.TURN,
                    "end",
                    {"winner": attacker, "shots": record.hits + record.misses},
                )
            )
        else:
            self.current = defender
            self.ai_thinking = defender is Side.AI
            self.status = f"{message} AI's turn." if defender is Side.AI else f"{message} Your turn."
        return outcome.result

    def _describe(self, attacker: Side, outcome: AttackOutcome) -> str:
        name = self._definitions[outcome.kind].name if outcome.kind else None
        if attacker is Side.PLAYER:
            if outcome.result is CellState.SUNK:
                return f"You sunk AI's {name}!"
            if outcome.result is CellState.HIT:
                return f"You hit AI's {name}!"
            return "Your shot missed."
        if outcome.result is CellState.SUNK:
            return f"AI sunk your {name}!"
        if outcome.result is CellState.HIT:
            return f"AI hit your {name}!"
        return "AI's shot missed."

    def _setup_open(self) -> bool:
        if self.phase is not Phase.SETUP:
            return self._reject("Ships can only be arranged during setup.")
        if self.ai_thinking:
            return self._reject("Wait for the AI to finish placing its ships.")
        return True

    def _reject(self, message: str) -> bool:
        logger.debug("rejected: %s", message)
        self.status = message
        self._emit(Event(Category.SYSTEM, "rejected", {"message": message}))
        return False

    # -------------------- event bus --------------------
    def subscribe(self, cb: Callable[[Event], None]) -> None:
        """Allow external components (front-end/logger) to receive game events."""
        self._subs.append(cb)

    def _emit(self, ev: Event) -> None:
        for cb in tuple(self._subs):
            try:
                cb(ev)
            except Exception:  # noqa: BLE001
                # A misbehaving subscriber must not break the game
                logger.exception("event subscriber failed for %s", ev.type)
