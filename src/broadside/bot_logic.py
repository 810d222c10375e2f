from __future__ import annotations
import random
from typing import Optional, Sequence, Set

from .board import Coordinate
from .coord_utils import format_coord
from .strategy import AttackDecision


class HuntTargetStrategy:
    """
    Hunt / target attack strategy
    -----------------------------
    1. Line extension: when two or more live hits line up, fire just beyond
       either end of the run.
    2. Neighbour probe: otherwise fire at an available orthogonal neighbour
       of any live hit.
    3. Parity hunt: with no live hits, fire the even squares (edges first,
       which keeps early shots off the crowded centre), then whatever is left.

    The choice is recomputed from the public view on every call, so the
    strategy carries no memory between turns beyond its random source.
    """

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    def __init__(self, *, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random(seed)

    # ------------------------------------------------------------------ #
    # Helper utilities
    # ------------------------------------------------------------------ #
    @staticmethod
    def coord_to_str(rc: Coordinate) -> str:
        return format_coord(rc)

    @staticmethod
    def _edge_score(rc: Coordinate, size: int) -> float:
        return abs(rc.x - (size - 1) / 2) + abs(rc.y - (size - 1) / 2)

    # ------------------------------------------------------------------ #
    # Shot selection
    # ------------------------------------------------------------------ #
    def choose_attack(
        self,
        grid_size: int,
        available: Sequence[Coordinate],
        opponent_view: Sequence[Sequence[str]],
        active_hits: Sequence[Coordinate],
    ) -> AttackDecision:
        open_sq: Set[Coordinate] = set(available)
        hits: Set[Coordinate] = set(active_hits)

        if hits:
            ends = self._line_ends(hits, open_sq)
            if ends:
                pick = self._rng.choice(sorted(ends, key=lambda c: (c.y, c.x)))
                return AttackDecision(
                    pick,
                    f"Targeting: extending a line of hits to {self.coord_to_str(pick)}.",
                )
            for hit in sorted(hits, key=lambda c: (c.y, c.x)):
                probes = [n for n in hit.neighbours() if n in open_sq]
                if probes:
                    pick = self._rng.choice(probes)
                    return AttackDecision(
                        pick,
                        f"Targeting: probing {self.coord_to_str(pick)} next to the hit at {self.coord_to_str(hit)}.",
                    )

        return self._hunt(grid_size, open_sq)

    # ------------------------------------------------------------------ #
    # Targeting helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _line_ends(hits: Set[Coordinate], open_sq: Set[Coordinate]) -> Set[Coordinate]:
        """Open squares just past either end of every aligned run of ≥2 hits."""
        ends: Set[Coordinate] = set()
        for hit in hits:
            for dx, dy in ((1, 0), (0, 1)):
                # Only start walking from the low end of a run.
                if Coordinate(hit.x - dx, hit.y - dy) in hits:
                    continue
                run = [hit]
                nxt = Coordinate(hit.x + dx, hit.y + dy)
                while nxt in hits:
                    run.append(nxt)
                    nxt = Coordinate(nxt.x + dx, nxt.y + dy)
                if len(run) < 2:
                    continue
                before = Coordinate(hit.x - dx, hit.y - dy)
                for cand in (before, nxt):
                    if cand in open_sq:
                        ends.add(cand)
        return ends

    # ------------------------------------------------------------------ #
    # Hunting
    # ------------------------------------------------------------------ #
    def _hunt(self, size: int, open_sq: Set[Coordinate]) -> AttackDecision:
        evens = [c for c in open_sq if (c.x + c.y) % 2 == 0]
        if evens:
            # Edges first; random tie-break among equally distant squares.
            best = max(self._edge_score(c, size) for c in evens)
            pool = sorted((c for c in evens if self._edge_score(c, size) == best), key=lambda c: (c.y, c.x))
            pick = self._rng.choice(pool)
            return AttackDecision(pick, f"Hunting: parity sweep at {self.coord_to_str(pick)}.")
        pick = self._rng.choice(sorted(open_sq, key=lambda c: (c.y, c.x)))
        return AttackDecision(pick, f"Hunting: parity squares exhausted, trying {self.coord_to_str(pick)}.")
