from __future__ import annotations

import random

from models import Cell, Difficulty

from .ai import AIPlayer, AlphaBetaPlayer, LineTally, ScoredHeuristicPlayer, completes_run
from .base import NeighbourBiasedRandomPlayer, Player, RandomPlayer, applied_move

TIERS: dict[Difficulty, type[Player]] = {
    Difficulty.VERY_EASY: RandomPlayer,
    Difficulty.EASY: NeighbourBiasedRandomPlayer,
    Difficulty.MEDIUM: ScoredHeuristicPlayer,
    Difficulty.HARD: AlphaBetaPlayer,
}


def create_player(
    difficulty: Difficulty | str,
    mark: Cell | str,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> Player:
    tier = TIERS[Difficulty.parse(difficulty)]
    return tier(Cell.parse_mark(mark), seed=seed, rng=rng)


__all__ = [
    "Player",
    "RandomPlayer",
    "NeighbourBiasedRandomPlayer",
    "AIPlayer",
    "ScoredHeuristicPlayer",
    "AlphaBetaPlayer",
    "LineTally",
    "TIERS",
    "create_player",
    "applied_move",
    "completes_run",
]
