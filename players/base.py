from __future__ import annotations

import random
from abc import abstractmethod
from contextlib import contextmanager
from typing import ClassVar

from board import Board
from errors import NoAvailableMoves
from models import Cell, Difficulty, Move


@contextmanager
def applied_move(board: Board, move: Move, mark: Cell):
    board.do_move(move, mark)
    try:
        yield
    finally:
        board.undo_move()


class Player:
    """One difficulty tier.

    Tiers only ever see a (regional) sub-board and answer with a move relative
    to it. Every random choice goes through ``self._rng`` so a seed or an
    injected ``random.Random`` makes the tier reproducible.
    """

    difficulty: ClassVar[Difficulty]

    def __init__(self, mark: Cell, seed: int | None = None, rng: random.Random | None = None):
        self.mark = Cell.parse_mark(mark)
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    def opponent(self) -> Cell:
        return self.mark.opponent

    @abstractmethod
    def get_move(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> Move:
        raise NotImplementedError

    def play(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> tuple[Board, Move]:
        """Pick a move and return a copy of ``board`` with it applied."""

        move = self.get_move(board, last_move, win_length)
        result = board.copy()
        result.do_move(move, self.mark)
        return result, move

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.mark.value!r})"


class RandomPlayer(Player):
    difficulty = Difficulty.VERY_EASY

    def get_move(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> Move:
        moves = board.available_moves()
        if not moves:
            raise NoAvailableMoves("No available moves")
        return self._rng.choice(moves)


class NeighbourBiasedRandomPlayer(RandomPlayer):
    # Random player that answers next to the last move when it can

    difficulty = Difficulty.EASY

    def get_move(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> Move:
        moves = board.available_moves()
        if not moves:
            raise NoAvailableMoves("No available moves")
        if last_move is not None:
            near = [m for m in moves if m.chebyshev(last_move) <= 1]
            if near:
                moves = near
        return self._rng.choice(moves)
