from __future__ import annotations

import random
from contextlib import contextmanager
from functools import cache
from typing import Iterable

from board import Board
from constants import (
    ALPHABETA_DEPTH,
    CENTRALITY_RADIUS,
    LINE_COMPLETE_SCORE,
    LINE_OPP_THREAT_SCORE,
    LINE_OWN_THREAT_SCORE,
    MEDIUM_BLOCK_SCORE,
    MEDIUM_CENTRAL_SCORE,
    MEDIUM_LAST_MOVE_ADJACENT_SCORE,
    MEDIUM_LAST_MOVE_NEAR_SCORE,
    MEDIUM_NEAR_WIN_BLOCK_SCORE,
    MEDIUM_OWN_ADJACENT_SCORE,
    MEDIUM_SCORE_WINDOW,
    MEDIUM_WIN_SCORE,
    WIN_SCORE,
)
from errors import NoAvailableMoves
from models import Cell, D, Difficulty, Move

from .base import Player, applied_move


def completes_run(board: Board, move: Move, mark: Cell, length: int) -> bool:
    """True if ``mark`` at ``move`` would sit on a run of at least ``length``."""

    cells = board.cells
    for d in D:
        dr, dc = d.delta
        run = 1
        for sign in (1, -1):
            r, c = move.row + sign * dr, move.column + sign * dc
            while board.in_bounds(r, c) and cells[r][c] is mark:
                run += 1
                r += sign * dr
                c += sign * dc
        if run >= length:
            return True
    return False


class AIPlayer(Player):
    @staticmethod
    def _win_length(board: Board, win_length: int | None) -> int:
        return board.win_length if win_length is None else win_length

    def winning_moves(self, board: Board, moves: Iterable[Move], mark: Cell, win_length: int) -> list[Move]:
        return [m for m in moves if completes_run(board, m, mark, win_length)]


class ScoredHeuristicPlayer(AIPlayer):
    """Scores every empty cell with a handful of weighted features.

    A move collects points for winning, for blocking a win, for blocking a
    line one short of a win, for sitting in the central 3x3 of the board,
    for touching one of our own marks and for being close to the last move.
    The final pick is random among the moves within ``MEDIUM_SCORE_WINDOW``
    points of the best one, so the tier does not always play the same game.
    """

    difficulty = Difficulty.MEDIUM

    def score_move(self, board: Board, move: Move, last_move: Move | None, win_length: int) -> int:
        me, opp = self.mark, self.opponent
        score = 0

        if completes_run(board, move, me, win_length):
            score += MEDIUM_WIN_SCORE
        if completes_run(board, move, opp, win_length):
            score += MEDIUM_BLOCK_SCORE
        if completes_run(board, move, opp, win_length - 1):
            score += MEDIUM_NEAR_WIN_BLOCK_SCORE

        mid_row = (board.rows - 1) / 2
        mid_column = (board.columns - 1) / 2
        if abs(move.row - mid_row) <= 1 and abs(move.column - mid_column) <= 1:
            score += MEDIUM_CENTRAL_SCORE

        if any(board[n.row, n.column] is me for n in board.neighbours(move)):
            score += MEDIUM_OWN_ADJACENT_SCORE

        if last_move is not None:
            distance = move.chebyshev(last_move)
            if distance <= 1:
                score += MEDIUM_LAST_MOVE_ADJACENT_SCORE
            elif distance == 2:
                score += MEDIUM_LAST_MOVE_NEAR_SCORE

        return score

    def score_moves(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> list[tuple[Move, int]]:
        wl = self._win_length(board, win_length)
        return [(m, self.score_move(board, m, last_move, wl)) for m in board.available_moves()]

    def get_move(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> Move:
        scored = self.score_moves(board, last_move, win_length)
        if not scored:
            raise NoAvailableMoves("No available moves")
        best = max(score for _, score in scored)
        candidates = [m for m, score in scored if score >= best - MEDIUM_SCORE_WINDOW]
        return self._rng.choice(candidates)


@cache
def line_windows(rows: int, columns: int, length: int) -> tuple[list[tuple[int, ...]], list[list[int]]]:
    """Every full line of ``length`` cells on a ``rows`` x ``columns`` grid.

    Cells are flat indices (``row * columns + column``). Also returns, per
    cell, the indices of the lines passing through it.
    """

    windows: list[tuple[int, ...]] = []
    through: list[list[int]] = [[] for _ in range(rows * columns)]
    for row in range(rows):
        for column in range(columns):
            for d in D:
                dr, dc = d.delta
                if not (0 <= row + dr * (length - 1) < rows and 0 <= column + dc * (length - 1) < columns):
                    continue
                cells = tuple((row + dr * i) * columns + column + dc * i for i in range(length))
                for cell in cells:
                    through[cell].append(len(windows))
                windows.append(cells)
    return windows, through


@cache
def line_scores(length: int) -> list[list[int]]:
    """``table[own][theirs]`` is what one line holding those counts adds to the evaluation."""

    table = []
    for own in range(length + 1):
        row = []
        for theirs in range(length + 1):
            empty = length - own - theirs
            score = 0
            if own == length:
                score += LINE_COMPLETE_SCORE
            elif theirs == length:
                score -= LINE_COMPLETE_SCORE
            if own == length - 1 and empty == 1:
                score += LINE_OWN_THREAT_SCORE
            if theirs == length - 1 and empty == 1:
                score -= LINE_OPP_THREAT_SCORE
            if own > 0 and theirs == 0:
                score += own**3
            elif theirs > 0 and own == 0:
                score -= theirs**3
            row.append(score)
        table.append(row)
    return table


class LineTally:
    """Running leaf evaluation of a board from ``mark``'s side.

    Keeps the number of our and the opponent's marks on every line, so
    placing or lifting a mark only touches the lines through that cell.
    """

    def __init__(self, board: Board, mark: Cell, length: int):
        self.mark = mark
        self.columns = board.columns
        self.windows, self.through = line_windows(board.rows, board.columns, length)
        self.table = line_scores(length)

        mid = Move(board.rows // 2, board.columns // 2)
        self.centrality = [
            max(0, CENTRALITY_RADIUS - Move(r, c).manhattan(mid))
            for r in range(board.rows)
            for c in range(board.columns)
        ]

        flat = [cell for row in board.cells for cell in row]
        opp = mark.opponent
        self.own = [sum(1 for i in cells if flat[i] is mark) for cells in self.windows]
        self.theirs = [sum(1 for i in cells if flat[i] is opp) for cells in self.windows]
        self.empty = sum(1 for cell in flat if cell is Cell.EMPTY)
        self.score = sum(self.table[o][t] for o, t in zip(self.own, self.theirs))
        self.score += sum(self.centrality[i] for i, cell in enumerate(flat) if cell is mark)

    def gain(self, move: Move, mark: Cell) -> int:
        """Change in ``score`` if ``mark`` went on the empty cell ``move``."""

        cell = move.row * self.columns + move.column
        table, own, theirs = self.table, self.own, self.theirs
        gain = 0
        if mark is self.mark:
            gain += self.centrality[cell]
            for w in self.through[cell]:
                gain += table[own[w] + 1][theirs[w]] - table[own[w]][theirs[w]]
        else:
            for w in self.through[cell]:
                gain += table[own[w]][theirs[w] + 1] - table[own[w]][theirs[w]]
        return gain

    def place(self, move: Move, mark: Cell) -> None:
        self.score += self.gain(move, mark)
        counts = self.own if mark is self.mark else self.theirs
        for w in self.through[move.row * self.columns + move.column]:
            counts[w] += 1
        self.empty -= 1

    def lift(self, move: Move, mark: Cell) -> None:
        counts = self.own if mark is self.mark else self.theirs
        for w in self.through[move.row * self.columns + move.column]:
            counts[w] -= 1
        self.empty += 1
        self.score -= self.gain(move, mark)


class AlphaBetaPlayer(AIPlayer):
    difficulty = Difficulty.HARD

    def __init__(
        self,
        mark: Cell,
        seed: int | None = None,
        rng: random.Random | None = None,
        depth: int = ALPHABETA_DEPTH,
    ):
        super().__init__(mark, seed=seed, rng=rng)
        self.depth = depth
        self.nodes_searched = 0
        self._tally: LineTally | None = None

    def get_move(self, board: Board, last_move: Move | None = None, win_length: int | None = None) -> Move:
        wl = self._win_length(board, win_length)
        moves = board.available_moves()
        if not moves:
            raise NoAvailableMoves("No available moves")

        wins = self.winning_moves(board, moves, self.mark, wl)
        if wins:
            return wins[0]
        blocks = self.winning_moves(board, moves, self.opponent, wl)
        if blocks:
            return blocks[0]

        self.nodes_searched = 0
        self._tally = LineTally(board, self.mark, wl)
        best_move = moves[0]
        best_value = float("-inf")
        # root keeps row-major order: the first of equal moves wins
        for move in moves:
            with self._placed(board, move, self.mark):
                value = self.alpha_beta(board, move, self.mark, 0, best_value, float("inf"), False, wl)
            if value > best_value:
                best_value = value
                best_move = move
        return best_move

    @contextmanager
    def _placed(self, board: Board, move: Move, mark: Cell):
        tally = self._tally
        assert tally is not None
        tally.place(move, mark)
        try:
            with applied_move(board, move, mark):
                yield
        finally:
            tally.lift(move, mark)

    def _win_value(self, mover: Cell, depth: int) -> int:
        # sooner wins and later losses score better
        return WIN_SCORE - depth if mover is self.mark else depth - WIN_SCORE

    def _leaf_value(self, board: Board, move: Move, mover: Cell, depth: int, win_length: int) -> float:
        # value of the position after ``mover`` plays ``move``, read without playing it
        tally = self._tally
        assert tally is not None
        self.nodes_searched += 1
        if completes_run(board, move, mover, win_length):
            return self._win_value(mover, depth)
        if tally.empty == 1:
            return 0
        return tally.score + tally.gain(move, mover)

    def alpha_beta(
        self,
        board: Board,
        move: Move,
        mover: Cell,
        depth: int,
        a: float,
        b: float,
        maximising: bool,
        win_length: int,
    ) -> float:
        """Minimax value of ``board`` just after ``mover`` played ``move``.

        The position before ``move`` was undecided, so only lines through
        ``move`` can have been completed.
        """

        tally = self._tally
        assert tally is not None
        self.nodes_searched += 1
        if completes_run(board, move, mover, win_length):
            return self._win_value(mover, depth)
        if tally.empty == 0:
            return 0
        if depth >= self.depth:
            return tally.score

        side = self.mark if maximising else self.opponent
        leaves = depth + 1 >= self.depth
        moves = board.available_moves()
        if not leaves:
            # likely best replies first; only the cut-offs change, not the value
            moves.sort(key=lambda m: tally.gain(m, side), reverse=maximising)

        value = float("-inf") if maximising else float("inf")
        for m in moves:
            if leaves:
                v2 = self._leaf_value(board, m, side, depth + 1, win_length)
            else:
                with self._placed(board, m, side):
                    v2 = self.alpha_beta(board, m, side, depth + 1, a, b, not maximising, win_length)
            if maximising:
                value = max(value, v2)
                a = max(a, v2)
            else:
                value = min(value, v2)
                b = min(b, v2)
            if b <= a:
                break
        return value

    def evaluate(self, board: Board, win_length: int | None = None) -> int:
        """Static score of ``board`` for this player; positive is good for us.

        Every full window of ``win_length`` cells in each scan direction adds
        ``own**3`` when it holds none of the opponent's marks and subtracts
        ``opp**3`` in the mirrored case, on top of fixed bonuses for complete
        and one-short lines. Own marks near the centre earn a little extra.
        """

        return LineTally(board, self.mark, self._win_length(board, win_length)).score
